"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m airdrop_cli generate <allocations.csv|json> [--out PATH] [--unit wei|ether] [--json]
    python -m airdrop_cli proof <address> [--dist PATH] [--json]
    python -m airdrop_cli verify <dump.json> [--root 0x...] [--json] [--debug]
    python -m airdrop_cli status <address> [--dist PATH] [--json]
    python -m airdrop_cli claim [--from ADDRESS] [--dist PATH] [--no-root-check] [--json]
    python -m airdrop_cli root show [--dist PATH] [--json]
    python -m airdrop_cli root publish [ROOT] [--dist PATH] [--from ADDRESS] [--json]
    python -m airdrop_cli config --init

Environment Variables:
    AIRDROP_RPC_URL             JSON-RPC endpoint (falls back to RPC_URL)
    AIRDROP_CONTRACT_ADDRESS    Token contract address
    AIRDROP_SENDER              Node-managed account used for transactions
    AIRDROP_CHAIN_ID            Expected chain id (default: 97)
    AIRDROP_DISTRIBUTION_PATH   Default distribution dump
    AIRDROP_LOG_LEVEL           Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from airdrop_cli.commands import claim, generate, proof, root, status, verify
from airdrop_cli.commands.common import (
    CLIError,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)
from airdrop_cli.config import load_config, get_default_config_template
from core.distribution import DistributionIOError
from core.schemas.errors import AirdropException


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks and detailed checks",
    )


def _add_dist_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dist", "-d",
        type=str,
        default=None,
        help="Distribution dump (default: distribution.path from config)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="airdrop",
        description="Cumulative Merkle airdrop CLI - Build distributions, publish roots, and claim.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./airdrop.json or ~/.config/airdrop/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a distribution from an allocation file",
        description="Read allocations (CSV or JSON), build the Merkle tree and write the dump.",
    )
    generate_parser.add_argument(
        "input",
        type=str,
        help="Allocation file: CSV with address,amount header or JSON list",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the dump (default: stdout)",
    )
    generate_parser.add_argument(
        "--unit",
        type=str,
        choices=["wei", "ether"],
        default=None,
        help="Amount unit in the input (default: from config or wei)",
    )
    _add_output_flags(generate_parser)
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print the allocation and proof for an address",
    )
    proof_parser.add_argument("address", type=str, help="Recipient address")
    _add_dist_flag(proof_parser)
    _add_output_flags(proof_parser)
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a distribution dump offline",
        description="Rehash every leaf and level and check every stored proof.",
    )
    verify_parser.add_argument("path", type=str, help="Distribution dump")
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected root; verification fails if the dump's root differs",
    )
    _add_output_flags(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- status command ---
    status_parser = subparsers.add_parser(
        "status",
        help="Show claim status for an address",
    )
    status_parser.add_argument("address", type=str, help="Recipient address")
    _add_dist_flag(status_parser)
    _add_output_flags(status_parser)
    status_parser.set_defaults(func=status.status_cmd)

    # --- claim command ---
    claim_parser = subparsers.add_parser(
        "claim",
        help="Claim the outstanding allocation for the sender account",
    )
    claim_parser.add_argument(
        "--from",
        dest="sender",
        type=str,
        default=None,
        help="Claiming account (default: ledger.sender from config)",
    )
    claim_parser.add_argument(
        "--no-root-check",
        action="store_true",
        default=False,
        help="Skip comparing the ledger root with the dump root",
    )
    _add_dist_flag(claim_parser)
    _add_output_flags(claim_parser)
    claim_parser.set_defaults(func=claim.claim_cmd)

    # --- root command group ---
    root_parser = subparsers.add_parser(
        "root",
        help="Show or publish the ledger's merkle root",
    )
    root_subparsers = root_parser.add_subparsers(dest="root_command", help="Root commands")

    root_show = root_subparsers.add_parser("show", help="Print the published root")
    root_show.add_argument(
        "--dist", "-d",
        type=str,
        default=None,
        help="Compare with the root of this dump",
    )
    _add_output_flags(root_show)
    root_show.set_defaults(func=root.root_show_cmd)

    root_publish = root_subparsers.add_parser("publish", help="Publish a root")
    root_publish.add_argument(
        "root",
        type=str,
        nargs="?",
        default=None,
        help="0x-prefixed 32-byte root (default: root of --dist)",
    )
    root_publish.add_argument(
        "--from",
        dest="sender",
        type=str,
        default=None,
        help="Owner account (default: ledger.sender from config)",
    )
    _add_dist_flag(root_publish)
    _add_output_flags(root_publish)
    root_publish.set_defaults(func=root.root_publish_cmd)

    root_parser.set_defaults(func=lambda args: root_parser.print_help() or EXIT_SUCCESS)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="airdrop.json",
        help="Path for config file (default: airdrop.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (AIRDROP_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = {
            "unit": config.unit,
            "check_root": config.check_root,
            "log_level": config.log_level,
            "log_file": config.log_file,
            **config.runtime.to_dict(),
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: airdrop config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except AirdropException as e:
        if getattr(args, "json", False):
            print(json.dumps({"ok": False, "error": e.to_error_model().model_dump()}, indent=2))
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (CLIError, DistributionIOError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
