"""
Helpers shared by CLI commands: exit codes, ledger construction and
output formatting.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from typing import Any, Optional

from core.config.runtime import RuntimeConfig
from core.distribution import Distribution, load_distribution
from core.ledger import JsonRpcLedger, LedgerClient


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


class CLIError(Exception):
    """Usage or configuration problem reported to the user as-is."""
    pass


def runtime_config(args: Namespace) -> RuntimeConfig:
    cli_config = getattr(args, "cli_config", None)
    return cli_config.runtime if cli_config is not None else RuntimeConfig()


def distribution_path(args: Namespace) -> str:
    """--dist if given, else the configured distribution path."""
    return getattr(args, "dist", None) or runtime_config(args).distribution.path


def load_dist(args: Namespace, *, verify: bool = False) -> Distribution:
    return load_distribution(distribution_path(args), verify=verify)


def build_ledger(
    args: Namespace,
    *,
    sender: Optional[str] = None,
    require_sender: bool = False,
) -> LedgerClient:
    """
    JSON-RPC ledger from the runtime config.

    Args:
        sender: Overrides the configured sender account
        require_sender: Fail unless a sender is available (for writes)

    Raises:
        CLIError: If the RPC URL (or a required sender) is missing
    """
    config = runtime_config(args)
    if not config.network.rpc_url:
        raise CLIError("No RPC URL configured (set AIRDROP_RPC_URL or network.rpc_url)")
    account = sender or config.ledger.sender
    if require_sender and not account:
        raise CLIError("No sender account configured (set AIRDROP_SENDER or pass --from)")

    ledger = JsonRpcLedger.from_config(config, sender=account)
    logger.debug(f"Using ledger {ledger.contract_address} via {ledger.rpc_url}")
    return ledger


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def tx_link(args: Namespace, tx_hash: str) -> str:
    return runtime_config(args).network.tx_url(tx_hash)
