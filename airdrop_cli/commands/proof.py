"""
CLI Proof Command

Look up an address in a distribution dump and print its allocation and
proof. Offline; no ledger access.

Usage:
    airdrop proof 0xabc... [--dist distribution.json] [--json]
"""

from __future__ import annotations

from argparse import Namespace

from core.codec import format_ether, parse_address
from airdrop_cli.commands.common import EXIT_SUCCESS, load_dist, print_json


def proof_cmd(args: Namespace) -> int:
    """Execute the proof command."""
    address = parse_address(args.address)
    distribution = load_dist(args)
    entry = distribution.find(address)

    if args.json:
        print_json({
            "address": entry.address,
            "amount": str(entry.amount),
            "treeIndex": entry.tree_index,
            "proof": entry.proof_hex,
            "root": distribution.root_hex,
        })
        return EXIT_SUCCESS

    print(f"address: {entry.address}")
    print(f"amount: {entry.amount} ({format_ether(entry.amount)} tokens)")
    print(f"tree_index: {entry.tree_index}")
    print(f"root: {distribution.root_hex}")
    print(f"proof ({len(entry.proof)}):")
    for node in entry.proof_hex:
        print(f"  {node}")
    return EXIT_SUCCESS
