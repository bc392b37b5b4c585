"""
CLI Status Command

Show an address's allocation, claimed total and claimable delta against a
distribution dump, plus the unlocked balance reported by the ledger.

Usage:
    airdrop status 0xabc... [--dist distribution.json] [--json]
"""

from __future__ import annotations

from argparse import Namespace

from core.claims import ClaimReconciler, ClaimStatus
from core.codec import format_ether, parse_address
from airdrop_cli.commands import common


def status_cmd(args: Namespace) -> int:
    """Execute the status command."""
    address = parse_address(args.address)
    distribution = common.load_dist(args)
    ledger = common.build_ledger(args)

    state = ClaimReconciler(distribution, ledger).status(address)
    unlocked = ledger.unlocked_balance(address)

    if args.json:
        common.print_json({
            **state.to_dict(),
            "unlocked": str(unlocked),
            "root": distribution.root_hex,
        })
        return common.EXIT_SUCCESS

    print(f"address: {address}")
    print(f"status: {state.status.value}")
    if state.status is ClaimStatus.NO_ALLOCATION:
        print("No allocation found for your address in the current merkle tree.")
    else:
        print(f"allocation: {format_ether(state.allocation)}")
        print(f"claimed: {format_ether(state.claimed)}")
        print(f"claimable: {format_ether(state.delta)}")
    print(f"unlocked balance: {format_ether(unlocked)}")
    return common.EXIT_SUCCESS
