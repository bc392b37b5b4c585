"""
CLI Claim Command

Claim the outstanding cumulative allocation for the sender account.

Usage:
    airdrop claim [--from 0xabc...] [--dist distribution.json] [--no-root-check] [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace

from core.claims import ClaimReconciler
from core.codec import format_ether
from airdrop_cli.commands import common


logger = logging.getLogger(__name__)


def claim_cmd(args: Namespace) -> int:
    """
    Execute the claim command.

    The ledger is sent the cumulative allocation; the delta is what the
    claim actually releases.
    """
    distribution = common.load_dist(args)
    ledger = common.build_ledger(args, sender=args.sender, require_sender=True)

    cli_config = getattr(args, "cli_config", None)
    check_root = cli_config.check_root if cli_config is not None else True
    if args.no_root_check:
        check_root = False

    receipt = ClaimReconciler(distribution, ledger, check_root=check_root).claim(ledger.account)

    if args.json:
        common.print_json(receipt.to_dict())
        return common.EXIT_SUCCESS

    print("Claim successful!")
    print(f"claimed: {format_ether(receipt.delta)} (cumulative {format_ether(receipt.cumulative_amount)})")
    print(f"tx: {receipt.tx_hash}")
    print(f"    {common.tx_link(args, receipt.tx_hash)}")
    return common.EXIT_SUCCESS
