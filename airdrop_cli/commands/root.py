"""
CLI Root Commands

Show or publish the ledger's Merkle root.

Usage:
    airdrop root show [--dist distribution.json] [--json]
    airdrop root publish [0x<root>] [--dist distribution.json] [--json]
"""

from __future__ import annotations

from argparse import Namespace

from core.claims import RootPublisher
from core.crypto.hashing import parse_root, to_hex
from airdrop_cli.commands import common


def root_show_cmd(args: Namespace) -> int:
    """
    Print the published root. With --dist, also report whether it matches
    the dump's root; a mismatch exits with EXIT_VERIFICATION_FAILED.
    """
    ledger = common.build_ledger(args)
    published = ledger.read_root()

    dist_root = None
    if args.dist:
        dist_root = common.load_dist(args).root

    data = {"root": to_hex(published)}
    if dist_root is not None:
        data["distributionRoot"] = to_hex(dist_root)
        data["matches"] = published == dist_root

    if args.json:
        common.print_json(data)
    else:
        print(f"root: {data['root']}")
        if dist_root is not None:
            print(f"distribution root: {data['distributionRoot']}")
            print(f"matches: {str(data['matches']).lower()}")

    if dist_root is not None and published != dist_root:
        return common.EXIT_VERIFICATION_FAILED
    return common.EXIT_SUCCESS


def root_publish_cmd(args: Namespace) -> int:
    """Publish the given root, or the root of the distribution dump."""
    if args.root:
        root = parse_root(args.root, field_path="root")
    else:
        root = common.load_dist(args).root

    ledger = common.build_ledger(args, sender=args.sender, require_sender=True)
    result = RootPublisher(ledger).publish(root)

    if args.json:
        common.print_json(result.to_dict())
        return common.EXIT_SUCCESS

    print(result.message)
    print(f"root: {result.root}")
    if result.tx_hash:
        print(f"tx: {result.tx_hash}")
        print(f"    {common.tx_link(args, result.tx_hash)}")
    return common.EXIT_SUCCESS
