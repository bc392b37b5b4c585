"""
CLI Generate Command

Build a distribution from an allocation file (CSV or JSON) and write the
dump.

Usage:
    airdrop generate allocations.csv --out distribution.json [--unit ether] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from core.distribution import Distribution, dump_json, read_allocations_file, save_distribution
from airdrop_cli.commands.common import EXIT_SUCCESS, print_json


logger = logging.getLogger(__name__)


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Without --out the dump is written to stdout.
    """
    unit = args.unit or getattr(getattr(args, "cli_config", None), "unit", "wei")
    entries = read_allocations_file(args.input)
    logger.info(f"Read {len(entries)} allocation entries from {args.input}")

    distribution = Distribution.build(entries, unit=unit)

    if not args.out:
        sys.stdout.write(dump_json(distribution))
        return EXIT_SUCCESS

    path = save_distribution(distribution, args.out)
    if args.json:
        print_json({
            "root": distribution.root_hex,
            "count": len(distribution),
            "out": str(path),
        })
    else:
        print(f"root: {distribution.root_hex}")
        print(f"allocations: {len(distribution)}")
        print(f"written: {path}")
    return EXIT_SUCCESS
