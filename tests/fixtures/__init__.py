"""
Test fixtures package for airdrop engine tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: Addresses, allocations, distributions and in-memory ledgers
- ledger_fixtures.py: JSON-RPC transport fake and a recording ledger wrapper

Usage:
    from fixtures import make_distribution, make_ledger

    def test_something():
        dist = make_distribution(count=5)
        ledger = make_ledger(dist, account=ALICE)
"""

from .common import (
    ADDRESSES,
    ALICE,
    BOB,
    CAROL,
    DAVE,
    ERIN,
    OWNER,
    make_allocations,
    make_distribution,
    make_ledger,
)

from .ledger_fixtures import (
    FakeHttpClient,
    RecordingLedger,
    failing_transport,
    rpc_response,
)

__all__ = [
    # Common
    "ADDRESSES",
    "ALICE",
    "BOB",
    "CAROL",
    "DAVE",
    "ERIN",
    "OWNER",
    "make_allocations",
    "make_distribution",
    "make_ledger",
    # Ledger
    "FakeHttpClient",
    "RecordingLedger",
    "failing_transport",
    "rpc_response",
]
