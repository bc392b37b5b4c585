"""
Common test fixtures shared by all modules.

Provides factory functions for core airdrop data structures:
- raw allocation entries
- Distribution
- InMemoryLedger with a published root

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Any, Optional, Sequence

from core.distribution import Distribution
from core.ledger import InMemoryLedger


# =============================================================================
# Addresses
# =============================================================================

ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"
CAROL = "0x3333333333333333333333333333333333333333"
DAVE = "0x4444444444444444444444444444444444444444"
ERIN = "0x5555555555555555555555555555555555555555"
OWNER = "0x9999999999999999999999999999999999999999"

ADDRESSES = [ALICE, BOB, CAROL, DAVE, ERIN]


# =============================================================================
# Allocation Factories
# =============================================================================

def make_allocations(
    count: int = 3,
    amounts: Optional[Sequence[Any]] = None,
    addresses: Optional[Sequence[str]] = None,
) -> list[dict[str, str]]:
    """
    Create raw allocation entries as accepted by Distribution.build.

    Args:
        count: Number of entries (ignored when amounts is given)
        amounts: Amount per entry; defaults to 100, 200, 300, ...
        addresses: Address per entry; defaults to ADDRESSES in order
    """
    if amounts is None:
        amounts = [str(100 * (i + 1)) for i in range(count)]
    addresses = list(addresses or ADDRESSES)
    return [
        {"address": addresses[i], "amount": str(amount)}
        for i, amount in enumerate(amounts)
    ]


def make_distribution(
    count: int = 3,
    amounts: Optional[Sequence[Any]] = None,
    addresses: Optional[Sequence[str]] = None,
) -> Distribution:
    """Build a Distribution from make_allocations."""
    return Distribution.build(make_allocations(count, amounts, addresses))


# =============================================================================
# Ledger Factories
# =============================================================================

def make_ledger(
    distribution: Optional[Distribution] = None,
    account: Optional[str] = None,
    *,
    owner: str = OWNER,
    claimed: Optional[dict[str, int]] = None,
) -> InMemoryLedger:
    """
    Create an InMemoryLedger, with the distribution's root already published.

    Args:
        distribution: Root to publish (none published when omitted)
        account: Signer for the returned client (owner when omitted)
        owner: Contract owner allowed to update the root
        claimed: Pre-existing cumulative claimed totals per address
    """
    ledger = InMemoryLedger(owner, owner=owner)
    if distribution is not None:
        ledger.update_root(distribution.root)
    for address, amount in (claimed or {}).items():
        ledger.state.claimed[address.lower()] = amount
        ledger.state.balances[address.lower()] = amount
    if account is not None and account != owner:
        return ledger.as_account(account)
    return ledger
