"""
Claim Reconciler

Decides what an address may claim against a Distribution and submits the
claim to the ledger.

Amounts in the tree are cumulative lifetime entitlements. The ledger tracks
the cumulative amount already claimed, so the claimable delta is always
allocation - claimed. The ledger is sent the cumulative allocation, never
the delta, and the claim is only reported successful once a read-back of
the claimed total equals the allocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.crypto.hashing import to_hex
from core.distribution.distribution import Distribution, DistributionEntry
from core.ledger.base import LedgerClient
from core.merkle.merkle_tree import verify_proof
from core.schemas.errors import (
    AlreadyClaimedException,
    InconsistentStateException,
    NotFoundException,
    ValidationException,
)


logger = logging.getLogger(__name__)


class ClaimStatus(str, Enum):
    NO_ALLOCATION = "no_allocation"
    CLAIMABLE = "claimable"
    FULLY_CLAIMED = "fully_claimed"


@dataclass(frozen=True)
class ClaimState:
    """Snapshot of an address's position against one tree."""
    address: str
    allocation: int
    claimed: int
    status: ClaimStatus
    tree_index: Optional[int] = None
    proof: tuple[bytes, ...] = ()

    @property
    def delta(self) -> int:
        return max(self.allocation - self.claimed, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "status": self.status.value,
            "allocation": str(self.allocation),
            "claimed": str(self.claimed),
            "claimable": str(self.delta),
            "treeIndex": self.tree_index,
            "proof": [to_hex(p) for p in self.proof],
        }


@dataclass(frozen=True)
class ClaimReceipt:
    """Outcome of a confirmed claim."""
    address: str
    tx_hash: str
    cumulative_amount: int
    delta: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "txHash": self.tx_hash,
            "cumulativeAmount": str(self.cumulative_amount),
            "delta": str(self.delta),
        }


def compute_claim_state(
    address: str,
    entry: Optional[DistributionEntry],
    claimed: int,
) -> ClaimState:
    """
    Classify an address given its tree entry (or None) and claimed total.

    A claimed total above the allocation (e.g. after a root update lowered
    an entitlement) is FULLY_CLAIMED with a delta of zero.
    """
    if entry is None:
        return ClaimState(
            address=address,
            allocation=0,
            claimed=claimed,
            status=ClaimStatus.NO_ALLOCATION,
        )
    status = ClaimStatus.CLAIMABLE if entry.amount > claimed else ClaimStatus.FULLY_CLAIMED
    return ClaimState(
        address=address,
        allocation=entry.amount,
        claimed=claimed,
        status=status,
        tree_index=entry.tree_index,
        proof=entry.proof,
    )


class ClaimReconciler:
    """
    Claim flow for one distribution against one ledger.

    Usage:
        reconciler = ClaimReconciler(distribution, ledger)
        state = reconciler.status("0xabc...")
        if state.status is ClaimStatus.CLAIMABLE:
            receipt = reconciler.claim("0xabc...")
    """

    def __init__(
        self,
        distribution: Distribution,
        ledger: LedgerClient,
        *,
        check_root: bool = True,
    ) -> None:
        self.distribution = distribution
        self.ledger = ledger
        self.check_root = check_root

    def status(self, address: str) -> ClaimState:
        """
        Current claim state for address.

        Raises:
            AmbiguousAllocationException: If address has several entries
        """
        try:
            entry = self.distribution.find(address)
        except NotFoundException:
            return compute_claim_state(address, None, 0)
        claimed = self.ledger.cumulative_claimed(entry.address)
        return compute_claim_state(address, entry, claimed)

    def claim(self, address: str) -> ClaimReceipt:
        """
        Claim the outstanding delta for address.

        Raises:
            NotFoundException: Address not in the tree
            AmbiguousAllocationException: Address in the tree more than once
            ValidationException: Ledger is not bound to address
            AlreadyClaimedException: Nothing left to claim (no write made)
            InconsistentStateException: Root or read-back mismatch
            LedgerException: Ledger call failed
        """
        entry = self.distribution.find(address)

        account = self.ledger.account
        if account is None or account.lower() != entry.address.lower():
            raise ValidationException(
                f"Ledger signer {account} does not match claiming address {address}",
                field_path="address",
                value=address,
            )

        claimed = self.ledger.cumulative_claimed(entry.address)
        state = compute_claim_state(address, entry, claimed)
        if state.delta <= 0:
            raise AlreadyClaimedException(address, entry.amount, claimed)

        root = self.distribution.root
        if not verify_proof(entry.leaf, list(entry.proof), root):
            raise InconsistentStateException(
                f"Proof for {address} does not verify against the distribution root",
                requested=to_hex(root),
                observed=None,
                details={"tree_index": entry.tree_index},
            )
        if self.check_root:
            ledger_root = self.ledger.read_root()
            if ledger_root != root:
                raise InconsistentStateException(
                    "Ledger root does not match the distribution root",
                    requested=to_hex(root),
                    observed=to_hex(ledger_root),
                )

        logger.info(
            f"Claiming for {address}: cumulative={entry.amount} "
            f"claimed={claimed} delta={state.delta}"
        )
        tx_hash = self.ledger.claim(entry.amount, list(entry.proof))

        observed = self.ledger.cumulative_claimed(entry.address)
        if observed != entry.amount:
            logger.error(
                f"Claim read-back mismatch for {address}: "
                f"requested={entry.amount} observed={observed} tx={tx_hash}"
            )
            raise InconsistentStateException(
                f"Claimed total for {address} is {observed} after claim, expected {entry.amount}",
                requested=str(entry.amount),
                observed=str(observed),
                tx_hash=tx_hash,
            )

        logger.info(f"Claim confirmed for {address}: {tx_hash}")
        return ClaimReceipt(
            address=address,
            tx_hash=tx_hash,
            cumulative_amount=entry.amount,
            delta=state.delta,
        )


__all__ = [
    "ClaimStatus",
    "ClaimState",
    "ClaimReceipt",
    "compute_claim_state",
    "ClaimReconciler",
]
