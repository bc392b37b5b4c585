"""
Claim flow: reconciling cumulative allocations against the ledger,
publishing roots and tracking a connected recipient.
"""

from .publisher import (
    MESSAGE_UNCHANGED,
    MESSAGE_UPDATED,
    RootPublisher,
    RootUpdateResult,
)
from .reconciler import (
    ClaimReceipt,
    ClaimReconciler,
    ClaimState,
    ClaimStatus,
    compute_claim_state,
)
from .session import Balances, ClaimSession

__all__ = [
    "ClaimStatus",
    "ClaimState",
    "ClaimReceipt",
    "compute_claim_state",
    "ClaimReconciler",
    "RootPublisher",
    "RootUpdateResult",
    "MESSAGE_UNCHANGED",
    "MESSAGE_UPDATED",
    "Balances",
    "ClaimSession",
]
