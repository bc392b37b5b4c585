"""
Claim Session

Keeps a recipient's claim state current while the connected account or
chain changes. The session subscribes to a ChainConnectivity; on every
account change it rebinds the ledger to the new signer and recomputes the
claim state, and a switch to an unexpected chain clears it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from core.claims.reconciler import ClaimReceipt, ClaimReconciler, ClaimState
from core.codec.leaf_codec import format_ether
from core.distribution.distribution import Distribution
from core.ledger.base import LedgerClient
from core.ledger.connectivity import ChainConnectivity
from core.schemas.errors import LedgerException, ValidationException


logger = logging.getLogger(__name__)

LedgerFactory = Callable[[Optional[str]], LedgerClient]


@dataclass(frozen=True)
class Balances:
    unlocked: int
    claimed: int

    def to_dict(self) -> dict[str, str]:
        return {
            "unlocked": format_ether(self.unlocked),
            "claimed": format_ether(self.claimed),
        }


class ClaimSession:
    """
    Claim state for whichever account is currently connected.

    Usage:
        session = ClaimSession(distribution, ledger.as_account, connectivity)
        connectivity.notify_chain_changed(97)
        connectivity.notify_accounts_changed(["0xabc..."])
        session.state.status  # ClaimStatus.CLAIMABLE
        session.close()
    """

    def __init__(
        self,
        distribution: Distribution,
        ledger_factory: LedgerFactory,
        connectivity: ChainConnectivity,
        *,
        check_root: bool = True,
    ) -> None:
        self.distribution = distribution
        self.connectivity = connectivity
        self._ledger_factory = ledger_factory
        self._check_root = check_root
        self._reconciler: Optional[ClaimReconciler] = None
        self._state: Optional[ClaimState] = None
        self._unsubscribe = [
            connectivity.on_accounts_changed(self._handle_account),
            connectivity.on_chain_changed(self._handle_chain),
        ]
        if connectivity.account:
            self._handle_account(connectivity.account)

    @property
    def account(self) -> Optional[str]:
        return self.connectivity.account

    @property
    def state(self) -> Optional[ClaimState]:
        """Last computed state, or None while disconnected or off-chain."""
        return self._state

    def refresh(self) -> Optional[ClaimState]:
        """Recompute the claim state from the ledger."""
        if self._reconciler is None or not self.connectivity.on_expected_chain:
            self._state = None
            return None
        self._state = self._reconciler.status(self.connectivity.account)
        return self._state

    def balances(self) -> Balances:
        ledger = self._require_reconciler().ledger
        account = self.connectivity.account
        return Balances(
            unlocked=ledger.unlocked_balance(account),
            claimed=ledger.cumulative_claimed(account),
        )

    def claim(self) -> ClaimReceipt:
        """
        Claim for the connected account, then refresh.

        Raises:
            LedgerException: If connected to the wrong chain
            ValidationException: If no account is connected
        """
        reconciler = self._require_reconciler()
        if not self.connectivity.on_expected_chain:
            raise LedgerException(
                f"Connected to chain {self.connectivity.chain_id}, "
                f"expected {self.connectivity.expected_chain_id}",
                details={
                    "chain_id": self.connectivity.chain_id,
                    "expected_chain_id": self.connectivity.expected_chain_id,
                },
            )
        receipt = reconciler.claim(self.connectivity.account)
        self.refresh()
        return receipt

    def close(self) -> None:
        """Stop listening for connectivity changes."""
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    def _require_reconciler(self) -> ClaimReconciler:
        if self._reconciler is None:
            raise ValidationException("Connect your wallet first", field_path="account")
        return self._reconciler

    def _handle_account(self, account: Optional[str]) -> None:
        if account is None:
            self._reconciler = None
            self._state = None
            return
        self._reconciler = ClaimReconciler(
            self.distribution,
            self._ledger_factory(account),
            check_root=self._check_root,
        )
        self.refresh()

    def _handle_chain(self, chain_id: int) -> None:
        logger.debug(f"Chain changed to {chain_id}; refreshing claim state")
        self.refresh()


__all__ = [
    "Balances",
    "LedgerFactory",
    "ClaimSession",
]
