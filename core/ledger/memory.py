"""
In-Memory Ledger

Reference fake of the token contract's claim rules, for tests and
dry runs. State is shared between clients created with as_account(), so a
publisher and several recipients can act on the same ledger.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Sequence

from core.codec.leaf_codec import encode_leaf, leaf_digest, parse_address
from core.crypto.hashing import keccak256, to_hex
from core.ledger.base import LedgerClient
from core.merkle.merkle_tree import verify_proof
from core.schemas.errors import LedgerException

logger = logging.getLogger(__name__)


ZERO_ROOT = bytes(32)


@dataclass
class LedgerState:
    """Mutable contract storage shared by every client of one ledger."""
    root: bytes = ZERO_ROOT
    owner: Optional[str] = None
    claimed: dict[str, int] = field(default_factory=dict)
    balances: dict[str, int] = field(default_factory=dict)
    transactions: list[dict] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _nonce: itertools.count = field(default_factory=itertools.count, repr=False)

    def next_tx_hash(self, payload: bytes) -> str:
        return to_hex(keccak256(payload + next(self._nonce).to_bytes(8, "big")))


class InMemoryLedger(LedgerClient):
    """
    In-memory stand-in for the token contract.

    Rules enforced (mirroring the contract):
    - updateMerkleRoot only from the owner, when an owner is set
    - claimTokens reverts unless the proof verifies against the root
    - claimTokens reverts unless cumulative_amount > claimed
    - a successful claim credits cumulative_amount - claimed
    """

    def __init__(
        self,
        account: Optional[str] = None,
        *,
        state: Optional[LedgerState] = None,
        root: Optional[bytes] = None,
        owner: Optional[str] = None,
    ) -> None:
        self._account = parse_address(account) if account else None
        self._state = state or LedgerState()
        if root is not None:
            self._state.root = root
        if owner is not None:
            self._state.owner = parse_address(owner)

    @property
    def account(self) -> Optional[str]:
        return self._account

    @property
    def state(self) -> LedgerState:
        return self._state

    def as_account(self, account: Optional[str]) -> "InMemoryLedger":
        """Client for another signer over the same ledger state."""
        return InMemoryLedger(account, state=self._state)

    def read_root(self) -> bytes:
        return self._state.root

    def update_root(self, new_root: bytes) -> str:
        self._require_account("updateMerkleRoot")
        if self._state.owner and self._state.owner.lower() != self._account.lower():
            raise LedgerException(
                "updateMerkleRoot reverted: caller is not the owner",
                details={"account": self._account},
            )
        if len(new_root) != 32:
            raise LedgerException("updateMerkleRoot reverted: root must be 32 bytes")
        with self._state.lock:
            self._state.root = bytes(new_root)
            return self._record("updateMerkleRoot", new_root, {"root": to_hex(new_root)})

    def cumulative_claimed(self, address: str) -> int:
        return self._state.claimed.get(address.lower(), 0)

    def unlocked_balance(self, address: str) -> int:
        return self._state.balances.get(address.lower(), 0)

    def claim(self, cumulative_amount: int, proof: Sequence[bytes]) -> str:
        self._require_account("claimTokens")
        key = self._account.lower()
        leaf = leaf_digest(encode_leaf(self._account, cumulative_amount))
        with self._state.lock:
            if not verify_proof(leaf, list(proof), self._state.root):
                raise LedgerException(
                    "claimTokens reverted: invalid merkle proof",
                    details={"account": self._account, "amount": str(cumulative_amount)},
                )
            claimed = self._state.claimed.get(key, 0)
            if cumulative_amount <= claimed:
                raise LedgerException(
                    "claimTokens reverted: nothing to claim",
                    details={
                        "account": self._account,
                        "amount": str(cumulative_amount),
                        "claimed": str(claimed),
                    },
                )
            self._state.claimed[key] = cumulative_amount
            self._state.balances[key] = (
                self._state.balances.get(key, 0) + cumulative_amount - claimed
            )
            return self._record(
                "claimTokens",
                leaf,
                {"amount": str(cumulative_amount), "delta": str(cumulative_amount - claimed)},
            )

    def _require_account(self, method: str) -> None:
        if self._account is None:
            raise LedgerException(f"{method} requires a signer account; client is read-only")

    def _record(self, method: str, payload: bytes, extra: dict) -> str:
        tx_hash = self._state.next_tx_hash(method.encode() + payload)
        logger.debug(f"{method} from {self._account}: {tx_hash}")
        self._state.transactions.append(
            {"hash": tx_hash, "method": method, "from": self._account, **extra}
        )
        return tx_hash


__all__ = [
    "ZERO_ROOT",
    "LedgerState",
    "InMemoryLedger",
]
