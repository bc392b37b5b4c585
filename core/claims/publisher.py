"""
Root Publisher

Idempotent publication of a Merkle root to the ledger: a root that is
already published is a no-op, and a submitted update is only reported
successful after the ledger reads back the requested value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from core.crypto.hashing import parse_root, to_hex
from core.ledger.base import LedgerClient
from core.schemas.errors import InconsistentStateException


logger = logging.getLogger(__name__)

MESSAGE_UNCHANGED = "New merkle root is the same as current. No update needed."
MESSAGE_UPDATED = "Merkle root updated successfully"


@dataclass(frozen=True)
class RootUpdateResult:
    message: str
    root: str
    tx_hash: Optional[str] = None

    @property
    def updated(self) -> bool:
        return self.tx_hash is not None

    def to_dict(self) -> dict[str, Any]:
        key = "updatedMerkleRoot" if self.updated else "currentMerkleRoot"
        return {"message": self.message, "txHash": self.tx_hash, key: self.root}


class RootPublisher:
    """Publishes roots through a ledger client bound to the owner account."""

    def __init__(self, ledger: LedgerClient) -> None:
        self.ledger = ledger

    def publish(self, root: Any) -> RootUpdateResult:
        """
        Publish root unless it is already current.

        Args:
            root: 0x-prefixed 32-byte hex string, or 32 raw bytes

        Raises:
            ValidationException: Malformed root (before any ledger call)
            InconsistentStateException: Read-back differs from the request
            LedgerException: Ledger call failed
        """
        if isinstance(root, (bytes, bytearray)) and len(root) == 32:
            requested = bytes(root)
        else:
            requested = parse_root(root)
        requested_hex = to_hex(requested)

        current = self.ledger.read_root()
        if current == requested:
            logger.info(f"Merkle root {requested_hex} already published")
            return RootUpdateResult(message=MESSAGE_UNCHANGED, root=to_hex(current))

        logger.info(f"Updating merkle root {to_hex(current)} -> {requested_hex}")
        tx_hash = self.ledger.update_root(requested)

        observed = self.ledger.read_root()
        if observed != requested:
            logger.error(
                f"Merkle root read-back mismatch: requested={requested_hex} "
                f"observed={to_hex(observed)} tx={tx_hash}"
            )
            raise InconsistentStateException(
                "Merkle root update failed - new value does not match requested value",
                requested=requested_hex,
                observed=to_hex(observed),
                tx_hash=tx_hash,
            )

        logger.info(f"Merkle root updated: {requested_hex} ({tx_hash})")
        return RootUpdateResult(message=MESSAGE_UPDATED, root=requested_hex, tx_hash=tx_hash)


__all__ = [
    "MESSAGE_UNCHANGED",
    "MESSAGE_UPDATED",
    "RootUpdateResult",
    "RootPublisher",
]
