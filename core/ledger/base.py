"""
Ledger Collaborator Interface

The ledger (token contract) is an external system. The core only talks to
it through this narrow interface:

- read_root() / update_root(root): the published Merkle root
- cumulative_claimed(address): monotonically non-decreasing claimed total
- unlocked_balance(address): tokens already released to the holder
- claim(cumulative_amount, proof): submitted from the bound signer account

Writes are at-least-once attempts. Callers must confirm them with a read
before assuming they took effect.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence


class LedgerClient(ABC):
    """
    Abstract ledger client bound to an optional signer account.

    A client with account=None can read but every write must fail.
    """

    @property
    @abstractmethod
    def account(self) -> Optional[str]:
        """Address transactions are sent from, or None for read-only clients."""
        ...

    @abstractmethod
    def read_root(self) -> bytes:
        """Currently published 32-byte Merkle root."""
        ...

    @abstractmethod
    def update_root(self, new_root: bytes) -> str:
        """
        Submit a root update and wait for it to be mined.

        Returns:
            Transaction hash (0x-hex)
        """
        ...

    @abstractmethod
    def cumulative_claimed(self, address: str) -> int:
        """Total amount already claimed by address."""
        ...

    @abstractmethod
    def unlocked_balance(self, address: str) -> int:
        """Balance released to address by claims so far."""
        ...

    @abstractmethod
    def claim(self, cumulative_amount: int, proof: Sequence[bytes]) -> str:
        """
        Claim up to cumulative_amount for the bound account.

        The ledger rejects the call if the proof does not verify against its
        root or if cumulative_amount <= cumulative_claimed(account).

        Returns:
            Transaction hash (0x-hex)
        """
        ...
