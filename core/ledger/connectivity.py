"""
Chain Connectivity

Observer registry for the signer's account and chain. Whoever owns the
connection (a wallet bridge, a CLI session, a test) calls the notify_*
methods; interested components register callbacks and get back an
unsubscribe function.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from core.codec.leaf_codec import parse_address


logger = logging.getLogger(__name__)

AccountsListener = Callable[[Optional[str]], None]
ChainListener = Callable[[int], None]

BSC_TESTNET_CHAIN_ID = 97


class ChainConnectivity:
    """
    Tracks the active account and chain id.

    Usage:
        connectivity = ChainConnectivity(expected_chain_id=97)
        unsubscribe = connectivity.on_accounts_changed(session.set_account)

        connectivity.notify_accounts_changed(["0xabc..."])
        unsubscribe()
    """

    def __init__(
        self,
        expected_chain_id: int = BSC_TESTNET_CHAIN_ID,
        *,
        account: Optional[str] = None,
        chain_id: Optional[int] = None,
    ) -> None:
        self.expected_chain_id = expected_chain_id
        self._account = parse_address(account) if account else None
        self._chain_id = chain_id
        self._account_listeners: list[AccountsListener] = []
        self._chain_listeners: list[ChainListener] = []

    @property
    def account(self) -> Optional[str]:
        return self._account

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    @property
    def is_connected(self) -> bool:
        return self._account is not None

    @property
    def on_expected_chain(self) -> bool:
        return self._chain_id == self.expected_chain_id

    def on_accounts_changed(self, listener: AccountsListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._account_listeners.append(listener)
        return lambda: self._remove(self._account_listeners, listener)

    def on_chain_changed(self, listener: ChainListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._chain_listeners.append(listener)
        return lambda: self._remove(self._chain_listeners, listener)

    def notify_accounts_changed(self, accounts: Sequence[str]) -> None:
        """
        Report the connection's account list. The first entry becomes the
        active account; an empty list means disconnected.

        The new account is recorded before listeners run, so it stands even
        if a listener raises.
        """
        account = parse_address(accounts[0]) if accounts else None
        if account == self._account:
            return
        logger.info(f"Active account changed: {self._account} -> {account}")
        self._account = account
        self._dispatch(self._account_listeners, account)

    def notify_chain_changed(self, chain_id: int) -> None:
        if chain_id == self._chain_id:
            return
        if chain_id != self.expected_chain_id:
            logger.warning(
                f"Connected to chain {chain_id}, expected {self.expected_chain_id}"
            )
        self._chain_id = chain_id
        self._dispatch(self._chain_listeners, chain_id)

    @staticmethod
    def _dispatch(listeners: list, value: object) -> None:
        """
        Call every listener with value. A failing listener does not stop the
        rest; the first failure is re-raised once all of them have run.
        """
        first_error: Optional[Exception] = None
        for listener in list(listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed for {value!r}: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)


__all__ = [
    "BSC_TESTNET_CHAIN_ID",
    "AccountsListener",
    "ChainListener",
    "ChainConnectivity",
]
