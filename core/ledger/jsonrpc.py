"""
JSON-RPC Ledger

LedgerClient over an EVM node's JSON-RPC endpoint. Reads use eth_call;
writes use eth_sendTransaction from a node-managed sender account and are
confirmed by polling eth_getTransactionReceipt.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Callable, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_canonical_address

from core.codec.leaf_codec import parse_address
from core.crypto.hashing import from_hex, to_hex
from core.http import HttpClient, HttpError
from core.ledger.base import LedgerClient
from core.schemas.errors import LedgerException


logger = logging.getLogger(__name__)


MERKLE_ROOT = "merkleRoot()"
UPDATE_MERKLE_ROOT = "updateMerkleRoot(bytes32)"
CLAIM_TOKENS = "claimTokens(uint256,bytes32[])"
UNLOCKED_BALANCE = "getUnlockedBalance(address)"
USER_TOTAL_CLAIMED = "userTotalClaimed(address)"


def encode_call(signature: str, types: Sequence[str] = (), args: Sequence[Any] = ()) -> bytes:
    """Selector followed by ABI-encoded arguments."""
    data = function_signature_to_4byte_selector(signature)
    if types:
        data += encode(list(types), list(args))
    return data


class JsonRpcLedger(LedgerClient):
    """
    Token contract reached through JSON-RPC.

    Usage:
        ledger = JsonRpcLedger(
            rpc_url="https://data-seed-prebsc-1-s1.binance.org:8545",
            contract_address="0x...",
            sender="0x...",
        )
        root = ledger.read_root()
    """

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        *,
        sender: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        timeout: float = 30.0,
        confirmation_timeout: float = 120.0,
        poll_interval: float = 2.0,
        gas: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.rpc_url = rpc_url
        self.contract_address = parse_address(contract_address, field_path="contract_address")
        self._account = parse_address(sender, field_path="sender") if sender else None
        self.http = http_client or HttpClient(timeout=timeout)
        self.timeout = timeout
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.gas = gas
        self._sleep = sleep
        self._clock = clock
        self._ids = itertools.count(1)

    @classmethod
    def from_config(
        cls,
        config: Any,
        http_client: Optional[HttpClient] = None,
        *,
        sender: Optional[str] = None,
    ) -> "JsonRpcLedger":
        """Build from a RuntimeConfig; sender overrides ledger.sender."""
        ledger = config.ledger
        return cls(
            rpc_url=config.network.rpc_url,
            contract_address=ledger.contract_address,
            sender=sender or ledger.sender,
            http_client=http_client or HttpClient(
                timeout=config.http.timeout,
                default_headers=dict(config.http.headers),
                proxy=config.http.proxy,
            ),
            timeout=ledger.timeout,
            confirmation_timeout=ledger.confirmation_timeout,
            poll_interval=ledger.poll_interval,
            gas=ledger.gas,
        )

    @property
    def account(self) -> Optional[str]:
        return self._account

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def read_root(self) -> bytes:
        result = self._eth_call(encode_call(MERKLE_ROOT))
        (root,) = self._decode(["bytes32"], result, MERKLE_ROOT)
        return root

    def cumulative_claimed(self, address: str) -> int:
        data = encode_call(USER_TOTAL_CLAIMED, ["address"], [to_canonical_address(address)])
        (amount,) = self._decode(["uint256"], self._eth_call(data), USER_TOTAL_CLAIMED)
        return amount

    def unlocked_balance(self, address: str) -> int:
        data = encode_call(UNLOCKED_BALANCE, ["address"], [to_canonical_address(address)])
        (amount,) = self._decode(["uint256"], self._eth_call(data), UNLOCKED_BALANCE)
        return amount

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def update_root(self, new_root: bytes) -> str:
        data = encode_call(UPDATE_MERKLE_ROOT, ["bytes32"], [new_root])
        return self._transact("updateMerkleRoot", data)

    def claim(self, cumulative_amount: int, proof: Sequence[bytes]) -> str:
        data = encode_call(
            CLAIM_TOKENS,
            ["uint256", "bytes32[]"],
            [cumulative_amount, list(proof)],
        )
        return self._transact("claimTokens", data)

    def _transact(self, method: str, data: bytes) -> str:
        if self._account is None:
            raise LedgerException(f"{method} requires a sender account; ledger is read-only")

        tx: dict[str, Any] = {
            "from": self._account,
            "to": self.contract_address,
            "data": to_hex(data),
        }
        if self.gas is not None:
            tx["gas"] = hex(self.gas)

        tx_hash = self._rpc("eth_sendTransaction", [tx])
        logger.info(f"{method} submitted from {self._account}: {tx_hash}")
        receipt = self.wait_for_receipt(tx_hash)

        if int(receipt.get("status", "0x0"), 16) != 1:
            raise LedgerException(
                f"{method} reverted",
                details={"tx_hash": tx_hash, "block": receipt.get("blockNumber")},
            )
        return tx_hash

    def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        """
        Poll until the transaction is mined.

        Raises:
            LedgerException: If no receipt arrives within confirmation_timeout
                (retryable, the transaction may still be mined later)
        """
        deadline = self._clock() + self.confirmation_timeout
        while True:
            receipt = self._rpc("eth_getTransactionReceipt", [tx_hash])
            if receipt:
                return receipt
            if self._clock() >= deadline:
                raise LedgerException(
                    f"Transaction {tx_hash} not confirmed within "
                    f"{self.confirmation_timeout}s",
                    details={"tx_hash": tx_hash},
                    retryable=True,
                )
            self._sleep(self.poll_interval)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _eth_call(self, data: bytes) -> bytes:
        result = self._rpc(
            "eth_call",
            [{"to": self.contract_address, "data": to_hex(data)}, "latest"],
        )
        try:
            return from_hex(result) if result not in ("0x", None) else b""
        except ValueError as e:
            raise LedgerException(f"Malformed eth_call result: {result!r}") from e

    def _decode(self, types: list[str], data: bytes, signature: str) -> tuple:
        try:
            return decode(types, data)
        except DecodingError as e:
            raise LedgerException(
                f"Could not decode {signature} result from {self.contract_address}",
                details={"data": to_hex(data)},
            ) from e

    def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = self.http.post(self.rpc_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except HttpError as e:
            raise LedgerException(
                f"RPC {method} failed: {e}",
                details={"rpc_url": self.rpc_url, "status_code": e.status_code},
                retryable=True,
            ) from e
        except ValueError as e:
            raise LedgerException(f"RPC {method} returned invalid JSON") from e

        if not isinstance(body, dict):
            raise LedgerException(
                f"RPC {method} returned a non-object response",
                details={"rpc_url": self.rpc_url, "body": repr(body)[:200]},
            )
        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise LedgerException(
                f"RPC {method} error: {message}",
                details={"rpc_error": error},
            )
        return body.get("result")


__all__ = [
    "MERKLE_ROOT",
    "UPDATE_MERKLE_ROOT",
    "CLAIM_TOKENS",
    "UNLOCKED_BALANCE",
    "USER_TOTAL_CLAIMED",
    "encode_call",
    "JsonRpcLedger",
]
