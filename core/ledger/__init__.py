"""
Ledger collaborators: the abstract client, an in-memory fake of the token
contract, a JSON-RPC adapter and the account/chain observer registry.
"""

from .base import LedgerClient
from .connectivity import (
    BSC_TESTNET_CHAIN_ID,
    ChainConnectivity,
)
from .jsonrpc import JsonRpcLedger, encode_call
from .memory import InMemoryLedger, LedgerState, ZERO_ROOT

__all__ = [
    "LedgerClient",
    "InMemoryLedger",
    "LedgerState",
    "ZERO_ROOT",
    "JsonRpcLedger",
    "encode_call",
    "ChainConnectivity",
    "BSC_TESTNET_CHAIN_ID",
]
