"""
Hashing Utilities
Keccak-256 hashing, the sorted-pair node rule, and 0x-hex helpers.

This module provides:
- keccak256 for raw bytes (EVM-compatible, via eth_utils)
- hash_pair: the sorted-pair internal node hash
- Hex encoding/decoding with 0x prefix
- parse_root: strict validation of a 32-byte root string

Interoperability Notes:
- Internal nodes are keccak256(min(a, b) + max(a, b)). Sorting the pair
  makes verification independent of which side a node sat on, which is
  what an on-chain sorted-pair verifier expects.
- All operations are deterministic.
"""
from __future__ import annotations

import re

from eth_utils import keccak

from core.schemas.errors import ValidationException


HASH_LENGTH = 32

_ROOT_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Note this is the pre-standard Keccak used by the EVM, not hashlib's
    sha3_256.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def hash_pair(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent of two nodes under the sorted-pair rule.

    The two inputs are ordered bytewise before concatenation, so
    hash_pair(a, b) == hash_pair(b, a).

    Args:
        left: First child hash (32 bytes)
        right: Second child hash (32 bytes)

    Returns:
        32-byte parent hash
    """
    if right < left:
        left, right = right, left
    return keccak256(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not isinstance(hex_string, str) or not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {str(hex_string)[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def parse_root(value: object, field_path: str = "merkleRoot") -> bytes:
    """
    Validate a 0x-prefixed 32-byte hex root and decode it.

    Raises:
        ValidationException: If the value is not exactly 0x + 64 hex chars
    """
    if not isinstance(value, str) or not _ROOT_RE.fullmatch(value):
        raise ValidationException(
            "Invalid merkle root format. Must be a 0x-prefixed 32-byte hex string",
            field_path=field_path,
            value=value,
        )
    return bytes.fromhex(value[2:])


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "parse_root",
]
