"""
Core cryptographic utilities.

Keccak-256 hashing, the sorted-pair node rule and hex helpers.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
    parse_root,
)

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "parse_root",
]
