"""
Leaf Codec

Canonical (address, uint256) leaf encoding and double-keccak digest.
"""
from .leaf_codec import (
    ADDRESS_RE,
    MAX_UINT256,
    WEI_PER_ETHER,
    Allocation,
    parse_address,
    parse_amount,
    parse_ether,
    format_ether,
    encode_leaf,
    leaf_digest,
    parse_allocation,
    parse_allocations,
)

__all__ = [
    "ADDRESS_RE",
    "MAX_UINT256",
    "WEI_PER_ETHER",
    "Allocation",
    "parse_address",
    "parse_amount",
    "parse_ether",
    "format_ether",
    "encode_leaf",
    "leaf_digest",
    "parse_allocation",
    "parse_allocations",
]
