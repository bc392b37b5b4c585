"""
Leaf Codec
Canonical encoding of one (address, cumulative amount) pair and its digest.

Encoding Rules (compatibility-critical, any deviation changes the root):
1. encode_leaf(address, amount) = abi.encode(address, uint256)
   - address left-padded with 12 zero bytes to one 32-byte word
   - amount as one big-endian 32-byte word
2. leaf_digest(encoded) = keccak256(keccak256(encoded))
   The double hash keeps a 64-byte leaf preimage from ever being confused
   with the 64-byte preimage of an internal node.

Input Rules:
- address: "0x" followed by exactly 40 hex characters (checksum not enforced)
- amount: non-negative integer below 2**256, given as int or decimal-digit string
- A batch with a single malformed entry is rejected as a whole.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from eth_abi import encode
from eth_utils import to_canonical_address

from core.crypto.hashing import keccak256
from core.schemas.errors import ValidationException
from core.schemas.versioning import LEAF_ENCODING


ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_DIGITS_RE = re.compile(r"^[0-9]+$")
_ETHER_RE = re.compile(r"^[0-9]*\.?[0-9]*$")

MAX_UINT256 = 2**256 - 1
WEI_PER_ETHER = 10**18
ETHER_DECIMALS = 18


@dataclass(frozen=True)
class Allocation:
    """
    One recipient's cumulative lifetime entitlement.

    Attributes:
        address: 20-byte hex identifier, kept exactly as supplied
        amount: cumulative amount in the token's smallest unit
    """
    address: str
    amount: int

    @property
    def encoded(self) -> bytes:
        """abi.encode(address, uint256) of this allocation."""
        return encode_leaf(self.address, self.amount)

    @property
    def digest(self) -> bytes:
        """Leaf digest committed into the tree."""
        return leaf_digest(self.encoded)

    def to_value(self) -> list[str]:
        """Dump representation: [address, decimal amount string]."""
        return [self.address, str(self.amount)]

    def matches(self, address: str) -> bool:
        """Case-insensitive address comparison."""
        return self.address.lower() == address.lower()


def parse_address(
    value: Any,
    *,
    field_path: str = "address",
    index: int | None = None,
) -> str:
    """
    Validate an address string.

    Raises:
        ValidationException: If value is not 0x + 40 hex characters
    """
    if not isinstance(value, str) or not ADDRESS_RE.fullmatch(value):
        raise ValidationException(
            f"Invalid address format: {value}",
            field_path=field_path,
            value=value,
            index=index,
        )
    return value


def parse_amount(
    value: Any,
    *,
    field_path: str = "amount",
    index: int | None = None,
) -> int:
    """
    Validate a uint256 amount given as int or decimal-digit string.

    Raises:
        ValidationException: For bools, floats, negatives, non-digit
            strings and values that do not fit in 256 bits
    """
    if isinstance(value, bool):
        amount = None
    elif isinstance(value, int):
        amount = value
    elif isinstance(value, str) and _DIGITS_RE.fullmatch(value):
        amount = int(value)
    else:
        amount = None

    if amount is None or amount < 0:
        raise ValidationException(
            f"Invalid amount format: {value}",
            field_path=field_path,
            value=value,
            index=index,
        )
    if amount > MAX_UINT256:
        raise ValidationException(
            f"Amount does not fit in uint256: {value}",
            field_path=field_path,
            value=str(value),
            index=index,
        )
    return amount


def parse_ether(
    value: Any,
    *,
    field_path: str = "amount",
    index: int | None = None,
) -> int:
    """
    Convert a decimal ether string to an integer wei amount.

    More than 18 decimal places is rejected rather than rounded.

    Example:
        >>> parse_ether("1.5")
        1500000000000000000
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationException(
            f"Invalid amount format: {value}",
            field_path=field_path,
            value=value,
            index=index,
        )
    text = str(value)
    if not text or text == "." or not _ETHER_RE.fullmatch(text):
        raise ValidationException(
            f"Invalid amount format: {value}",
            field_path=field_path,
            value=value,
            index=index,
        )
    whole, _, fraction = text.partition(".")
    if len(fraction) > ETHER_DECIMALS:
        raise ValidationException(
            f"Amount has more than {ETHER_DECIMALS} decimals: {value}",
            field_path=field_path,
            value=value,
            index=index,
        )
    wei = int(whole or "0") * WEI_PER_ETHER + int(fraction.ljust(ETHER_DECIMALS, "0"))
    return parse_amount(wei, field_path=field_path, index=index)


def format_ether(wei: int) -> str:
    """
    Format a wei amount as a decimal ether string.

    Example:
        >>> format_ether(1500000000000000000)
        '1.5'
        >>> format_ether(0)
        '0.0'
    """
    whole, fraction = divmod(wei, WEI_PER_ETHER)
    fraction_str = f"{fraction:0{ETHER_DECIMALS}d}".rstrip("0") or "0"
    return f"{whole}.{fraction_str}"


def encode_leaf(address: str, amount: int) -> bytes:
    """
    ABI-encode (address, uint256) into the fixed 64-byte leaf layout.

    Raises:
        ValidationException: If address or amount is malformed
    """
    parse_address(address)
    parse_amount(amount)
    return encode(list(LEAF_ENCODING), [to_canonical_address(address), amount])


def leaf_digest(encoded: bytes) -> bytes:
    """Double keccak256 of an encoded leaf."""
    return keccak256(keccak256(encoded))


def parse_allocation(
    entry: Any,
    *,
    index: int | None = None,
    unit: str = "wei",
) -> Allocation:
    """
    Validate one raw allocation entry.

    Accepts a mapping with "address" and "amount" keys, a two-item
    [address, amount] sequence (dump value form), or an Allocation.

    Args:
        entry: Raw entry
        index: Position in the batch, reported in errors
        unit: "wei" (integer amounts) or "ether" (decimal amounts)
    """
    if isinstance(entry, Allocation):
        address, amount = entry.address, entry.amount
    elif isinstance(entry, Mapping):
        address = entry.get("address")
        amount = entry.get("amount")
        if not address or amount is None or amount == "":
            raise ValidationException(
                "Each allocation must have address and amount fields",
                index=index,
            )
    elif isinstance(entry, Sequence) and not isinstance(entry, (str, bytes)) and len(entry) == 2:
        address, amount = entry[0], entry[1]
    else:
        raise ValidationException(
            "Each allocation must have address and amount fields",
            index=index,
        )

    address = parse_address(address, index=index)
    if unit == "ether":
        value = parse_ether(amount, index=index)
    elif unit == "wei":
        value = parse_amount(amount, index=index)
    else:
        raise ValueError(f"Unknown amount unit: {unit!r}")
    return Allocation(address=address, amount=value)


def parse_allocations(entries: Iterable[Any], *, unit: str = "wei") -> list[Allocation]:
    """
    Validate a whole allocation batch, preserving order.

    Raises:
        ValidationException: On the first malformed entry (no partial
            result) or if the batch is empty
    """
    allocations = [
        parse_allocation(entry, index=i, unit=unit)
        for i, entry in enumerate(entries)
    ]
    if not allocations:
        raise ValidationException(
            "Invalid request: allocations array must not be empty",
            field_path="allocations",
        )
    return allocations


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
