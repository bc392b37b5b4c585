"""
Schemas - Versioning
File: versioning.py

Purpose: Centralize distribution dump format constants.
Keep this file tiny; it must not import other schema modules except errors.
"""

from typing import Literal

from .errors import FormatVersionException

# Current dump format tag - written into every dump
DUMP_FORMAT: str = "standard-v1"

# Type alias for the dump format (future-proof for migrations)
DumpFormat = Literal["standard-v1"]

# Leaf type tags, in encoding order
LEAF_ENCODING: tuple[str, str] = ("address", "uint256")

SUPPORTED_DUMP_FORMATS: frozenset[str] = frozenset({"standard-v1"})


def assert_supported_format(version: object) -> None:
    """
    Validate that the given dump format tag is supported.

    Raises:
        FormatVersionException: If the tag is missing or unknown.
    """
    if not isinstance(version, str) or version not in SUPPORTED_DUMP_FORMATS:
        raise FormatVersionException(version, SUPPORTED_DUMP_FORMATS)


def is_compatible_format(version: object) -> bool:
    """Check if a dump format tag is supported without raising."""
    return isinstance(version, str) and version in SUPPORTED_DUMP_FORMATS
