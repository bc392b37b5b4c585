"""
Schemas

Purpose: Export the public API for error models, dump format constants and
verification results.
"""

# Dump format constants
from .versioning import (
    DUMP_FORMAT,
    LEAF_ENCODING,
    SUPPORTED_DUMP_FORMATS,
    DumpFormat,
    assert_supported_format,
    is_compatible_format,
)

# Error models and exceptions
from .errors import (
    AirdropError,
    AirdropException,
    AlreadyClaimedException,
    AmbiguousAllocationException,
    ErrorCodes,
    FormatVersionException,
    InconsistentStateException,
    LedgerException,
    NotFoundException,
    ValidationException,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Versioning
    "DUMP_FORMAT",
    "LEAF_ENCODING",
    "SUPPORTED_DUMP_FORMATS",
    "DumpFormat",
    "assert_supported_format",
    "is_compatible_format",
    # Errors
    "AirdropError",
    "AirdropException",
    "AlreadyClaimedException",
    "AmbiguousAllocationException",
    "ErrorCodes",
    "FormatVersionException",
    "InconsistentStateException",
    "LedgerException",
    "NotFoundException",
    "ValidationException",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
