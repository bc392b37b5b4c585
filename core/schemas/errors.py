"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy across the airdrop engine.
Defines both Pydantic models for structured error communication
(API responses, CLI JSON output) and Python exceptions for control flow.

Propagation policy:
- Input errors (ValidationException) are raised before any hashing or
  ledger call.
- Post-submission mismatches (InconsistentStateException) are never
  auto-corrected; they carry both the requested and the observed value.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNSUPPORTED_FORMAT_VERSION = "UNSUPPORTED_FORMAT_VERSION"

    # Lookup errors
    NOT_FOUND = "NOT_FOUND"
    AMBIGUOUS_ALLOCATION = "AMBIGUOUS_ALLOCATION"

    # Claim errors
    FULLY_CLAIMED = "FULLY_CLAIMED"

    # Ledger errors
    INCONSISTENT_STATE = "INCONSISTENT_STATE"
    LEDGER_ERROR = "LEDGER_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class AirdropError(BaseModel):
    """
    Error model for passing failures across process boundaries
    (HTTP responses, CLI --json output) without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.VALIDATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "AirdropException":
        """Convert this error model to a raised exception."""
        return AirdropException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AirdropException(Exception):
    """
    Base exception for all airdrop engine errors.

    Carries structured error information and can be converted to an
    AirdropError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "AIRDROP_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AirdropError:
        """Convert this exception to an AirdropError model."""
        return AirdropError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationException(AirdropException):
    """Malformed address, amount, root or dump structure."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        value: Any = None,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        if field_path:
            full_details["field"] = field_path
        if value is not None:
            full_details["value"] = value if isinstance(value, (str, int)) else repr(value)
        super().__init__(
            message=message,
            code=ErrorCodes.VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class FormatVersionException(AirdropException):
    """Dump carries a format tag this build does not understand."""

    def __init__(self, version: Any, supported: frozenset[str]) -> None:
        self.version = version
        self.supported = supported
        super().__init__(
            message=(
                f"Unsupported dump format: {version!r}. "
                f"Supported formats: {sorted(supported)}"
            ),
            code=ErrorCodes.UNSUPPORTED_FORMAT_VERSION,
            details={"format": version, "supported": sorted(supported)},
            retryable=False,
        )


class NotFoundException(AirdropException):
    """Address absent from the current tree."""

    def __init__(self, address: str, root: str | None = None) -> None:
        details: dict[str, Any] = {"address": address}
        if root:
            details["root"] = root
        super().__init__(
            message=f"No allocation found for {address} in the current merkle tree",
            code=ErrorCodes.NOT_FOUND,
            details=details,
            retryable=False,
        )


class AmbiguousAllocationException(AirdropException):
    """Address appears more than once in the same tree."""

    def __init__(self, address: str, tree_indices: list[int]) -> None:
        super().__init__(
            message=(
                f"Address {address} has {len(tree_indices)} allocations in the "
                f"same tree (indices {tree_indices}); refusing to pick one"
            ),
            code=ErrorCodes.AMBIGUOUS_ALLOCATION,
            details={"address": address, "tree_indices": tree_indices},
            retryable=False,
        )


class AlreadyClaimedException(AirdropException):
    """Nothing left to claim: cumulative allocation <= claimed."""

    def __init__(self, address: str, allocation: int, claimed: int) -> None:
        super().__init__(
            message=(
                f"Allocation for {address} is fully claimed "
                f"(allocation={allocation}, claimed={claimed})"
            ),
            code=ErrorCodes.FULLY_CLAIMED,
            details={
                "address": address,
                "allocation": str(allocation),
                "claimed": str(claimed),
            },
            retryable=False,
        )


class InconsistentStateException(AirdropException):
    """
    An externally confirmed value does not match the requested one.

    Never retried automatically; both sides are surfaced verbatim.
    """

    def __init__(
        self,
        message: str,
        requested: Any,
        observed: Any,
        tx_hash: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.requested = requested
        self.observed = observed
        self.tx_hash = tx_hash
        full_details = details or {}
        full_details["requested"] = requested
        full_details["observed"] = observed
        full_details["tx_hash"] = tx_hash
        super().__init__(
            message=message,
            code=ErrorCodes.INCONSISTENT_STATE,
            details=full_details,
            retryable=False,
        )


class LedgerException(AirdropException):
    """The ledger collaborator failed (RPC error, revert, timeout)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_ERROR,
            details=details,
            retryable=retryable,
        )
