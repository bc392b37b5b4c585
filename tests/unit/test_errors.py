"""
Error Taxonomy Unit Tests
Tests for core/schemas/errors.py and the HTTP status mapping in api/errors.py
"""

import pytest

from api.errors import STATUS_BY_CODE
from core.schemas.errors import (
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


class TestExceptions:
    """Tests for the exception classes."""

    def test_validation_details(self):
        exc = ValidationException("bad", field_path="amount", value="-1", index=3)
        assert exc.code == ErrorCodes.VALIDATION_ERROR
        assert exc.details == {"index": 3, "field": "amount", "value": "-1"}
        assert not exc.retryable

    def test_format_version(self):
        exc = FormatVersionException("standard-v2", frozenset({"standard-v1"}))
        assert exc.code == ErrorCodes.UNSUPPORTED_FORMAT_VERSION
        assert exc.details["supported"] == ["standard-v1"]
        assert "standard-v2" in exc.message

    def test_already_claimed_amounts_are_strings(self):
        exc = AlreadyClaimedException("0xabc", 2**255, 2**255)
        assert exc.details["allocation"] == str(2**255)
        assert exc.code == ErrorCodes.FULLY_CLAIMED

    def test_inconsistent_state_carries_both_sides(self):
        exc = InconsistentStateException("mismatch", requested="0x01", observed="0x02", tx_hash="0xff")
        assert exc.details == {"requested": "0x01", "observed": "0x02", "tx_hash": "0xff"}
        assert not exc.retryable

    def test_ledger_retryable(self):
        assert LedgerException("timeout", retryable=True).to_error_model().retryable

    def test_round_trip_through_model(self):
        original = NotFoundException("0xabc", root="0x00")
        model = original.to_error_model()
        assert isinstance(model, AirdropError)
        rebuilt = model.to_exception()
        assert isinstance(rebuilt, AirdropException)
        assert rebuilt.code == ErrorCodes.NOT_FOUND
        assert rebuilt.details == {"address": "0xabc", "root": "0x00"}

    def test_ambiguous(self):
        exc = AmbiguousAllocationException("0xabc", [1, 4])
        assert "refusing to pick one" in exc.message


class TestStatusMapping:
    """Every engine error code has a definite HTTP status."""

    @pytest.mark.parametrize("code,status", [
        (ErrorCodes.VALIDATION_ERROR, 400),
        (ErrorCodes.UNSUPPORTED_FORMAT_VERSION, 400),
        (ErrorCodes.NOT_FOUND, 404),
        (ErrorCodes.AMBIGUOUS_ALLOCATION, 409),
        (ErrorCodes.FULLY_CLAIMED, 409),
        (ErrorCodes.INCONSISTENT_STATE, 500),
        (ErrorCodes.LEDGER_ERROR, 502),
    ])
    def test_status(self, code, status):
        assert STATUS_BY_CODE[code] == status

    def test_all_codes_mapped(self):
        codes = {
            value for name, value in vars(ErrorCodes).items()
            if not name.startswith("_")
        }
        assert codes == set(STATUS_BY_CODE)
