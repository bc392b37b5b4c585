"""
API Error Handling

Standardized error handling for the API. Engine exceptions
(AirdropException) are mapped to HTTP statuses by their code in one handler.
"""

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import AirdropException, ErrorCodes


STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.VALIDATION_ERROR: 400,
    ErrorCodes.UNSUPPORTED_FORMAT_VERSION: 400,
    ErrorCodes.NOT_FOUND: 404,
    ErrorCodes.AMBIGUOUS_ALLOCATION: 409,
    ErrorCodes.FULLY_CLAIMED: 409,
    ErrorCodes.INCONSISTENT_STATE: 500,
    ErrorCodes.LEDGER_ERROR: 502,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class ConfigurationError(APIError):
    """Server is missing configuration needed for the request."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def airdrop_error_handler(request: Request, exc: AirdropException) -> JSONResponse:
    """Handle engine exceptions, choosing the status from the error code."""
    error = exc.to_error_model()
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 500),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=error.code,
                message=error.message,
                details=error.details,
            ),
        ).model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 INVALID_REQUEST."""
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=InvalidRequestError(
            "Invalid request body", details={"errors": errors}
        ).to_response().model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
