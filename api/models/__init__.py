"""API request and response models."""

from api.models.requests import GenerateRequest, UpdateRootRequest
from api.models.responses import (
    HealthResponse,
    DumpValueResponse,
    GenerateResponse,
    UpdateRootResponse,
    ClaimStatusResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "GenerateRequest",
    "UpdateRootRequest",
    "HealthResponse",
    "DumpValueResponse",
    "GenerateResponse",
    "UpdateRootResponse",
    "ClaimStatusResponse",
    "ErrorDetail",
    "ErrorResponse",
]
