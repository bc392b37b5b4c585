"""
Generate Route

Build a distribution from an allocation list and return its dump.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import GenerateRequest
from api.models.responses import GenerateResponse
from core.distribution import Distribution


logger = logging.getLogger(__name__)

router = APIRouter(tags=["distribution"])


@router.post("/generate-merkle", response_model=GenerateResponse)
def generate_merkle(request: GenerateRequest) -> GenerateResponse:
    """
    Build the tree for the given allocations.

    Entries are validated in order; the first malformed entry fails the
    whole request with VALIDATION_ERROR and its index, field and value.
    """
    distribution = Distribution.build(request.allocations, unit=request.unit)
    logger.info(
        f"Generated merkle root {distribution.root_hex} "
        f"for {len(distribution)} allocations"
    )
    return GenerateResponse.model_validate(distribution.dump())
