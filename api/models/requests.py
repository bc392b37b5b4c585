"""
API Request Models

Pydantic models for API request validation. Allocation entries are kept
loose here and validated by the leaf codec so errors carry the entry index.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Request body for POST /generate-merkle."""

    allocations: list[Any] = Field(
        ...,
        description='Entries of the form {"address": "0x...", "amount": "100"}',
    )
    unit: Literal["wei", "ether"] = Field(
        default="wei",
        description="Unit of the amounts: integer wei or decimal ether",
    )


class UpdateRootRequest(BaseModel):
    """Request body for POST /update-merkle."""

    model_config = ConfigDict(populate_by_name=True)

    merkle_root: Optional[str] = Field(
        default=None,
        alias="merkleRoot",
        description="0x-prefixed 32-byte hex root to publish",
    )
