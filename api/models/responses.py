"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    service: str = "airdrop-api"
    version: str = "v1"
    chain_id: int = Field(..., alias="chainId")
    ledger_configured: bool = Field(..., alias="ledgerConfigured")


class DumpValueResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    value: list[str]
    tree_index: int = Field(..., alias="treeIndex")
    proof: list[str] = Field(default_factory=list)


class GenerateResponse(BaseModel):
    """Response for POST /generate-merkle: the full distribution dump."""

    model_config = ConfigDict(populate_by_name=True)

    format: str
    leaf_encoding: list[str] = Field(..., alias="leafEncoding")
    root: str
    tree: list[str]
    values: list[DumpValueResponse]


class UpdateRootResponse(BaseModel):
    """
    Response for POST /update-merkle.

    Exactly one of current_merkle_root (no-op) and updated_merkle_root
    (transaction sent) is set.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str
    tx_hash: Optional[str] = Field(default=None, alias="txHash")
    current_merkle_root: Optional[str] = Field(default=None, alias="currentMerkleRoot")
    updated_merkle_root: Optional[str] = Field(default=None, alias="updatedMerkleRoot")


class ClaimStatusResponse(BaseModel):
    """Response for GET /claims/{address}."""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    status: str
    allocation: str = Field(..., description="Cumulative allocation (wei)")
    claimed: str = Field(..., description="Already claimed on the ledger (wei)")
    claimable: str = Field(..., description="allocation - claimed, floored at 0")
    proof: list[str] = Field(default_factory=list)
    tree_index: Optional[int] = Field(default=None, alias="treeIndex")
    root: str


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
