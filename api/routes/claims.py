"""
Claims Route

Claim status for an address against the served distribution.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_distribution, get_ledger_reader
from api.models.responses import ClaimStatusResponse
from core.claims import ClaimReconciler
from core.codec import parse_address
from core.distribution import Distribution
from core.ledger import LedgerClient


router = APIRouter(tags=["claims"])


@router.get("/claims/{address}", response_model=ClaimStatusResponse)
def claim_status(
    address: str,
    distribution: Distribution = Depends(get_distribution),
    ledger: LedgerClient = Depends(get_ledger_reader),
) -> ClaimStatusResponse:
    """
    Allocation, claimed total and proof for address.

    404 if the address is not in the tree, 409 if it appears more than once.
    """
    parse_address(address)
    distribution.find(address)
    state = ClaimReconciler(distribution, ledger).status(address)
    return ClaimStatusResponse.model_validate(
        {**state.to_dict(), "root": distribution.root_hex}
    )
