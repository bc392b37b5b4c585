"""
Update Root Route

Publish a Merkle root to the ledger, idempotently.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_ledger
from api.errors import InvalidRequestError
from api.models.requests import UpdateRootRequest
from api.models.responses import UpdateRootResponse
from core.claims import RootPublisher
from core.crypto.hashing import parse_root
from core.ledger import LedgerClient


logger = logging.getLogger(__name__)

router = APIRouter(tags=["ledger"])


def requested_root(request: UpdateRootRequest) -> bytes:
    """
    Validate the requested root.

    Declared ahead of the ledger dependency so a malformed root is reported
    as 400 even when no ledger is configured.
    """
    if not request.merkle_root:
        raise InvalidRequestError("Missing required parameter: merkleRoot")
    return parse_root(request.merkle_root)


@router.post(
    "/update-merkle",
    response_model=UpdateRootResponse,
    response_model_exclude_unset=True,
)
def update_merkle(
    root: bytes = Depends(requested_root),
    ledger: LedgerClient = Depends(get_ledger),
) -> UpdateRootResponse:
    """
    Publish merkleRoot unless it is already current.

    A read-back mismatch after the transaction surfaces as 500
    INCONSISTENT_STATE with requested, observed and tx_hash in details.
    """
    result = RootPublisher(ledger).publish(root)
    return UpdateRootResponse.model_validate(result.to_dict())
