"""
Travelers claim orchestration API routes

FNOL and payment endpoints, plus a lookup of an existing claim by the
caller's correlation id.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from claim_orch.api.deps import get_app_settings, get_claims_client, get_notification_client
from claim_orch.core import logger, sanitize_for_logging
from claim_orch.core.config import Settings
from claim_orch.orchestration import FNOLRequest, PaymentRequest, create_fnol, create_payment
from claim_orch.services.claim_lookup import query_current_house_id
from claim_orch.services.upstream.client import UpstreamClient


router = APIRouter()


@router.post("/fnol")
async def post_fnol(
    request: FNOLRequest,
    client: UpstreamClient = Depends(get_claims_client),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """File a first notice of loss; returns the registered ClaimEntity."""
    logger.info(f"FNOL request: {sanitize_for_logging(request.model_dump(by_alias=True))}")
    return await create_fnol(request, client, settings)


@router.post("/payment")
async def post_payment(
    request: PaymentRequest,
    client: UpstreamClient = Depends(get_claims_client),
    notifier: UpstreamClient = Depends(get_notification_client),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Register, settle and notify; returns the claim and settlement info."""
    logger.info(f"Payment request: {sanitize_for_logging(request.model_dump(by_alias=True))}")
    return await create_payment(request, client, notifier, settings)


@router.get("/claims/{new_eco_fnol_id}")
async def get_claim_ids(
    new_eco_fnol_id: str,
    client: UpstreamClient = Depends(get_claims_client),
) -> Dict[str, Any]:
    """Claim search hit for a correlation id, including currHouseClaimId."""
    hit = await query_current_house_id(client, new_eco_fnol_id)
    return hit.to_dict()
