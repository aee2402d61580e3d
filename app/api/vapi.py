"""Vapi outbound call and campaign endpoints."""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from app.core.dependencies import get_outbound_service
from app.services.outbound.errors import ProviderError
from app.services.outbound.service import OutboundCallService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/vapi/outbound-call", status_code=201)
async def create_outbound_call(
    request: Request,
    body: Any = Body(None),
    service: OutboundCallService = Depends(get_outbound_service),
):
    """Validate the request and place one outbound call through Vapi."""
    logger.info(
        f"[OUTBOUND CALL] Request received - "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        call_id, call = await service.place_call(body)
    except ProviderError as e:
        logger.error(
            f"[OUTBOUND CALL] Failed to create Vapi call - {e.message}",
            exc_info=True,
        )
        return JSONResponse(status_code=502, content={"error": "Failed to create call"})

    logger.info(f"[OUTBOUND CALL] Call created - id: {call_id}")
    return {"id": call_id, "call": call}


@router.post("/api/vapi/outbound-campaign", status_code=201)
async def create_outbound_campaign(
    request: Request,
    body: Any = Body(None),
    service: OutboundCallService = Depends(get_outbound_service),
):
    """Validate the request and create a single-customer Vapi campaign."""
    logger.info(
        f"[OUTBOUND CAMPAIGN] Request received - "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        campaign_id, campaign = await service.create_campaign(body)
    except ProviderError as e:
        logger.error(
            f"[OUTBOUND CAMPAIGN] Failed to create Vapi campaign - {e.message}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=502, content={"error": "Failed to create campaign"}
        )

    logger.info(f"[OUTBOUND CAMPAIGN] Campaign created - id: {campaign_id}")
    return {"id": campaign_id, "campaign": campaign}
