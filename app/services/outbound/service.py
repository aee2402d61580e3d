"""Outbound call and campaign orchestration."""
import logging
from typing import Any, Dict, Optional, Tuple

from app.services.outbound.validator import (
    validate_call_request,
    validate_campaign_request,
)
from app.services.vapi.client import VapiClient, extract_resource_id

logger = logging.getLogger(__name__)


class OutboundCallService:
    """Validates outbound requests and hands them to Vapi."""

    def __init__(self, client: VapiClient, default_country_code: str = "1"):
        self.client = client
        self.default_country_code = default_country_code

    async def place_call(
        self, body: Any
    ) -> Tuple[Optional[str], Dict[str, Any]]:
        """
        Place a single outbound call.

        Returns:
            Tuple of (call id, raw Vapi response)
        """
        request = validate_call_request(body, self.default_country_code)
        logger.info(
            f"[OUTBOUND CALL] Placing call - assistantId: {request.assistant_id}, "
            f"phoneNumberId: {request.phone_number_id}"
        )
        call = await self.client.create_call(request.to_provider_payload())
        return extract_resource_id(call), call

    async def create_campaign(
        self, body: Any
    ) -> Tuple[Optional[str], Dict[str, Any]]:
        """
        Create a single-customer outbound campaign.

        Returns:
            Tuple of (campaign id, raw Vapi response)
        """
        request = validate_campaign_request(body, self.default_country_code)
        logger.info(
            f"[OUTBOUND CAMPAIGN] Creating campaign '{request.name}' - "
            f"assistantId: {request.assistant_id}"
        )
        campaign = await self.client.create_campaign(request.to_provider_payload())
        return extract_resource_id(campaign), campaign
