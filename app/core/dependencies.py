"""FastAPI dependencies."""
from fastapi import Depends

from app.core.config import settings
from app.services.outbound.errors import ConfigurationError
from app.services.outbound.service import OutboundCallService
from app.services.vapi.client import VapiClient


def get_vapi_client() -> VapiClient:
    """Get a Vapi client, failing fast when no API key is configured."""
    if not settings.vapi_api_key:
        raise ConfigurationError()
    return VapiClient(
        api_key=settings.vapi_api_key,
        base_url=settings.vapi_base_url,
        timeout=settings.vapi_timeout_seconds,
    )


def get_outbound_service(
    client: VapiClient = Depends(get_vapi_client),
) -> OutboundCallService:
    """Get outbound call service instance."""
    return OutboundCallService(
        client, default_country_code=settings.default_country_code
    )
