"""Vapi REST API client."""
import logging
from typing import Any, Dict, Optional

import httpx

from app.services.outbound.errors import ProviderError

logger = logging.getLogger(__name__)


def extract_resource_id(response: Dict[str, Any]) -> Optional[str]:
    """
    Extract the created resource id from a Vapi response.

    Vapi answers either with the resource itself ({"id": ...}) or with a
    batch envelope ({"results": [{"id": ...}], "errors": [...]}).
    """
    if "id" in response:
        return response["id"]

    results = response.get("results") or []
    if results and isinstance(results[0], dict):
        return results[0].get("id")
    return None


class VapiClient:
    """Client for Vapi call and campaign creation."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.vapi.ai",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def create_call(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create an outbound phone call."""
        return await self._post("/call", payload)

    async def create_campaign(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create an outbound campaign."""
        return await self._post("/campaign", payload)

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug(f"[VAPI] POST {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(url, json=payload, headers=self.headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Vapi rejected POST {path} with status {e.response.status_code}: "
                f"{e.response.text[:200]}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(
                f"Vapi request POST {path} failed: {type(e).__name__}: {str(e)}"
            ) from e

        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected Vapi response for POST {path}")

        logger.info(f"[VAPI] POST {path} succeeded - id: {extract_resource_id(data)}")
        return data
