"""Outbound call and campaign request models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CAMPAIGN_NAME = "Web Campaign"


class Customer(BaseModel):
    """Destination of an outbound call."""

    model_config = ConfigDict(populate_by_name=True)

    number: str = Field(min_length=7)
    name: Optional[str] = None


class CallRequest(BaseModel):
    """Intent to place one outbound call."""

    model_config = ConfigDict(populate_by_name=True)

    phone_number_id: str = Field(alias="phoneNumberId", min_length=1)
    assistant_id: str = Field(alias="assistantId", min_length=1)
    customer: Customer

    def with_number(self, number: str) -> "CallRequest":
        """Return a copy with the customer number replaced."""
        return self.model_copy(
            update={"customer": self.customer.model_copy(update={"number": number})}
        )

    def to_provider_payload(self) -> dict:
        """Build the Vapi call creation body."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CampaignRequest(CallRequest):
    """Named single-customer campaign wrapper around a call request."""

    name: str = Field(default=DEFAULT_CAMPAIGN_NAME, min_length=1)

    def to_provider_payload(self) -> dict:
        """Build the Vapi campaign creation body."""
        customer = self.customer.model_dump(exclude_none=True)
        return {
            "name": self.name,
            "phoneNumberId": self.phone_number_id,
            "assistantId": self.assistant_id,
            "customers": [customer],
        }
