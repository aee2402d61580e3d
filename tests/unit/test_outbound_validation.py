"""Unit tests for outbound request validation and the outbound service."""
import pytest

from app.services.outbound.errors import InvalidNumberError, ValidationError
from app.services.outbound.models import CampaignRequest
from app.services.outbound.service import OutboundCallService
from app.services.outbound.validator import (
    validate_call_request,
    validate_campaign_request,
)


def call_body(**overrides):
    body = {
        "phoneNumberId": "pn_123",
        "assistantId": "asst_123",
        "customer": {"number": "(985) 307-5465", "name": "Ada"},
    }
    body.update(overrides)
    return body


class TestValidateCallRequest:
    """Test validate_call_request."""

    def test_valid_request_is_normalized(self):
        """Test that the customer number is replaced with its canonical form."""
        request = validate_call_request(call_body())

        assert request.phone_number_id == "pn_123"
        assert request.assistant_id == "asst_123"
        assert request.customer.number == "+19853075465"
        assert request.customer.name == "Ada"

    def test_missing_assistant_id(self):
        """Test that a missing assistantId is reported by field name."""
        body = call_body()
        del body["assistantId"]

        with pytest.raises(ValidationError) as exc_info:
            validate_call_request(body)

        field_errors = exc_info.value.details["fieldErrors"]
        assert field_errors["assistantId"] == ["assistantId is required"]
        assert exc_info.value.status_code == 400

    def test_empty_phone_number_id(self):
        """Test that empty ids are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_call_request(call_body(phoneNumberId=""))

        assert "phoneNumberId" in exc_info.value.details["fieldErrors"]

    def test_short_customer_number(self):
        """Test that numbers under 7 characters fail schema validation."""
        with pytest.raises(ValidationError) as exc_info:
            validate_call_request(call_body(customer={"number": "12345"}))

        assert exc_info.value.details["fieldErrors"]["customer.number"] == [
            "customer.number is required"
        ]

    def test_non_object_body(self):
        """Test that a non-object body produces a form-level error."""
        with pytest.raises(ValidationError) as exc_info:
            validate_call_request(["not", "an", "object"])

        details = exc_info.value.details
        assert details["formErrors"]
        assert details["fieldErrors"] == {}

    def test_unnormalizable_number(self):
        """Test that numbers without enough digits raise InvalidNumberError."""
        with pytest.raises(InvalidNumberError) as exc_info:
            validate_call_request(call_body(customer={"number": "call me maybe"}))

        assert exc_info.value.message == "Invalid customer number"

    def test_plus_without_digits(self):
        """Test that a + followed by no digits is invalid."""
        with pytest.raises(InvalidNumberError):
            validate_call_request(call_body(customer={"number": "+ () - --"}))

    def test_provider_payload_uses_wire_names(self):
        """Test that the Vapi payload uses camelCase and drops empty names."""
        request = validate_call_request(call_body(customer={"number": "9853075465"}))

        assert request.to_provider_payload() == {
            "phoneNumberId": "pn_123",
            "assistantId": "asst_123",
            "customer": {"number": "+19853075465"},
        }


class TestValidateCampaignRequest:
    """Test validate_campaign_request."""

    def test_default_name(self):
        """Test that campaigns default to the web campaign name."""
        request = validate_campaign_request(call_body())

        assert isinstance(request, CampaignRequest)
        assert request.name == "Web Campaign"
        assert request.customer.number == "+19853075465"

    def test_empty_name_rejected(self):
        """Test that an explicitly empty name is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_campaign_request(call_body(name=""))

        assert exc_info.value.details["fieldErrors"]["name"] == ["name is required"]

    def test_provider_payload_wraps_single_customer(self):
        """Test that the campaign payload lists the one customer."""
        request = validate_campaign_request(call_body(name="Spring Outreach"))

        assert request.to_provider_payload() == {
            "name": "Spring Outreach",
            "phoneNumberId": "pn_123",
            "assistantId": "asst_123",
            "customers": [{"number": "+19853075465", "name": "Ada"}],
        }


class TestOutboundCallService:
    """Test OutboundCallService."""

    @pytest.mark.asyncio
    async def test_place_call(self, mock_vapi_client):
        """Test that a valid call is forwarded with the normalized number."""
        service = OutboundCallService(mock_vapi_client)

        call_id, call = await service.place_call(call_body())

        assert call_id == "call_123"
        assert call["status"] == "queued"
        mock_vapi_client.create_call.assert_awaited_once_with(
            {
                "phoneNumberId": "pn_123",
                "assistantId": "asst_123",
                "customer": {"number": "+19853075465", "name": "Ada"},
            }
        )

    @pytest.mark.asyncio
    async def test_place_call_batch_response(self, mock_vapi_client):
        """Test that the id is taken from the first batch result."""
        mock_vapi_client.create_call.return_value = {
            "results": [{"id": "call_a"}, {"id": "call_b"}],
            "errors": [],
        }
        service = OutboundCallService(mock_vapi_client)

        call_id, _ = await service.place_call(call_body())

        assert call_id == "call_a"

    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_provider(self, mock_vapi_client):
        """Test that validation failures do not call Vapi."""
        body = call_body()
        del body["assistantId"]
        service = OutboundCallService(mock_vapi_client)

        with pytest.raises(ValidationError):
            await service.place_call(body)

        mock_vapi_client.create_call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_campaign(self, mock_vapi_client):
        """Test that campaigns are created with a single customer."""
        service = OutboundCallService(mock_vapi_client, default_country_code="1")

        campaign_id, campaign = await service.create_campaign(call_body())

        assert campaign_id == "campaign_123"
        payload = mock_vapi_client.create_campaign.await_args.args[0]
        assert payload["name"] == "Web Campaign"
        assert payload["customers"] == [{"number": "+19853075465", "name": "Ada"}]
