"""Outbound request validation and number normalization."""
import logging
from typing import Any, Dict, List, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from app.services.outbound.errors import InvalidNumberError, ValidationError
from app.services.outbound.models import CallRequest, CampaignRequest
from app.services.outbound.phone import normalize_phone_number

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=CallRequest)

# Pydantic error types reported as "<field> is required"
_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}


def _flatten_errors(exc: PydanticValidationError) -> Dict[str, Any]:
    """Convert pydantic errors into form-level and field-level diagnostics."""
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}

    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"])
        if not loc:
            form_errors.append(error["msg"])
            continue

        if error["type"] in _REQUIRED_ERROR_TYPES:
            message = f"{loc} is required"
        else:
            message = error["msg"]
        field_errors.setdefault(loc, []).append(message)

    return {"formErrors": form_errors, "fieldErrors": field_errors}


def validate_request(
    body: Any,
    model: Type[RequestT],
    default_country_code: str = "1",
) -> RequestT:
    """
    Validate an untrusted request body and normalize its destination number.

    Args:
        body: Parsed JSON body
        model: Request model to validate against
        default_country_code: Country code for bare 10 digit numbers

    Returns:
        Validated request with customer.number in canonical form

    Raises:
        ValidationError: If the body does not match the request schema
        InvalidNumberError: If the customer number cannot be normalized
    """
    try:
        request = model.model_validate(body)
    except PydanticValidationError as e:
        details = _flatten_errors(e)
        logger.info(f"[VALIDATOR] Rejected {model.__name__} - {details}")
        raise ValidationError(details) from e

    normalized = normalize_phone_number(
        request.customer.number, default_country_code=default_country_code
    )
    if normalized is None:
        logger.info(
            f"[VALIDATOR] Could not normalize customer number for {model.__name__}"
        )
        raise InvalidNumberError()

    return request.with_number(normalized)


def validate_call_request(body: Any, default_country_code: str = "1") -> CallRequest:
    """Validate an outbound call request."""
    return validate_request(body, CallRequest, default_country_code)


def validate_campaign_request(
    body: Any, default_country_code: str = "1"
) -> CampaignRequest:
    """Validate an outbound campaign request."""
    return validate_request(body, CampaignRequest, default_country_code)
