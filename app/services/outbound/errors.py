"""Outbound call error taxonomy."""
from typing import Any, Dict, Optional


class OutboundError(Exception):
    """Base class for outbound call failures."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> Dict[str, Any]:
        """Build the JSON body returned to the caller."""
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(OutboundError):
    """Request body failed schema validation."""

    status_code = 400

    def __init__(self, details: Dict[str, Any], message: str = "Invalid payload"):
        super().__init__(message, details)


class InvalidNumberError(OutboundError):
    """Destination number could not be normalized."""

    status_code = 400

    def __init__(self, message: str = "Invalid customer number"):
        super().__init__(message)


class ProviderError(OutboundError):
    """The voice platform rejected or failed a request."""

    status_code = 502


class ConfigurationError(OutboundError):
    """Credentials for the voice platform are missing."""

    status_code = 500

    def __init__(self, message: str = "Server not configured for Vapi"):
        super().__init__(message)
