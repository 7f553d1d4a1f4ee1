"""Standard error codes for the checkout relay.

Every failure that leaves a request is described by one of these codes.
The HTTP layer maps codes to status codes (see checkout_api.exceptions).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error codes surfaced to API callers."""

    # Request validation errors
    INVALID_REQUEST = "ERR_REQUEST_001"

    # Webhook delivery errors (ERR_WEBHOOK_001-ERR_WEBHOOK_004)
    TRANSPORT_ERROR = "ERR_WEBHOOK_001"
    MALFORMED_ENVELOPE = "ERR_WEBHOOK_002"
    MALFORMED_PAYLOAD = "ERR_WEBHOOK_003"
    INVALID_WEBHOOK_SIGNATURE = "ERR_WEBHOOK_004"

    # Stripe API errors (ERR_STRIPE_001-ERR_STRIPE_003)
    CHECKOUT_SESSION_FAILED = "ERR_STRIPE_001"
    SESSION_RETRIEVAL_FAILED = "ERR_STRIPE_002"
    PAYMENT_INTENT_RETRIEVAL_FAILED = "ERR_STRIPE_003"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_REQUEST: "Request parameters are invalid",
    ErrorCode.TRANSPORT_ERROR: "Error reading request body",
    ErrorCode.MALFORMED_ENVELOPE: "Webhook body is not a valid event",
    ErrorCode.MALFORMED_PAYLOAD: "Event data does not match its event type",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid webhook signature",
    ErrorCode.CHECKOUT_SESSION_FAILED: "Error creating checkout session",
    ErrorCode.SESSION_RETRIEVAL_FAILED: "Error retrieving session information",
    ErrorCode.PAYMENT_INTENT_RETRIEVAL_FAILED: "Error retrieving payment intent",
}


class ErrorResponse(BaseModel):
    """JSON body returned for every failed request."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse carrying the standard message for a code."""
        return cls(error_code=code, message=ERROR_MESSAGES[code], details=details)


class RelayError(Exception):
    """Exception raised when a request cannot be completed.

    Raised by the dispatcher and the route handlers; converted to an
    ErrorResponse by the registered FastAPI exception handler.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)
