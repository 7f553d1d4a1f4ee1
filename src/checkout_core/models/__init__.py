"""Domain models for checkout requests, webhook events and errors."""

from checkout_core.models.checkout import CheckoutSessionRequest
from checkout_core.models.errors import ErrorCode, ErrorResponse, RelayError
from checkout_core.models.events import (
    CheckoutSessionPayload,
    EventEnvelope,
    EventType,
    PaymentIntentPayload,
    RefundPayload,
)

__all__ = [
    "CheckoutSessionPayload",
    "CheckoutSessionRequest",
    "ErrorCode",
    "ErrorResponse",
    "EventEnvelope",
    "EventType",
    "PaymentIntentPayload",
    "RefundPayload",
    "RelayError",
]
