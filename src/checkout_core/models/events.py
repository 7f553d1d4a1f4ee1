"""Stripe webhook event models.

A webhook delivery is an envelope whose ``type`` tag decides how the
nested ``data.object`` must be decoded. Each recognized tag maps to exactly
one payload model below.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventType(str, Enum):
    """Event type tags with a registered payload shape."""

    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_INTENT_PAYMENT_FAILED = "payment_intent.payment_failed"
    REFUND_CREATED = "refund.created"
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class EventData(BaseModel):
    """The ``data`` member of an event; ``object`` is left undecoded."""

    model_config = ConfigDict(extra="ignore")

    object: Any = None


class EventEnvelope(BaseModel):
    """Outer wrapper of a Stripe webhook delivery.

    A missing or null ``type`` decodes as the empty tag, which no route
    matches. The nested payload is kept raw until the
    dispatcher knows which shape the tag calls for.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(
        default=None,
        description="Stripe event ID (evt_xxx)",
        examples=["evt_1ABC123DEF456"],
    )
    type: str = Field(
        default="",
        description="Stripe event type tag; empty when absent or null",
        examples=["payment_intent.succeeded", "refund.created"],
    )
    data: EventData = Field(default_factory=EventData)

    @field_validator("type", mode="before")
    @classmethod
    def _null_type_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def raw_payload(self) -> Any:
        """The undecoded ``data.object`` of the event."""
        return self.data.object


class StripePayload(BaseModel):
    """Base for typed event payloads.

    Stripe adds fields over time, so unknown keys are ignored. Field types
    are checked strictly so a payload of the wrong shape is rejected rather
    than coerced.
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    @field_validator("metadata", mode="before", check_fields=False)
    @classmethod
    def _null_metadata_is_empty(cls, value: Any) -> Any:
        # Stripe sends metadata: null on some objects
        return {} if value is None else value


class PaymentIntentPayload(StripePayload):
    """A PaymentIntent object (pi_xxx)."""

    object: Literal["payment_intent"] = "payment_intent"
    id: str
    amount: int | None = None
    currency: str | None = None
    status: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class RefundPayload(StripePayload):
    """A Refund object (re_xxx)."""

    object: Literal["refund"] = "refund"
    id: str
    amount: int | None = None
    currency: str | None = None
    payment_intent: str | None = None
    status: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class CheckoutSessionPayload(StripePayload):
    """A Checkout Session object (cs_xxx)."""

    object: Literal["checkout.session"] = "checkout.session"
    id: str
    payment_intent: str | None = None
    payment_status: str | None = None
    client_reference_id: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
