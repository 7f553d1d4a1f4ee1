"""Checkout session request model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from checkout_core.config import Settings

# Stripe substitutes the session ID into this placeholder on redirect
CHECKOUT_SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"

DEFAULT_METADATA: dict[str, str] = {"some_unique_id": "some_unique_value"}


class CheckoutSessionRequest(BaseModel):
    """Parameters for one hosted Checkout Session.

    Built per incoming /checkout call and discarded afterwards.
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "price_id": "price_1234",
                    "quantity": 1,
                    "success_url": "http://localhost:4242/success?session_id={CHECKOUT_SESSION_ID}",
                    "cancel_url": "http://localhost:4242/cancel",
                    "metadata": {"some_unique_id": "some_unique_value"},
                    "payment_intent_metadata": {"some_unique_id": "some_unique_value"},
                    "client_reference_id": "MY-CUSTOMER-ID",
                }
            ]
        },
    )

    price_id: str = Field(..., description="Stripe Price ID (price_xxx)")
    quantity: int = Field(default=1, ge=1)
    success_url: str
    cancel_url: str
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Metadata on the session itself (not copied to the payment)",
    )
    payment_intent_metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Metadata on the PaymentIntent created by the session",
    )
    client_reference_id: str

    @classmethod
    def for_settings(cls, settings: Settings) -> "CheckoutSessionRequest":
        """Build the fixed single-item request used by the /checkout endpoint."""
        base_url = settings.base_url
        return cls(
            price_id=settings.price_id,
            quantity=1,
            success_url=f"{base_url}/success?session_id={CHECKOUT_SESSION_ID_PLACEHOLDER}",
            cancel_url=f"{base_url}/cancel",
            metadata=dict(DEFAULT_METADATA),
            payment_intent_metadata=dict(DEFAULT_METADATA),
            client_reference_id=settings.client_reference_id,
        )

    def to_stripe_params(self) -> dict[str, Any]:
        """Render as ``checkout.sessions.create`` params."""
        return {
            "mode": "payment",
            "line_items": [{"price": self.price_id, "quantity": self.quantity}],
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
            "metadata": dict(self.metadata),
            "payment_intent_data": {"metadata": dict(self.payment_intent_metadata)},
            "client_reference_id": self.client_reference_id,
        }
