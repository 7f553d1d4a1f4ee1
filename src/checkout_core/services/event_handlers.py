"""Handlers for recognized Stripe event types.

Each handler receives the envelope and its decoded payload. They only log
for now; order fulfilment, refund bookkeeping and similar side effects
plug in here. Redelivery of the same event is possible, so any side
effect added here must be idempotent on ``event.id``.
"""

from pydantic import BaseModel

from checkout_core.models.events import (
    CheckoutSessionPayload,
    EventEnvelope,
    EventType,
    PaymentIntentPayload,
    RefundPayload,
)
from checkout_core.services.dispatcher import EventDispatcher, EventHandler
from checkout_core.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)


def handle_payment_intent_succeeded(
    event: EventEnvelope, payment_intent: PaymentIntentPayload
) -> None:
    log_webhook_event(
        logger,
        event.type,
        event.id,
        result="handled",
        payment_intent_id=payment_intent.id,
        amount=payment_intent.amount,
        currency=payment_intent.currency,
    )


def handle_payment_intent_payment_failed(
    event: EventEnvelope, payment_intent: PaymentIntentPayload
) -> None:
    log_webhook_event(
        logger,
        event.type,
        event.id,
        result="handled",
        payment_intent_id=payment_intent.id,
        status=payment_intent.status,
    )


def handle_refund_created(event: EventEnvelope, refund: RefundPayload) -> None:
    log_webhook_event(
        logger,
        event.type,
        event.id,
        result="handled",
        refund_id=refund.id,
        payment_intent_id=refund.payment_intent,
        amount=refund.amount,
    )


def handle_checkout_session_completed(
    event: EventEnvelope, session: CheckoutSessionPayload
) -> None:
    log_webhook_event(
        logger,
        event.type,
        event.id,
        result="handled",
        session_id=session.id,
        payment_status=session.payment_status,
        client_reference_id=session.client_reference_id,
    )


# EventType -> (payload model, handler); one entry per EventType member
DEFAULT_ROUTES: dict[EventType, tuple[type[BaseModel], EventHandler]] = {
    EventType.PAYMENT_INTENT_SUCCEEDED: (PaymentIntentPayload, handle_payment_intent_succeeded),
    EventType.PAYMENT_INTENT_PAYMENT_FAILED: (
        PaymentIntentPayload,
        handle_payment_intent_payment_failed,
    ),
    EventType.REFUND_CREATED: (RefundPayload, handle_refund_created),
    EventType.CHECKOUT_SESSION_COMPLETED: (
        CheckoutSessionPayload,
        handle_checkout_session_completed,
    ),
}


def build_default_dispatcher() -> EventDispatcher:
    """Create a dispatcher with a route for every EventType."""
    dispatcher = EventDispatcher()
    for event_type, (payload_model, handler) in DEFAULT_ROUTES.items():
        dispatcher.register(event_type, payload_model, handler)
    return dispatcher
