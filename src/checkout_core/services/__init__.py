"""Services: Stripe API access and webhook event dispatch."""

from checkout_core.services.dispatcher import (
    DispatchOutcome,
    DispatchResult,
    EventDispatcher,
)
from checkout_core.services.event_handlers import build_default_dispatcher
from checkout_core.services.stripe_service import StripeService, StripeServiceError

__all__ = [
    "DispatchOutcome",
    "DispatchResult",
    "EventDispatcher",
    "StripeService",
    "StripeServiceError",
    "build_default_dispatcher",
]
