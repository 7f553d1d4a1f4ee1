"""API routes package.

Routers are organized by resource:

- checkout: Checkout session creation, success and cancel pages
- payment_intents: PaymentIntent lookup
- webhooks: Stripe webhook receiver

All routers are registered in main.py at the root path.
"""

from checkout_api.routes.checkout import router as checkout_router
from checkout_api.routes.payment_intents import router as payment_intents_router
from checkout_api.routes.webhooks import router as webhooks_router

__all__ = [
    "checkout_router",
    "payment_intents_router",
    "webhooks_router",
]
