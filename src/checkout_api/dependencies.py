"""FastAPI dependency providers.

Settings and services are built once in ``create_app`` and kept on
``app.state``; these providers hand them to route handlers.

Usage in routes:
    from checkout_api.dependencies import get_stripe_service

    @router.get("/success")
    async def success(stripe_service: StripeService = Depends(get_stripe_service)):
        ...

Testing:
    Build an app with ``create_app(settings)`` and replace services through
    ``app.dependency_overrides``.
"""

from fastapi import Request

from checkout_core.config import Settings
from checkout_core.services.dispatcher import EventDispatcher
from checkout_core.services.stripe_service import StripeService


def get_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_stripe_service(request: Request) -> StripeService:
    """Shared StripeService for the app."""
    return request.app.state.stripe_service


def get_event_dispatcher(request: Request) -> EventDispatcher:
    """Shared EventDispatcher for the app."""
    return request.app.state.event_dispatcher
