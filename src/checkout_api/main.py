"""FastAPI application for the Stripe checkout relay.

Endpoints:
- /checkout: create a Checkout session and redirect to it
- /success, /cancel: pages Stripe redirects back to
- /payment_intent/{id}: PaymentIntent lookup
- /webhook: Stripe event receiver
- /ping: health check
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from mangum import Mangum

from checkout_api.exceptions import register_exception_handlers
from checkout_api.middleware.correlation import CorrelationIdMiddleware
from checkout_api.routes.checkout import router as checkout_router
from checkout_api.routes.payment_intents import router as payment_intents_router
from checkout_api.routes.webhooks import router as webhooks_router
from checkout_core.config import Settings
from checkout_core.services.dispatcher import EventDispatcher
from checkout_core.services.event_handlers import build_default_dispatcher
from checkout_core.services.stripe_service import StripeService
from checkout_core.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    stripe_service: StripeService | None = None,
    event_dispatcher: EventDispatcher | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Process configuration. Read from the environment if omitted.
        stripe_service: Stripe service to use instead of one built from settings.
        event_dispatcher: Dispatcher to use instead of the default routes.

    Returns:
        Configured FastAPI app with settings and services on ``app.state``.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Stripe Checkout Relay",
        description="Creates Stripe Checkout sessions and receives Stripe webhooks",
        version="0.1.0",
    )

    app.state.settings = settings
    app.state.stripe_service = stripe_service or StripeService(settings)
    app.state.event_dispatcher = event_dispatcher or build_default_dispatcher()

    app.add_middleware(CorrelationIdMiddleware)
    register_exception_handlers(app)

    app.include_router(checkout_router)
    app.include_router(payment_intents_router)
    app.include_router(webhooks_router)

    @app.get("/ping")
    async def ping() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "service": "checkout-relay",
        }

    return app


_settings = Settings.from_env()
configure_logging(_settings.log_level)

app = create_app(_settings)

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(reload: bool = False) -> None:
    """Run the FastAPI server on the configured host and port.

    Args:
        reload: Enable hot reload for development (default: False)
    """
    import uvicorn

    logger.info("server started on %s:%d", _settings.host, _settings.port)

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "checkout_api.main:app",
            host=_settings.host,
            port=_settings.port,
            reload=True,
        )
    else:
        uvicorn.run(app, host=_settings.host, port=_settings.port)


if __name__ == "__main__":
    run_server()
