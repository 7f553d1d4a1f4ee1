"""Checkout endpoints.

Provides endpoints for:
- Creating a hosted Checkout session and redirecting the buyer to it
- The success page Stripe redirects back to
- The cancel page
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from checkout_api.dependencies import get_settings, get_stripe_service
from checkout_core.config import Settings
from checkout_core.models.checkout import CheckoutSessionRequest
from checkout_core.models.errors import ErrorCode, RelayError
from checkout_core.services.stripe_service import StripeService, StripeServiceError
from checkout_core.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["checkout"])


@router.api_route(
    "/checkout",
    methods=["GET", "POST"],
    summary="Start a checkout",
    description="""
Create a Stripe Checkout session for the configured price (quantity 1)
and redirect the buyer to the hosted payment page.

**Notes:**
- Responds with 303 See Other to the session URL
- A Stripe failure ends the request with 502; no redirect is sent
""",
    status_code=HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Redirect to the hosted checkout page"},
        502: {"description": "Stripe could not create the session"},
    },
)
def checkout(
    settings: Settings = Depends(get_settings),
    stripe_service: StripeService = Depends(get_stripe_service),
) -> RedirectResponse:
    """Create a checkout session and redirect to it."""
    request = CheckoutSessionRequest.for_settings(settings)

    try:
        result = stripe_service.create_checkout_session(request)
    except StripeServiceError as e:
        logger.error("Checkout session creation failed: %s", e)
        details = {"stripe_error_code": e.stripe_error_code} if e.stripe_error_code else None
        raise RelayError(ErrorCode.CHECKOUT_SESSION_FAILED, details=details) from e

    logger.info("Redirecting to checkout session %s", result["session_id"])
    return RedirectResponse(url=result["checkout_url"], status_code=HTTP_303_SEE_OTHER)


@router.get(
    "/success",
    summary="Checkout success page",
    description="Look up the completed session named in the query string and return it as JSON.",
    responses={
        200: {"description": "Checkout session object"},
        500: {"description": "Session could not be retrieved"},
    },
)
def success(
    session_id: str = Query(..., min_length=1, description="Checkout session ID (cs_xxx)"),
    stripe_service: StripeService = Depends(get_stripe_service),
) -> dict[str, Any]:
    """Return the checkout session Stripe redirected back with."""
    try:
        return stripe_service.retrieve_checkout_session(session_id)
    except StripeServiceError as e:
        logger.error("session lookup failed for %s: %s", session_id, e)
        raise RelayError(
            ErrorCode.SESSION_RETRIEVAL_FAILED,
            details={"session_id": session_id},
        ) from e


@router.get(
    "/cancel",
    summary="Checkout cancel page",
    responses={200: {"description": "Checkout was cancelled by the buyer"}},
)
def cancel() -> dict[str, str]:
    """Landing page for a buyer who abandoned checkout."""
    return {"status": "cancelled"}
