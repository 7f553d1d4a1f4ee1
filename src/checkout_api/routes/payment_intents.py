"""PaymentIntent lookup endpoint."""

from typing import Any

from fastapi import APIRouter, Depends

from checkout_api.dependencies import get_stripe_service
from checkout_core.models.errors import ErrorCode, RelayError
from checkout_core.services.stripe_service import StripeService, StripeServiceError
from checkout_core.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["payment_intents"])


@router.get(
    "/payment_intent/{payment_intent_id}",
    summary="Get a PaymentIntent",
    description="Fetch a PaymentIntent from Stripe by ID and return it as JSON.",
    responses={
        200: {"description": "PaymentIntent object"},
        500: {"description": "PaymentIntent could not be retrieved"},
    },
)
def get_payment_intent(
    payment_intent_id: str,
    stripe_service: StripeService = Depends(get_stripe_service),
) -> dict[str, Any]:
    """Return a PaymentIntent as JSON."""
    try:
        return stripe_service.retrieve_payment_intent(payment_intent_id)
    except StripeServiceError as e:
        logger.error("paymentintent lookup failed for %s: %s", payment_intent_id, e)
        raise RelayError(ErrorCode.PAYMENT_INTENT_RETRIEVAL_FAILED) from e
