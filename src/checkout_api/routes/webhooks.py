"""Webhook endpoint for Stripe event deliveries.

This endpoint does not require authentication. When a signing secret is
configured the Stripe-Signature header is verified before decoding;
otherwise payloads are accepted as-is.
"""

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from checkout_api.dependencies import get_event_dispatcher, get_settings, get_stripe_service
from checkout_api.models.webhooks import WebhookAck
from checkout_core.config import Settings
from checkout_core.models.errors import ErrorCode, ErrorResponse, RelayError
from checkout_core.services.dispatcher import EventDispatcher
from checkout_core.services.stripe_service import StripeService, StripeServiceError
from checkout_core.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

SIGNATURE_HEADER = "Stripe-Signature"


async def read_limited_body(request: Request, limit: int) -> bytes:
    """Read the request body, failing once it grows past ``limit`` bytes.

    A declared Content-Length over the limit fails before anything is read.

    Raises:
        RelayError: TRANSPORT_ERROR if the body is too large or the client
            disconnects mid-read.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        logger.error("Webhook body too large: declared %s bytes, limit %d", declared, limit)
        raise RelayError(
            ErrorCode.TRANSPORT_ERROR,
            details={"reason": f"body exceeds {limit} bytes"},
        )

    body = bytearray()
    try:
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > limit:
                logger.error("Webhook body too large: over %d bytes", limit)
                raise RelayError(
                    ErrorCode.TRANSPORT_ERROR,
                    details={"reason": f"body exceeds {limit} bytes"},
                )
    except ClientDisconnect as e:
        logger.error("Error reading request body: client disconnected")
        raise RelayError(
            ErrorCode.TRANSPORT_ERROR,
            details={"reason": "client disconnected"},
        ) from e

    return bytes(body)


@router.post(
    "/webhook",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Recognized types are decoded and passed
to their handler; unrecognized types are acknowledged and skipped.

**Responses:**
- 200: event acknowledged (handled or unrecognized)
- 400: body is not a valid event, event data does not fit its type, or the signature is invalid
- 503: body could not be read (including bodies over the size limit)
""",
    response_model=WebhookAck,
    responses={
        200: {"description": "Event acknowledged", "model": WebhookAck},
        400: {"description": "Malformed event or invalid signature", "model": ErrorResponse},
        503: {"description": "Body could not be read", "model": ErrorResponse},
    },
)
async def handle_stripe_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    stripe_service: StripeService = Depends(get_stripe_service),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> WebhookAck:
    """Handle one Stripe webhook delivery."""
    payload = await read_limited_body(request, settings.max_webhook_body_bytes)

    if stripe_service.verifies_signatures:
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Webhook request missing %s header", SIGNATURE_HEADER)
            raise RelayError(
                ErrorCode.INVALID_WEBHOOK_SIGNATURE,
                details={"reason": f"missing {SIGNATURE_HEADER} header"},
            )
        try:
            stripe_service.verify_webhook_signature(payload, signature)
        except StripeServiceError as e:
            raise RelayError(ErrorCode.INVALID_WEBHOOK_SIGNATURE) from e

    # Handlers may block; keep them off the event loop
    result = await run_in_threadpool(dispatcher.dispatch, payload)

    return WebhookAck(
        event_id=result.event_id,
        event_type=result.event_type,
        result=result.outcome.value,
    )
