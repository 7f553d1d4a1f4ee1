"""Stripe service for checkout sessions, payment intents and webhooks.

Provides integration with Stripe using the v8+ StripeClient pattern.
The secret key comes from Settings; the client is created on first use.
"""

from typing import Any

import stripe
from stripe import StripeClient

from checkout_core.config import Settings
from checkout_core.models.checkout import CheckoutSessionRequest
from checkout_core.utils.logging import get_logger, log_stripe_operation

logger = get_logger(__name__)


class StripeServiceError(Exception):
    """Raised when a Stripe operation fails."""

    def __init__(self, message: str, stripe_error_code: str | None = None) -> None:
        """Initialize with message and optional Stripe error code.

        Args:
            message: Human-readable error message.
            stripe_error_code: Stripe-specific error code if available.
        """
        super().__init__(message)
        self.stripe_error_code = stripe_error_code


class StripeService:
    """Service for Stripe API calls.

    Handles:
    - Checkout session creation and retrieval
    - PaymentIntent retrieval
    - Webhook signature validation

    Usage:
        stripe_svc = StripeService(Settings.from_env())
        result = stripe_svc.create_checkout_session(
            CheckoutSessionRequest.for_settings(settings)
        )
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._client: StripeClient | None = None

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization).

        Raises:
            StripeServiceError: If no API key is configured.
        """
        if self._client is None:
            if not self._settings.api_key:
                raise StripeServiceError("Stripe API key is not configured (set API_KEY)")
            self._client = StripeClient(self._settings.api_key)
            logger.info("Stripe client initialized")
        return self._client

    def create_checkout_session(self, request: CheckoutSessionRequest) -> dict[str, Any]:
        """Create a hosted Checkout session.

        Args:
            request: Session parameters.

        Returns:
            Dict with session details:
                - session_id: Stripe checkout session ID
                - checkout_url: URL to redirect the buyer to
                - session: Full session object as a plain dict

        Raises:
            StripeServiceError: If creation fails or Stripe returns no URL.
        """
        client = self._get_client()

        try:
            session = client.checkout.sessions.create(params=request.to_stripe_params())
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            log_stripe_operation(
                logger,
                "create_checkout_session",
                error=str(e),
                stripe_error_code=error_code,
            )
            raise StripeServiceError(
                f"Failed to create checkout session: {e}",
                stripe_error_code=error_code,
            ) from e

        if not session.url:
            log_stripe_operation(
                logger,
                "create_checkout_session",
                object_id=session.id,
                error="session has no hosted URL",
            )
            raise StripeServiceError(f"Checkout session {session.id} has no hosted URL")

        log_stripe_operation(
            logger,
            "create_checkout_session",
            object_id=session.id,
            status=session.status,
            price_id=request.price_id,
        )

        return {
            "session_id": session.id,
            "checkout_url": session.url,
            "session": session.to_dict(),
        }

    def retrieve_checkout_session(self, session_id: str) -> dict[str, Any]:
        """Retrieve a Checkout session by ID.

        Raises:
            StripeServiceError: If the lookup fails.
        """
        client = self._get_client()

        try:
            session = client.checkout.sessions.retrieve(session_id)
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            log_stripe_operation(
                logger,
                "retrieve_checkout_session",
                object_id=session_id,
                error=str(e),
                stripe_error_code=error_code,
            )
            raise StripeServiceError(
                f"Failed to retrieve checkout session {session_id}: {e}",
                stripe_error_code=error_code,
            ) from e

        log_stripe_operation(
            logger,
            "retrieve_checkout_session",
            object_id=session.id,
            status=session.status,
        )
        return session.to_dict()

    def retrieve_payment_intent(self, payment_intent_id: str) -> dict[str, Any]:
        """Retrieve a PaymentIntent by ID.

        Raises:
            StripeServiceError: If the lookup fails.
        """
        client = self._get_client()

        try:
            payment_intent = client.payment_intents.retrieve(payment_intent_id)
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            log_stripe_operation(
                logger,
                "retrieve_payment_intent",
                object_id=payment_intent_id,
                error=str(e),
                stripe_error_code=error_code,
            )
            raise StripeServiceError(
                f"Failed to retrieve payment intent {payment_intent_id}: {e}",
                stripe_error_code=error_code,
            ) from e

        log_stripe_operation(
            logger,
            "retrieve_payment_intent",
            object_id=payment_intent.id,
            status=payment_intent.status,
        )
        return payment_intent.to_dict()

    def verify_webhook_signature(self, payload: bytes, signature: str) -> None:
        """Verify a webhook signature against the configured signing secret.

        Args:
            payload: Raw request body bytes.
            signature: Stripe-Signature header value.

        Raises:
            StripeServiceError: If no secret is configured or the signature is invalid.
        """
        secret = self._settings.webhook_secret
        if not secret:
            raise StripeServiceError("Webhook signing secret is not configured")

        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature,
                secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except (stripe.SignatureVerificationError, UnicodeDecodeError) as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise StripeServiceError("Invalid webhook signature") from e

    @property
    def verifies_signatures(self) -> bool:
        """Whether incoming webhooks must carry a valid signature."""
        return bool(self._settings.webhook_secret)
