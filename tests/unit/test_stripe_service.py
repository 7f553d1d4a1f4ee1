"""Unit tests for StripeService.

Tests verify the service logic without making actual Stripe API calls.
All Stripe interactions are mocked.

Test categories:
- Initialization and API key handling
- create_checkout_session()
- retrieve_checkout_session() / retrieve_payment_intent()
- verify_webhook_signature()
"""

import hashlib
import hmac
import time
from unittest.mock import MagicMock

import pytest
import stripe

from checkout_core.config import Settings
from checkout_core.models.checkout import CheckoutSessionRequest
from checkout_core.services.stripe_service import StripeService, StripeServiceError
from conftest import TEST_PRICE_ID, TEST_WEBHOOK_SECRET, make_stripe_object


# === Helper Functions ===


def _sign(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """Create a Stripe-Signature header value (t={timestamp},v1={hmac})."""
    timestamp = timestamp or int(time.time())
    signed_payload = f"{timestamp}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


# === Test Fixtures ===


@pytest.fixture
def stripe_service(settings: Settings, mock_stripe_client: MagicMock) -> StripeService:
    return StripeService(settings)


@pytest.fixture
def checkout_request(settings: Settings) -> CheckoutSessionRequest:
    return CheckoutSessionRequest.for_settings(settings)


# === Initialization Tests ===


class TestStripeServiceInitialization:
    """Test lazy client creation and API key handling."""

    def test_client_lazy_initialized(self, stripe_service: StripeService):
        """Client is not created until first use."""
        assert stripe_service._client is None

    def test_client_created_once(self, stripe_service: StripeService, mock_stripe_client):
        first = stripe_service._get_client()
        second = stripe_service._get_client()

        assert first is second is mock_stripe_client

    def test_missing_api_key_fails_on_first_use(self, mock_stripe_client):
        """A missing key is not validated up front; the first call fails."""
        service = StripeService(Settings(api_key="", price_id=TEST_PRICE_ID))

        with pytest.raises(StripeServiceError) as exc_info:
            service.retrieve_payment_intent("pi_123")

        assert "API key is not configured" in str(exc_info.value)
        mock_stripe_client.payment_intents.retrieve.assert_not_called()


# === create_checkout_session() Tests ===


class TestCreateCheckoutSession:
    """Test checkout session creation."""

    def test_creates_session_with_required_params(
        self,
        stripe_service: StripeService,
        mock_stripe_client: MagicMock,
        checkout_request: CheckoutSessionRequest,
    ):
        mock_stripe_client.checkout.sessions.create.return_value = make_stripe_object(
            id="cs_test_abc",
            url="https://checkout.stripe.com/c/pay/cs_test_abc",
            status="open",
        )

        stripe_service.create_checkout_session(checkout_request)

        params = mock_stripe_client.checkout.sessions.create.call_args.kwargs["params"]
        assert params["mode"] == "payment"
        assert params["line_items"] == [{"price": TEST_PRICE_ID, "quantity": 1}]
        assert params["success_url"] == (
            "http://localhost:4242/success?session_id={CHECKOUT_SESSION_ID}"
        )
        assert params["cancel_url"] == "http://localhost:4242/cancel"
        assert params["metadata"] == {"some_unique_id": "some_unique_value"}
        assert params["payment_intent_data"] == {
            "metadata": {"some_unique_id": "some_unique_value"}
        }
        assert params["client_reference_id"] == "MY-CUSTOMER-ID"

    def test_returns_session_details(
        self,
        stripe_service: StripeService,
        mock_stripe_client: MagicMock,
        checkout_request: CheckoutSessionRequest,
    ):
        mock_stripe_client.checkout.sessions.create.return_value = make_stripe_object(
            id="cs_test_abc",
            url="https://checkout.stripe.com/c/pay/cs_test_abc",
            status="open",
        )

        result = stripe_service.create_checkout_session(checkout_request)

        assert result["session_id"] == "cs_test_abc"
        assert result["checkout_url"] == "https://checkout.stripe.com/c/pay/cs_test_abc"
        assert result["session"]["status"] == "open"

    def test_stripe_error_raises_service_error(
        self,
        stripe_service: StripeService,
        mock_stripe_client: MagicMock,
        checkout_request: CheckoutSessionRequest,
    ):
        mock_stripe_client.checkout.sessions.create.side_effect = stripe.InvalidRequestError(
            "No such price: 'price_1TEST123'",
            param="line_items[0][price]",
            code="resource_missing",
        )

        with pytest.raises(StripeServiceError) as exc_info:
            stripe_service.create_checkout_session(checkout_request)

        assert exc_info.value.stripe_error_code == "resource_missing"
        assert "Failed to create checkout session" in str(exc_info.value)

    def test_session_without_url_raises_service_error(
        self,
        stripe_service: StripeService,
        mock_stripe_client: MagicMock,
        checkout_request: CheckoutSessionRequest,
    ):
        mock_stripe_client.checkout.sessions.create.return_value = make_stripe_object(
            id="cs_test_abc", url=None, status="open"
        )

        with pytest.raises(StripeServiceError):
            stripe_service.create_checkout_session(checkout_request)


# === Lookup Tests ===


class TestLookups:
    """Test session and PaymentIntent retrieval."""

    def test_retrieve_checkout_session(self, stripe_service, mock_stripe_client):
        mock_stripe_client.checkout.sessions.retrieve.return_value = make_stripe_object(
            id="cs_test_abc", status="complete", payment_status="paid"
        )

        session = stripe_service.retrieve_checkout_session("cs_test_abc")

        mock_stripe_client.checkout.sessions.retrieve.assert_called_once_with("cs_test_abc")
        assert session == {"id": "cs_test_abc", "status": "complete", "payment_status": "paid"}

    def test_retrieve_checkout_session_error(self, stripe_service, mock_stripe_client):
        mock_stripe_client.checkout.sessions.retrieve.side_effect = stripe.InvalidRequestError(
            "No such checkout.session: 'cs_missing'", param="session", code="resource_missing"
        )

        with pytest.raises(StripeServiceError) as exc_info:
            stripe_service.retrieve_checkout_session("cs_missing")

        assert exc_info.value.stripe_error_code == "resource_missing"

    def test_retrieve_payment_intent(self, stripe_service, mock_stripe_client):
        mock_stripe_client.payment_intents.retrieve.return_value = make_stripe_object(
            id="pi_test_123", status="succeeded", amount=2000
        )

        payment_intent = stripe_service.retrieve_payment_intent("pi_test_123")

        mock_stripe_client.payment_intents.retrieve.assert_called_once_with("pi_test_123")
        assert payment_intent["amount"] == 2000

    def test_retrieve_payment_intent_auth_error(self, stripe_service, mock_stripe_client):
        mock_stripe_client.payment_intents.retrieve.side_effect = stripe.AuthenticationError(
            "Invalid API Key provided"
        )

        with pytest.raises(StripeServiceError):
            stripe_service.retrieve_payment_intent("pi_test_123")


# === verify_webhook_signature() Tests ===


class TestWebhookSignatureValidation:
    """Test webhook signature verification against real HMAC signatures."""

    @pytest.fixture
    def signed_service(self, signed_settings: Settings) -> StripeService:
        return StripeService(signed_settings)

    def test_valid_signature_accepted(self, signed_service: StripeService):
        payload = b'{"id": "evt_test_123", "type": "refund.created"}'

        signed_service.verify_webhook_signature(payload, _sign(payload, TEST_WEBHOOK_SECRET))

    def test_wrong_secret_rejected(self, signed_service: StripeService):
        payload = b'{"id": "evt_test_123"}'

        with pytest.raises(StripeServiceError) as exc_info:
            signed_service.verify_webhook_signature(payload, _sign(payload, "whsec_other"))

        assert "Invalid webhook signature" in str(exc_info.value)

    def test_tampered_payload_rejected(self, signed_service: StripeService):
        signature = _sign(b'{"amount": 100}', TEST_WEBHOOK_SECRET)

        with pytest.raises(StripeServiceError):
            signed_service.verify_webhook_signature(b'{"amount": 10}', signature)

    def test_expired_timestamp_rejected(self, signed_service: StripeService):
        payload = b'{"id": "evt_test_123"}'
        signature = _sign(payload, TEST_WEBHOOK_SECRET, timestamp=1000000000)

        with pytest.raises(StripeServiceError):
            signed_service.verify_webhook_signature(payload, signature)

    def test_non_utf8_payload_rejected(self, signed_service: StripeService):
        with pytest.raises(StripeServiceError):
            signed_service.verify_webhook_signature(b"\xff\xfe", "t=1,v1=abc")

    def test_without_secret_verification_unavailable(self, stripe_service: StripeService):
        assert stripe_service.verifies_signatures is False

        with pytest.raises(StripeServiceError):
            stripe_service.verify_webhook_signature(b"{}", "t=1,v1=abc")
