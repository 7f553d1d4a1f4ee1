"""Pytest configuration and fixtures for the checkout relay tests.

This module provides reusable fixtures for testing:
- Settings with test credentials
- A mocked StripeClient
- Sample webhook events
- An app and TestClient wired to the fixtures above
"""

import json
import os
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# === Environment Setup ===

# checkout_api.main builds a module-level app from the environment on import;
# keep real credentials out of it
for _name in ("API_KEY", "PRICE_ID", "STRIPE_WEBHOOK_SECRET", "PUBLIC_URL"):
    os.environ.pop(_name, None)

from checkout_core.config import Settings  # noqa: E402

TEST_SECRET_KEY = "sk_test_abc123xyz"
TEST_PRICE_ID = "price_1TEST123"
TEST_WEBHOOK_SECRET = "whsec_test_secret123"


# === Settings Fixtures ===


@pytest.fixture
def settings() -> Settings:
    """Settings with test credentials and the default port."""
    return Settings(api_key=TEST_SECRET_KEY, price_id=TEST_PRICE_ID)


@pytest.fixture
def signed_settings() -> Settings:
    """Settings that require signed webhooks."""
    return Settings(
        api_key=TEST_SECRET_KEY,
        price_id=TEST_PRICE_ID,
        webhook_secret=TEST_WEBHOOK_SECRET,
    )


# === Stripe Fixtures ===


@pytest.fixture
def mock_stripe_client() -> Generator[MagicMock, None, None]:
    """Mock StripeClient so no request leaves the process."""
    with patch("checkout_core.services.stripe_service.StripeClient") as mock_client_class:
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        yield mock_client


def make_stripe_object(**fields: Any) -> MagicMock:
    """Build a stand-in for a StripeObject with attributes and ``to_dict``."""
    obj = MagicMock()
    for key, value in fields.items():
        setattr(obj, key, value)
    obj.to_dict.return_value = dict(fields)
    return obj


# === App Fixtures ===


@pytest.fixture
def app(settings: Settings, mock_stripe_client: MagicMock) -> FastAPI:
    """App built from test settings with Stripe mocked."""
    from checkout_api.main import create_app

    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client that does not follow redirects."""
    return TestClient(app, follow_redirects=False)


# === Sample Event Fixtures ===


@pytest.fixture
def payment_intent_succeeded_event() -> dict[str, Any]:
    """Sample payment_intent.succeeded webhook event."""
    return {
        "id": "evt_test_pi_succeeded_123",
        "object": "event",
        "type": "payment_intent.succeeded",
        "created": 1704067200,  # 2024-01-01 00:00:00 UTC
        "data": {
            "object": {
                "id": "pi_test_intent_xyz",
                "object": "payment_intent",
                "amount": 2000,
                "currency": "usd",
                "status": "succeeded",
                "metadata": {"some_unique_id": "some_unique_value"},
            }
        },
    }


@pytest.fixture
def refund_created_event() -> dict[str, Any]:
    """Sample refund.created webhook event."""
    return {
        "id": "evt_test_refund_created_456",
        "object": "event",
        "type": "refund.created",
        "created": 1704153600,  # 2024-01-02 00:00:00 UTC
        "data": {
            "object": {
                "id": "re_test_refund_abc",
                "object": "refund",
                "amount": 1000,
                "currency": "usd",
                "payment_intent": "pi_test_intent_xyz",
                "status": "succeeded",
                "metadata": {},
            }
        },
    }


def encode_event(event: dict[str, Any]) -> bytes:
    """Serialize an event the way Stripe sends it."""
    return json.dumps(event).encode("utf-8")
