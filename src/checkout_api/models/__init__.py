"""API-specific request/response models.

Domain models (events, checkout requests, errors) live in
checkout_core.models and are reused here where appropriate.
"""

from checkout_api.models.webhooks import WebhookAck

__all__ = ["WebhookAck"]
