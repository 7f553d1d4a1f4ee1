"""Response models for the webhook endpoint."""

from typing import Literal

from pydantic import BaseModel, Field


class WebhookAck(BaseModel):
    """Acknowledgment returned for every accepted delivery."""

    received: bool = True
    event_id: str | None = Field(default=None, examples=["evt_1ABC123DEF456"])
    event_type: str = Field(..., examples=["payment_intent.succeeded"])
    result: Literal["handled", "unrecognized"]
