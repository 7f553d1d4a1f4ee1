"""Webhook event dispatcher.

Turns an untrusted webhook body into a typed event and routes it to the
handler registered for its type tag:

    Received -> EnvelopeDecoded -> PayloadDecoded -> Handled -> Acked
                                -> Unrecognized -> Acked

Decode failures leave through ``RelayError`` (MALFORMED_ENVELOPE from
Received, MALFORMED_PAYLOAD from EnvelopeDecoded) and no handler runs.
Unknown tags are acknowledged so that new Stripe event types never break
the endpoint.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ValidationError

from checkout_core.models.errors import ErrorCode, RelayError
from checkout_core.models.events import EventEnvelope
from checkout_core.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)

EventHandler = Callable[[EventEnvelope, BaseModel], None]


class DispatchOutcome(str, Enum):
    """How an acknowledged event was processed."""

    HANDLED = "handled"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class EventRoute:
    """Payload shape and side effect for one event type tag."""

    payload_model: type[BaseModel]
    handler: EventHandler


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching one delivery."""

    event_id: str | None
    event_type: str
    outcome: DispatchOutcome
    payload: BaseModel | None = None


class EventDispatcher:
    """Registry of event routes keyed by type tag.

    Routes are registered at startup; ``dispatch`` only reads the registry
    and is safe to call from concurrent requests.
    """

    def __init__(self) -> None:
        self._routes: dict[str, EventRoute] = {}

    def register(
        self,
        event_type: str,
        payload_model: type[BaseModel],
        handler: EventHandler,
    ) -> None:
        """Register (or replace) the route for an event type tag.

        Args:
            event_type: Stripe event type tag, e.g. "refund.created".
            payload_model: Model that ``data.object`` must validate against.
            handler: Called once with the envelope and the decoded payload.
        """
        tag = event_type.value if isinstance(event_type, Enum) else event_type
        if tag in self._routes:
            logger.info("Replacing handler for event type %s", tag)
        self._routes[tag] = EventRoute(payload_model=payload_model, handler=handler)

    def is_recognized(self, event_type: str) -> bool:
        """Return True if a route is registered for the tag."""
        return event_type in self._routes

    @property
    def recognized_types(self) -> frozenset[str]:
        """All tags with a registered route."""
        return frozenset(self._routes)

    @staticmethod
    def decode_envelope(payload: bytes) -> EventEnvelope:
        """Parse a raw body into an EventEnvelope.

        Raises:
            RelayError: MALFORMED_ENVELOPE if the body is not a JSON object
                with a string ``type``.
        """
        try:
            return EventEnvelope.model_validate_json(payload)
        except ValidationError as e:
            logger.error("Error decoding webhook envelope: %s", _summarize(e))
            raise RelayError(
                ErrorCode.MALFORMED_ENVELOPE,
                details={"reason": _summarize(e)},
            ) from e

    def dispatch(self, payload: bytes) -> DispatchResult:
        """Decode one webhook delivery and run its handler.

        Args:
            payload: Raw request body.

        Returns:
            DispatchResult with outcome HANDLED or UNRECOGNIZED.

        Raises:
            RelayError: MALFORMED_ENVELOPE or MALFORMED_PAYLOAD.
        """
        envelope = self.decode_envelope(payload)

        route = self._routes.get(envelope.type)
        if route is None:
            log_webhook_event(logger, envelope.type, envelope.id, result="unrecognized")
            return DispatchResult(
                event_id=envelope.id,
                event_type=envelope.type,
                outcome=DispatchOutcome.UNRECOGNIZED,
            )

        try:
            event_payload = route.payload_model.model_validate(envelope.raw_payload)
        except ValidationError as e:
            log_webhook_event(
                logger,
                envelope.type,
                envelope.id,
                result="rejected",
                error=_summarize(e),
            )
            raise RelayError(
                ErrorCode.MALFORMED_PAYLOAD,
                details={"event_type": envelope.type, "reason": _summarize(e)},
            ) from e

        route.handler(envelope, event_payload)

        return DispatchResult(
            event_id=envelope.id,
            event_type=envelope.type,
            outcome=DispatchOutcome.HANDLED,
            payload=event_payload,
        )


def _summarize(error: ValidationError) -> str:
    """First validation problem, without echoing the offending input."""
    first = error.errors(include_url=False, include_input=False)[0]
    location = ".".join(str(part) for part in first["loc"]) or "body"
    return f"{location}: {first['msg']}"

