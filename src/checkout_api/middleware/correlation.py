"""Correlation ID middleware for request tracing.

Uses the caller's X-Correlation-ID header when present, otherwise a new
UUID, and echoes it on the response so webhook deliveries can be matched
to log lines. Written as a plain ASGI middleware so request bodies are
streamed through to the route untouched.
"""

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from checkout_core.utils.logging import clear_correlation_id, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware:
    """Sets the correlation ID for the lifetime of one request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        correlation_id = set_correlation_id(Headers(scope=scope).get(CORRELATION_ID_HEADER))

        async def send_with_correlation_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[CORRELATION_ID_HEADER] = correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            clear_correlation_id()
