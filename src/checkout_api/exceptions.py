"""FastAPI exception handlers for converting RelayError to HTTP responses.

The ErrorCode-to-HTTP status mapping:
- 422 Unprocessable Entity: missing or invalid query/path parameters
- 400 Bad Request: malformed webhook envelope or payload, bad signature
- 500 Internal Server Error: Stripe lookups that failed
- 502 Bad Gateway: Stripe refused to create a checkout session
- 503 Service Unavailable: the webhook body could not be read

Usage:
    from checkout_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from checkout_core.models.errors import ErrorCode, RelayError
from checkout_core.utils.logging import get_logger

logger = get_logger(__name__)

# Starlette renamed the 422 constant; the number is stable
HTTP_422_INVALID_REQUEST = 422

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: HTTP_422_INVALID_REQUEST,
    ErrorCode.TRANSPORT_ERROR: HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.MALFORMED_ENVELOPE: HTTP_400_BAD_REQUEST,
    ErrorCode.MALFORMED_PAYLOAD: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: HTTP_400_BAD_REQUEST,
    ErrorCode.CHECKOUT_SESSION_FAILED: HTTP_502_BAD_GATEWAY,
    ErrorCode.SESSION_RETRIEVAL_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.PAYMENT_INTENT_RETRIEVAL_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode (500 if not explicitly mapped)."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_500_INTERNAL_SERVER_ERROR)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Convert a RelayError to a JSON ErrorResponse with the mapped status."""
    status_code = get_http_status_for_error(exc.code)
    logger.info(
        "%s %s failed: %s (%s)",
        request.method,
        request.url.path,
        exc.code.value,
        status_code,
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI request validation failures as an ErrorResponse."""
    details: dict[str, str] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.setdefault(location or "request", str(error.get("msg", "invalid")))

    return await relay_error_handler(
        request, RelayError(ErrorCode.INVALID_REQUEST, details=details or None)
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    The failure stays confined to this request; internal details are logged
    but not returned to the caller.
    """
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)

    error_response = {
        "success": False,
        "error_code": "ERR_INTERNAL",
        "message": "An unexpected error occurred",
        "details": None,
    }

    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(RelayError, relay_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
