"""Domain errors and the exception handler enforcing the `{message}` error shape."""

import logging
from typing import Any

from django.http import JsonResponse
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    Throttled,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from authentication.services import BlocklistUnavailable

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = "Authentication required."
FORBIDDEN_MESSAGE = "You do not have permission to perform this action."
THROTTLED_MESSAGE = "Too many requests. Please try again later."
SERVER_ERROR_MESSAGE = "Internal server error."


class Conflict(APIException):
    """A uniqueness rule would be violated (email or username taken)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Resource already exists."
    default_code = "conflict"


class PayloadTooLarge(APIException):
    """An uploaded file exceeds the configured size ceiling."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_detail = "File too large."
    default_code = "payload_too_large"


def _flatten(payload: Any) -> list[str]:
    """Collapse DRF's detail structures (str, list, dict) into flat messages."""

    if isinstance(payload, dict):
        if "detail" in payload:
            return _flatten(payload["detail"])
        messages: list[str] = []
        for value in payload.values():
            messages.extend(_flatten(value))
        return messages
    if isinstance(payload, (list, tuple)):
        messages = []
        for item in payload:
            messages.extend(_flatten(item))
        return messages
    return [str(payload)]


def message_body(message: str, **extra: Any) -> dict[str, Any]:
    return {"message": message, **extra}


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Render every error as `{ "message": "..." }` with its contractual status.

    - Uses DRF's default handler for APIException subclasses and Http404.
    - Normalizes authentication failures to 401 and hides permission detail.
    - Anything DRF does not recognize is logged and reported as a 500.
    """

    # Blocklist outages must fail closed with 503 rather than let a revoked
    # token through.
    if isinstance(exc, BlocklistUnavailable):
        return Response(
            message_body("Authentication service unavailable."),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", type(view).__name__ if view else "request", exc_info=exc
        )
        return Response(
            message_body(SERVER_ERROR_MESSAGE),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        message = UNAUTHENTICATED_MESSAGE
    elif isinstance(exc, PermissionDenied):
        message = FORBIDDEN_MESSAGE
    elif isinstance(exc, Throttled):
        message = THROTTLED_MESSAGE
    else:
        message = " ".join(_flatten(response.data))

    response.data = message_body(message)
    return response


def not_found_view(request, exception=None):
    """JSON 404 for unknown routes."""
    return JsonResponse(message_body("Endpoint not found."), status=status.HTTP_404_NOT_FOUND)


def server_error_view(request):
    """JSON 500 for errors raised outside DRF views."""
    return JsonResponse(
        message_body(SERVER_ERROR_MESSAGE), status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


__all__ = [
    "Conflict",
    "PayloadTooLarge",
    "custom_exception_handler",
    "message_body",
    "not_found_view",
    "server_error_view",
]
