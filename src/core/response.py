"""Response helpers keeping success payloads and messages consistent."""

from typing import Any

from rest_framework import status as http_status
from rest_framework.response import Response

from core.exceptions import message_body


def api_response(data: Any, status: int = http_status.HTTP_200_OK) -> Response:
    """Return ``data`` as the JSON body."""

    return Response(data, status=status)


def message_response(message: str, status: int = http_status.HTTP_200_OK, **extra: Any) -> Response:
    """Return `{ "message": ..., **extra }`, the shape used by mutating endpoints."""

    return Response(message_body(message, **extra), status=status)


def no_content() -> Response:
    # 204 responses must not include a body.
    return Response(status=http_status.HTTP_204_NO_CONTENT)


__all__ = ["api_response", "message_response", "no_content"]
