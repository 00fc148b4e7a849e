"""Middleware resolving the session cookie into request.user."""

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.http import JsonResponse
from django.urls import Resolver404, resolve
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed

from authentication.models import User
from authentication.services import BlocklistUnavailable, TokenService

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(MiddlewareMixin):
    """Decode the session JWT, check the blocklist, and attach request.user.

    A missing, invalid, expired, or revoked token leaves the request anonymous;
    endpoints that need an actor reject it with 401 through DRF permissions.
    Public endpoints keep working when a stale cookie is still around.
    """

    def process_request(self, request):  # type: ignore[override]
        """Authenticate the request from the session cookie if present."""
        request.user = AnonymousUser()

        token = get_session_token(request)
        if not token:
            return None

        try:
            payload = TokenService.decode_token(token)
            jti = payload.get("jti")
            if not jti or TokenService.is_token_blocked(jti):
                return None

            user = self._get_user(payload.get("sub"))
            if user is not None:
                request.user = user
            return None

        except AuthenticationFailed as exc:
            logger.debug("Ignoring session token: %s", exc.detail)
            return None
        except BlocklistUnavailable:
            if _is_logout(request):
                # Logout still clears the cookie; the view logs the failed revocation.
                return None
            logger.error("Token blocklist unavailable, rejecting authenticated request")
            return _service_unavailable()

    @staticmethod
    def _get_user(user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        try:
            return User.objects.get(id=user_id)
        except (User.DoesNotExist, ValueError):
            return None


def get_session_token(request) -> str | None:
    """Return the token from the session cookie; other headers are ignored."""
    return request.COOKIES.get(settings.CMS.cookie_name) or None


def _is_logout(request) -> bool:
    try:
        return resolve(request.path_info).url_name == "auth-logout"
    except Resolver404:
        return False


def _service_unavailable() -> JsonResponse:
    return JsonResponse(
        {"message": "Authentication service unavailable."},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


__all__ = ["JWTAuthMiddleware", "get_session_token"]
