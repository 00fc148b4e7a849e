"""DRF authenticator reading the account resolved by ``JWTAuthMiddleware``.

The session cookie is decoded once, in middleware, so public Django views
(upload serving, 404 handler) and DRF views see the same ``request.user``.
"""

from typing import Any, Optional, Tuple

from django.conf import settings
from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Hand the middleware's account to DRF; anonymous requests stay unauthenticated."""

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        user = getattr(getattr(request, "_request", None), "user", None)
        if user is None or not user.is_authenticated:
            return None
        return user, None

    def authenticate_header(self, request) -> str:
        # A non-empty value makes DRF answer NotAuthenticated with 401, not 403.
        return f'Cookie realm="api", name="{settings.CMS.cookie_name}"'


__all__ = ["MiddlewareUserAuthentication"]
