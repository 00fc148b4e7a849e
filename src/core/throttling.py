"""Per-client rate limit for the authentication routes."""

from django.conf import settings
from rest_framework.throttling import SimpleRateThrottle


class AuthRateThrottle(SimpleRateThrottle):
    """Limit requests to /api/auth/* by client IP.

    The limit and window come from ``settings.CMS`` so development and
    production differ without separate rate strings. The IP is DRF's
    ``get_ident``, which reads ``X-Forwarded-For`` only as far as the
    ``NUM_PROXIES`` trusted hops.
    """

    scope = "auth"

    def get_rate(self) -> str:
        config = settings.CMS
        return f"{config.auth_rate_limit}/{config.auth_rate_window_seconds}s"

    def parse_rate(self, rate):
        config = settings.CMS
        return config.auth_rate_limit, config.auth_rate_window_seconds

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }


__all__ = ["AuthRateThrottle"]
