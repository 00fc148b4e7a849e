"""Lazily created Redis connection backing the session token blocklist."""

import redis
from django.conf import settings

# Seconds; a stalled Redis must fail the blocklist lookup quickly, not hang the request.
SOCKET_TIMEOUT = 2

_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return the process-wide client for ``settings.REDIS_URL``."""

    global _client
    if _client is None:
        _client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=SOCKET_TIMEOUT,
            socket_connect_timeout=SOCKET_TIMEOUT,
        )
    return _client


__all__ = ["get_redis_client"]
