"""Token service for session JWT creation, decoding, and blocklist checks."""

import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

from core.redis_client import get_redis_client


class BlocklistUnavailable(Exception):
    """Raised when Redis blocklist cannot be checked (fail-closed)."""


class TokenService:
    """Handle session JWT issuance, decoding, blocklisting, and the cookie."""

    ALGORITHM = "HS256"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def generate_token(cls, user) -> str:
        """Generate a signed session token for the given account."""

        now = datetime.now(timezone.utc)
        ttl = timedelta(seconds=settings.CMS.token_ttl_seconds)
        payload = {
            "sub": str(user.id),
            "jti": str(uuid.uuid4()),
            "exp": int((now + ttl).timestamp()),
            "iat": int(now.timestamp()),
        }
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=cls.ALGORITHM)

    @classmethod
    def decode_token(cls, token: str) -> dict[str, Any]:
        """Decode and validate a session JWT."""

        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[cls.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Invalid token") from exc

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Add token jti to blocklist until its expiration timestamp."""

        client = get_redis_client()
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{cls.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        """Check if a token jti is present in the blocklist."""

        client = get_redis_client()
        try:
            return client.get(f"{cls.BLOCKLIST_PREFIX}{jti}") is not None
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc

    @staticmethod
    def set_cookie(response, token: str) -> None:
        """Attach the session token as an HTTP-only cookie."""

        config = settings.CMS
        response.set_cookie(
            config.cookie_name,
            token,
            max_age=config.token_ttl_seconds,
            **config.cookie_options(),
        )

    @staticmethod
    def clear_cookie(response) -> None:
        """Expire the session cookie using the attributes it was set with."""

        config = settings.CMS
        options = config.cookie_options()
        response.delete_cookie(
            config.cookie_name,
            path=options["path"],
            samesite=options["samesite"],
        )


__all__ = ["TokenService", "BlocklistUnavailable"]
