"""Deployment policy gathered into one explicit structure.

Settings build a single ``DeploymentConfig`` at startup and expose it as
``settings.CMS``; middleware, throttles, and views read policy from there
instead of consulting the process environment.
"""

import os
from dataclasses import dataclass, field


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Interpret an environment variable as a boolean flag."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_int(name: str, default: int) -> int:
    """Interpret an environment variable as an int, falling back on bad input."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str) -> list[str]:
    """Split a comma-separated environment variable into a list."""
    value = os.environ.get(name, "")
    return [item.strip() for item in value.split(",") if item.strip()]


LOCAL_FRONTEND_ORIGIN = "http://localhost:3000"


@dataclass(frozen=True)
class DeploymentConfig:
    """Cookie, CORS, rate-limit, and upload policy for one deployment mode."""

    production: bool = False
    allowed_origins: tuple[str, ...] = (LOCAL_FRONTEND_ORIGIN,)

    cookie_name: str = "token"
    cookie_secure: bool = False
    cookie_samesite: str = "Lax"
    token_ttl_seconds: int = 24 * 60 * 60

    auth_rate_limit: int = 1000
    auth_rate_window_seconds: int = 60

    max_images_per_request: int = 5
    max_image_bytes: int = 5 * 1024 * 1024
    allowed_image_formats: frozenset[str] = field(
        default_factory=lambda: frozenset({"jpeg", "png", "gif", "webp"})
    )
    max_image_pixels: int = 20_000_000

    # Reverse-proxy hops whose X-Forwarded-For entry is trusted for the client IP.
    trusted_proxies: int = 0

    @classmethod
    def from_env(cls) -> "DeploymentConfig":
        """Build the configuration for the mode named by ``CMS_ENV``."""
        production = os.environ.get("CMS_ENV", "").strip().lower() == "production"

        origins: list[str] = []
        frontend_url = os.environ.get("FRONTEND_URL", "").strip()
        if frontend_url:
            origins.append(frontend_url)
        origins.append(LOCAL_FRONTEND_ORIGIN)
        for origin in _get_env_list("CORS_ORIGINS"):
            if origin not in origins:
                origins.append(origin)

        if production:
            # Frontend and API live on different sites in production.
            samesite, secure = "None", True
            rate_limit, rate_window = 100, 15 * 60
            proxies = 1
        else:
            samesite, secure = "Lax", False
            rate_limit, rate_window = 1000, 60
            proxies = 0

        return cls(
            production=production,
            allowed_origins=tuple(origins),
            cookie_secure=_get_env_bool("COOKIE_SECURE", default=secure),
            cookie_samesite=os.environ.get("COOKIE_SAMESITE", samesite),
            auth_rate_limit=_get_env_int("AUTH_RATE_LIMIT", rate_limit),
            auth_rate_window_seconds=_get_env_int("AUTH_RATE_WINDOW_SECONDS", rate_window),
            max_image_bytes=_get_env_int("MAX_IMAGE_BYTES", 5 * 1024 * 1024),
            max_image_pixels=_get_env_int("MAX_IMAGE_PIXELS", 20_000_000),
            trusted_proxies=_get_env_int("TRUSTED_PROXIES", proxies),
        )

    def cookie_options(self) -> dict:
        """Attributes shared by setting and clearing the session cookie."""
        return {
            "httponly": True,
            "secure": self.cookie_secure,
            "samesite": self.cookie_samesite,
            "path": "/",
        }


__all__ = ["DeploymentConfig"]
