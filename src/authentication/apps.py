"""App configuration for accounts, sessions, and registration approval."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the User and PendingUser models and the session token service."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
