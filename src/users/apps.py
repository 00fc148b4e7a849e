"""App configuration for profile and account administration endpoints."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Users app exposes account endpoints; the model lives in ``authentication``."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
