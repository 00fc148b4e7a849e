"""App configuration for role and ownership guards."""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """No models; provides permission classes and the owner_field system check."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"

    def ready(self) -> None:
        from . import checks  # noqa: F401
