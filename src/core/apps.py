"""App configuration for the shared CMS plumbing."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Settings, routing, middleware, and the helpers every app imports."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
