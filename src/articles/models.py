"""Article model: owned by its author, liked by other accounts."""

import uuid

from django.conf import settings
from django.db import models


class Article(models.Model):
    """Article with sanitized content and image references ``uploads/<filename>``."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    content = models.TextField()
    images = models.JSONField(default=list, blank=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="articles"
    )
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL, related_name="liked_articles", blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


__all__ = ["Article"]
