"""Comments on articles."""

import uuid

from django.conf import settings
from django.db import models


class Comment(models.Model):
    """Sanitized comment text by an account on an article.

    ``likes`` is kept on the schema for a future comment-like feature; no
    endpoint reads or writes it yet.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    article = models.ForeignKey(
        "articles.Article", on_delete=models.CASCADE, related_name="comments"
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments"
    )
    text = models.TextField()
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL, related_name="liked_comments", blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.author_id} on {self.article_id}"


__all__ = ["Comment"]
