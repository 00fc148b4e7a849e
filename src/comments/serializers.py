"""Serializers for comment text validation and comment payloads."""

from rest_framework import serializers

from core.sanitize import plain_text, sanitize_comment
from core.validation import raise_if_errors, validate_fields

from .models import Comment

TEXT_MIN_LENGTH = 6


class CommentInputSerializer(serializers.Serializer):
    """Two-stage check: raw text present, then enough text left after sanitizing.

    Sanitizing can strip a comment down to nothing (e.g. only a ``<script>``
    block), so the length rule applies to the plain text of the cleaned value.
    """

    text = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)

    def validate(self, attrs):
        raw = attrs.get("text")
        raise_if_errors(validate_fields({"text": (raw, "Comment cannot be empty.")}))

        text = sanitize_comment(raw)
        plain = plain_text(text)
        if not plain:
            raise serializers.ValidationError("Comment is empty after removing unsafe content.")
        if len(plain) < TEXT_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Comment must be at least {TEXT_MIN_LENGTH} characters long."
            )
        return {"text": text}


class CommentAuthorSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    username = serializers.CharField(read_only=True)


class CommentSerializer(serializers.ModelSerializer):
    author = CommentAuthorSerializer(read_only=True)
    article = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "text", "article", "author", "created_at"]
        read_only_fields = fields


__all__ = ["CommentInputSerializer", "CommentSerializer"]
