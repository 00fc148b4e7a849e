"""Serializers for article input validation and list/detail payloads."""

from rest_framework import serializers

from core.sanitize import sanitize_body, sanitize_title
from core.validation import raise_if_errors, validate_fields

from .models import Article
from .storage import to_public_path

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = Article._meta.get_field("title").max_length
CONTENT_MIN_LENGTH = 20


def _text_field():
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)


def _length_errors(title, content) -> list[str]:
    errors = []
    if title and len(title) < TITLE_MIN_LENGTH:
        errors.append(f"Title must be at least {TITLE_MIN_LENGTH} characters long.")
    if content and len(content) < CONTENT_MIN_LENGTH:
        errors.append(f"Content must be at least {CONTENT_MIN_LENGTH} characters long.")
    return errors


class ArticleInputSerializer(serializers.Serializer):
    """Validate and sanitize title/content.

    On create both fields are required; with ``partial=True`` (update) each
    is optional and only non-empty values are applied.
    """

    title = _text_field()
    content = _text_field()

    def validate(self, attrs):
        title = attrs.get("title")
        content = attrs.get("content")

        errors = []
        if self.partial:
            # Blank values on update mean "leave unchanged".
            title = title if title and title.strip() else None
            content = content if content and content.strip() else None
        else:
            errors = validate_fields(
                {
                    "title": (title, "Title is required."),
                    "content": (content, "Content is required."),
                }
            )
        errors.extend(_length_errors(title, content))
        raise_if_errors(errors)

        cleaned = {}
        if title:
            cleaned["title"] = sanitize_title(title)
            # Escaping can lengthen a title, so the limit applies to the stored value.
            if len(cleaned["title"]) > TITLE_MAX_LENGTH:
                raise serializers.ValidationError(
                    f"Title must be at most {TITLE_MAX_LENGTH} characters long."
                )
        if content:
            cleaned["content"] = sanitize_body(content)
        return cleaned


class AuthorSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    email = serializers.EmailField(read_only=True)


class AuthorDetailSerializer(AuthorSummarySerializer):
    username = serializers.CharField(read_only=True)


class ArticleListItemSerializer(serializers.ModelSerializer):
    """List entry built from a queryset annotated with like and comment counts."""

    author = AuthorSummarySerializer(read_only=True)
    likes_count = serializers.IntegerField(read_only=True)
    comment_count = serializers.IntegerField(read_only=True)
    thumbnail = serializers.SerializerMethodField()

    class Meta:
        model = Article
        fields = [
            "id",
            "title",
            "content",
            "likes_count",
            "comment_count",
            "created_at",
            "author",
            "thumbnail",
        ]
        read_only_fields = fields

    @staticmethod
    def get_thumbnail(obj):
        images = obj.images or []
        return to_public_path(images[0]) if images else None


class ArticleDetailSerializer(serializers.ModelSerializer):
    """Full article; image references normalized to public form whatever their stored form."""

    author = AuthorDetailSerializer(read_only=True)
    images = serializers.SerializerMethodField()
    likes = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Article
        fields = ["id", "title", "content", "images", "author", "likes", "created_at", "updated_at"]
        read_only_fields = fields

    @staticmethod
    def get_images(obj):
        return [to_public_path(image) for image in (obj.images or []) if image]


__all__ = [
    "ArticleInputSerializer",
    "ArticleListItemSerializer",
    "ArticleDetailSerializer",
]
