"""Article endpoints: list/create, detail/update/delete, and like toggling."""

import logging
from typing import Any

from django.db import transaction
from django.db.models import Count, Q
from rest_framework import permissions, status
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.views import APIView

from access_control.permissions import IsOwnerOrAdmin
from comments.models import Comment
from core.pagination import PageParams
from core.response import api_response, message_response, no_content

from .models import Article
from .serializers import (
    ArticleDetailSerializer,
    ArticleInputSerializer,
    ArticleListItemSerializer,
)
from .storage import discard_uploads, remove_uploads, to_uploads_rel
from .uploads import receive_images

logger = logging.getLogger(__name__)

SEARCH_MAX_LENGTH = 100
SORT_ORDERINGS = {
    "newest": ("-created_at",),
    "oldest": ("created_at",),
    "titleAZ": ("title", "-created_at"),
    "titleZA": ("-title", "-created_at"),
    "mostLiked": ("-likes_count", "-created_at"),
}


def _get_article(pk) -> Article:
    try:
        return Article.objects.select_related("author").get(pk=pk)
    except Article.DoesNotExist:
        raise NotFound("Article not found.")


def _removal_list(data) -> list[str]:
    """``remove_images`` as a list whether sent once, repeated, or as a JSON list."""
    if hasattr(data, "getlist"):
        values = data.getlist("remove_images")
    else:
        values = data.get("remove_images")
    if isinstance(values, str):
        return [values]
    if isinstance(values, (list, tuple)):
        return [str(value) for value in values if value]
    return []


class ArticleListView(APIView):
    """GET lists articles for everyone; POST creates one for the signed-in account."""

    def get_permissions(self):
        if self.request.method == "POST":
            return [permissions.IsAuthenticated()]
        return []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Filter by ``q``, sort by ``sort``, paginate by ``page``/``limit``."""
        params = PageParams.from_query(request.query_params, default_limit=5)
        query = (request.query_params.get("q") or "").strip()[:SEARCH_MAX_LENGTH]
        ordering = SORT_ORDERINGS.get(request.query_params.get("sort"), SORT_ORDERINGS["newest"])

        queryset = Article.objects.all()
        if query:
            queryset = queryset.filter(Q(title__icontains=query) | Q(content__icontains=query))
        total = queryset.count()

        # Both counts are aggregations so every sort mode, mostLiked included,
        # pages over the same filtered set.
        queryset = (
            queryset.select_related("author")
            .annotate(
                likes_count=Count("likes", distinct=True),
                comment_count=Count("comments", distinct=True),
            )
            .order_by(*ordering)
        )
        articles = ArticleListItemSerializer(params.slice(queryset), many=True).data
        return api_response({"articles": articles, "total": total})

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Create an article; uploads from a rejected request never stay on disk."""
        stored = receive_images(request)
        try:
            if not request.user or not request.user.is_authenticated:
                raise NotAuthenticated()

            serializer = ArticleInputSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            article = Article.objects.create(
                author=request.user,
                images=stored,
                **serializer.validated_data,
            )
        except Exception:
            remove_uploads(stored)
            raise

        logger.info("Article %s created by %s", article.id, request.user.id)
        return message_response(
            "Article created.",
            status=status.HTTP_201_CREATED,
            article=ArticleDetailSerializer(article).data,
        )


class ArticleDetailView(APIView):
    """GET for everyone; PUT/DELETE for the author or an admin."""

    permission_classes = [IsOwnerOrAdmin]
    owner_field = "author"

    def get_permissions(self):
        if self.request.method == "GET":
            return []
        return super().get_permissions()

    def get_object(self, pk) -> Article:
        article = _get_article(pk)
        self.check_object_permissions(self.request, article)
        return article

    def get(self, request, pk):
        """Return one article with normalized image paths."""
        return api_response(ArticleDetailSerializer(self.get_object(pk)).data)

    def put(self, request, pk):
        """Update title/content, drop listed images, append new uploads."""
        article = self.get_object(pk)

        serializer = ArticleInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        removal = {to_uploads_rel(path) for path in _removal_list(request.data)}
        kept, dropped = [], []
        for image in article.images or []:
            (dropped if to_uploads_rel(image) in removal else kept).append(image)

        stored = receive_images(request)
        try:
            for field, value in serializer.validated_data.items():
                setattr(article, field, value)
            article.images = kept + stored
            article.save()
        except Exception:
            remove_uploads(stored)
            raise

        discard_uploads(dropped)
        logger.info("Article %s updated by %s", article.id, request.user.id)
        return message_response("Article updated.", article=ArticleDetailSerializer(article).data)

    def delete(self, request, pk):
        """Delete comments, then the article, then its image files."""
        article = self.get_object(pk)
        images = list(article.images or [])

        with transaction.atomic():
            Comment.objects.filter(article=article).delete()
            article.delete()

        discard_uploads(images)
        logger.info("Article %s deleted by %s", pk, request.user.id)
        return no_content()


class ArticleLikeView(APIView):
    permission_classes: list[Any] = [permissions.IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def post(self, request, pk):
        """Like the article if not yet liked, otherwise unlike it."""
        article = _get_article(pk)
        user = request.user

        if article.author_id == user.pk:
            return message_response(
                "Authors cannot like their own article.",
                status=status.HTTP_400_BAD_REQUEST,
                liked=False,
                total_likes=article.likes.count(),
            )

        already_liked = article.likes.filter(pk=user.pk).exists()
        if already_liked:
            article.likes.remove(user)
        else:
            article.likes.add(user)

        return api_response({"liked": not already_liked, "total_likes": article.likes.count()})


__all__ = ["ArticleListView", "ArticleDetailView", "ArticleLikeView"]
