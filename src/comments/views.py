"""Comment endpoints.

``/api/comments/<id>`` takes an article id for GET and POST and a comment
id for PUT and DELETE.
"""

import logging

from rest_framework import permissions, status
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from access_control.permissions import IsOwnerOrAdmin
from articles.models import Article
from core.response import api_response, no_content

from .models import Comment
from .serializers import CommentInputSerializer, CommentSerializer

logger = logging.getLogger(__name__)


class CommentView(APIView):
    permission_classes = [IsOwnerOrAdmin]
    owner_field = "author"

    def get_permissions(self):
        if self.request.method == "GET":
            return []
        if self.request.method == "POST":
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def get_object(self, pk) -> Comment:
        try:
            comment = Comment.objects.select_related("author").get(pk=pk)
        except Comment.DoesNotExist:
            raise NotFound("Comment not found.")
        self.check_object_permissions(self.request, comment)
        return comment

    # noinspection PyMethodMayBeStatic
    def get(self, request, pk):
        """Comments on article ``pk``, newest first."""
        comments = (
            Comment.objects.filter(article_id=pk).select_related("author").order_by("-created_at")
        )
        return api_response(CommentSerializer(comments, many=True).data)

    # noinspection PyMethodMayBeStatic
    def post(self, request, pk):
        """Add a comment to article ``pk``."""
        if not Article.objects.filter(pk=pk).exists():
            raise NotFound("Article not found.")

        serializer = CommentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = Comment.objects.create(
            article_id=pk, author=request.user, text=serializer.validated_data["text"]
        )
        logger.info("Comment %s added to article %s", comment.id, pk)
        return api_response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    def put(self, request, pk):
        """Edit comment ``pk``."""
        comment = self.get_object(pk)
        serializer = CommentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment.text = serializer.validated_data["text"]
        comment.save(update_fields=["text"])
        return api_response(CommentSerializer(comment).data)

    def delete(self, request, pk):
        """Delete comment ``pk``."""
        comment = self.get_object(pk)
        comment.delete()
        logger.info("Comment %s deleted by %s", pk, request.user.id)
        return no_content()


__all__ = ["CommentView"]
