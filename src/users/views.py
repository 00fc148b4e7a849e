"""Account endpoints: the caller's own profile and password, plus admin management."""

import logging

from rest_framework import permissions
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from access_control.permissions import IsAdmin
from articles.models import Article
from articles.storage import discard_uploads
from authentication.models import User
from authentication.serializers import UserDetailSerializer
from core.response import api_response, message_response, no_content

from .serializers import PasswordChangeSerializer, ProfileUpdateSerializer, RoleChangeSerializer

logger = logging.getLogger(__name__)


def _get_user(pk) -> User:
    try:
        return User.objects.get(pk=pk)
    except User.DoesNotExist:
        raise NotFound("User does not exist.")


class ProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the signed-in account."""
        return api_response(UserDetailSerializer(_get_user(request.user.pk)).data)

    # noinspection PyMethodMayBeStatic
    def put(self, request):
        """Change the signed-in account's username."""
        user = _get_user(request.user.pk)
        serializer = ProfileUpdateSerializer(data=request.data, context={"user": user})
        serializer.is_valid(raise_exception=True)

        for field, value in serializer.validated_data.items():
            setattr(user, field, value)
        user.save()
        return message_response("Profile updated.", user=UserDetailSerializer(user).data)


class PasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def put(self, request):
        """Replace the password after verifying the current one."""
        user = _get_user(request.user.pk)
        serializer = PasswordChangeSerializer(data=request.data, context={"user": user})
        serializer.is_valid(raise_exception=True)

        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password_hash", "updated_at"])
        logger.info("Password changed for user %s", user.id)
        return message_response("Password changed.")


class UserListView(APIView):
    permission_classes = [IsAdmin]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """All accounts, newest first."""
        users = User.objects.order_by("-created_at")
        return api_response(UserDetailSerializer(users, many=True).data)


class UserRoleView(APIView):
    permission_classes = [IsAdmin]

    # noinspection PyMethodMayBeStatic
    def put(self, request, pk):
        serializer = RoleChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = _get_user(pk)
        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role", "updated_at"])
        logger.info("Role of user %s set to %s by %s", user.id, user.role, request.user.id)
        return message_response("Role updated.", user=UserDetailSerializer(user).data)


class UserDetailView(APIView):
    permission_classes = [IsAdmin]

    # noinspection PyMethodMayBeStatic
    def delete(self, request, pk):
        """Delete an account; its articles and comments go with it."""
        user = _get_user(pk)
        images = [
            image
            for images in Article.objects.filter(author=user).values_list("images", flat=True)
            for image in images or []
        ]
        user.delete()
        discard_uploads(images)
        logger.info("User %s deleted by %s", pk, request.user.id)
        return no_content()


__all__ = ["ProfileView", "PasswordView", "UserListView", "UserRoleView", "UserDetailView"]
