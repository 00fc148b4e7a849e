"""Authentication endpoints (register, login, logout) and admin approval endpoints."""

import logging
from typing import Any

from django.db.models import Q
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.views import APIView

from access_control.permissions import IsAdmin
from core.middleware import get_session_token
from core.pagination import PageParams
from core.response import api_response, message_response
from core.throttling import AuthRateThrottle

from .models import PendingUser
from .registration import approve_pending_user, reject_pending_user
from .serializers import LoginSerializer, PendingUserSerializer, RegisterPendingSerializer
from .services import BlocklistUnavailable, TokenService

logger = logging.getLogger(__name__)


class AuthView(APIView):
    """Public, rate-limited endpoint under /api/auth."""

    permission_classes: list[Any] = []
    throttle_classes = [AuthRateThrottle]


class RegisterPendingView(AuthView):
    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Submit a registration request for admin approval."""
        serializer = RegisterPendingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pending = serializer.save()
        logger.info("Registration request %s submitted", pending.id)
        return message_response(
            "Registration request submitted.", status=status.HTTP_201_CREATED
        )


class LoginView(AuthView):
    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Authenticate and set the session cookie."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        response = message_response("Logged in.")
        TokenService.set_cookie(response, TokenService.generate_token(user))
        return response


class LogoutView(AuthView):
    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Revoke the presented token if any and clear the session cookie."""
        token = get_session_token(request)
        if token:
            _revoke(token)
        response = message_response("Logged out.")
        TokenService.clear_cookie(response)
        return response


def _revoke(token: str) -> None:
    try:
        payload = TokenService.decode_token(token)
    except AuthenticationFailed:
        return
    if "jti" not in payload or "exp" not in payload:
        return
    try:
        TokenService.block_token(payload["jti"], payload["exp"])
    except BlocklistUnavailable:
        logger.warning("Could not blocklist token %s on logout", payload["jti"])


class PendingUserListView(APIView):
    permission_classes = [IsAdmin]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """List registration requests, newest first, with search and pagination."""
        params = PageParams.from_query(request.query_params, default_limit=10)
        search = (request.query_params.get("search") or "").strip()

        queryset = PendingUser.objects.order_by("-created_at")
        if search:
            queryset = queryset.filter(Q(username__icontains=search) | Q(email__icontains=search))

        total = queryset.count()
        users = PendingUserSerializer(params.slice(queryset), many=True).data
        return api_response(
            {"total": total, "page": params.page, "limit": params.limit, "users": users}
        )


class ApprovePendingUserView(APIView):
    permission_classes = [IsAdmin]

    # noinspection PyMethodMayBeStatic
    def post(self, request, pk):
        """Approve a registration request and create the account."""
        user = approve_pending_user(pk)
        return message_response("User approved and added.", user_id=str(user.id))


class RejectPendingUserView(APIView):
    permission_classes = [IsAdmin]

    # noinspection PyMethodMayBeStatic
    def delete(self, request, pk):
        """Reject and delete a registration request."""
        reject_pending_user(pk)
        return message_response("Registration request rejected.")


__all__ = [
    "RegisterPendingView",
    "LoginView",
    "LogoutView",
    "PendingUserListView",
    "ApprovePendingUserView",
    "RejectPendingUserView",
]
