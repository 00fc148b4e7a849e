"""Routing for the account endpoints (mounted under ``api/``)."""

from django.urls import re_path

from core.validation import UUID_PATTERN

from .views import PasswordView, ProfileView, UserDetailView, UserListView, UserRoleView

urlpatterns = [
    re_path(r"^users/?$", UserListView.as_view(), name="user-list"),
    re_path(r"^users/profile/?$", ProfileView.as_view(), name="user-profile"),
    re_path(r"^users/password/?$", PasswordView.as_view(), name="user-password"),
    re_path(rf"^users/(?P<pk>{UUID_PATTERN})/role/?$", UserRoleView.as_view(), name="user-role"),
    re_path(rf"^users/(?P<pk>{UUID_PATTERN})/?$", UserDetailView.as_view(), name="user-detail"),
]
