"""URL patterns for the admin registration-approval endpoints."""

from django.urls import re_path

from core.validation import UUID_PATTERN

from .views import ApprovePendingUserView, PendingUserListView, RejectPendingUserView

urlpatterns = [
    re_path(r"^pending-users/?$", PendingUserListView.as_view(), name="admin-pending-users"),
    re_path(
        rf"^approve/(?P<pk>{UUID_PATTERN})/?$",
        ApprovePendingUserView.as_view(),
        name="admin-approve",
    ),
    re_path(
        rf"^reject/(?P<pk>{UUID_PATTERN})/?$",
        RejectPendingUserView.as_view(),
        name="admin-reject",
    ),
]
