"""Routing for the comment endpoints (mounted under ``api/``)."""

from django.urls import re_path

from core.validation import UUID_PATTERN

from .views import CommentView

urlpatterns = [
    re_path(rf"^comments/(?P<pk>{UUID_PATTERN})/?$", CommentView.as_view(), name="comments"),
]
