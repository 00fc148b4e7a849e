"""Routing for the article endpoints (mounted under ``api/``)."""

from django.urls import re_path

from core.validation import UUID_PATTERN

from .views import ArticleDetailView, ArticleLikeView, ArticleListView

urlpatterns = [
    re_path(r"^articles/?$", ArticleListView.as_view(), name="article-list"),
    re_path(rf"^articles/(?P<pk>{UUID_PATTERN})/?$", ArticleDetailView.as_view(), name="article-detail"),
    re_path(rf"^articles/(?P<pk>{UUID_PATTERN})/like/?$", ArticleLikeView.as_view(), name="article-like"),
]
