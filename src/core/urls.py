"""Root URL configuration for the CMS API."""
from django.urls import include, path, re_path
from drf_spectacular.views import SpectacularAPIView

from core.views import serve_upload

urlpatterns = [
    path("api/auth/", include("authentication.urls")),
    path("api/admin/", include("authentication.admin_urls")),
    path("api/", include("articles.urls")),
    path("api/", include("comments.urls")),
    path("api/", include("users.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    re_path(r"^uploads/(?P<path>[^/\\]+)$", serve_upload, name="uploads"),
]

handler404 = "core.exceptions.not_found_view"
handler500 = "core.exceptions.server_error_view"
