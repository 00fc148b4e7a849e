"""Static serving of uploaded images."""

from django.conf import settings
from django.views.static import serve


def serve_upload(request, path: str):
    """Serve a file from the uploads root, readable by the cross-site frontend."""
    response = serve(request, path, document_root=settings.UPLOADS_ROOT)
    response["Cross-Origin-Resource-Policy"] = "cross-origin"
    return response


__all__ = ["serve_upload"]
