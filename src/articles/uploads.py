"""Incoming article images: limits, content inspection, and storage."""

import logging
import uuid
from datetime import datetime, timezone

from django.conf import settings
from PIL import Image, UnidentifiedImageError
from rest_framework.exceptions import ValidationError

from core.exceptions import PayloadTooLarge

from .storage import PUBLIC_PREFIX, remove_uploads, uploads_root

logger = logging.getLogger(__name__)

IMAGES_FIELD = "images"
FORMAT_EXTENSIONS = {"jpeg": "jpg", "png": "png", "gif": "gif", "webp": "webp"}
RESOLUTION_MESSAGE = "Image resolution is too large."


def _inspect_image(uploaded_file) -> str:
    """Return the file extension for a real image, judged by content only."""
    config = settings.CMS
    uploaded_file.seek(0)
    try:
        with Image.open(uploaded_file) as image:
            image_format = (image.format or "").lower()
            width, height = image.size
            image.verify()
    except Image.DecompressionBombError:
        raise ValidationError(RESOLUTION_MESSAGE)
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Only image files are allowed.")
    finally:
        uploaded_file.seek(0)

    if image_format not in config.allowed_image_formats:
        raise ValidationError("Only image files are allowed.")
    if width * height > config.max_image_pixels:
        raise ValidationError(RESOLUTION_MESSAGE)
    return FORMAT_EXTENSIONS.get(image_format, image_format)


def incoming_images(request) -> list:
    """Uploaded files in the ``images`` field, checked against count and size limits."""
    files = request.FILES.getlist(IMAGES_FIELD) if request.FILES else []
    config = settings.CMS
    if len(files) > config.max_images_per_request:
        raise ValidationError(f"At most {config.max_images_per_request} images are allowed.")
    for uploaded_file in files:
        if uploaded_file.size > config.max_image_bytes:
            raise PayloadTooLarge(
                f"File too large. Limit is {config.max_image_bytes // (1024 * 1024)}MB."
            )
    return files


def store_images(files) -> list[str]:
    """Write verified images under the uploads root; return their public paths.

    All files are inspected before anything is written. If writing fails
    midway, files already written by this call are removed.
    """
    extensions = [_inspect_image(uploaded_file) for uploaded_file in files]

    root = uploads_root()
    root.mkdir(parents=True, exist_ok=True)

    stored: list[str] = []
    try:
        for uploaded_file, extension in zip(files, extensions):
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            filename = f"{timestamp}_{uuid.uuid4().hex[:12]}.{extension}"
            with open(root / filename, "wb") as destination:
                for chunk in uploaded_file.chunks():
                    destination.write(chunk)
            stored.append(f"{PUBLIC_PREFIX}{filename}")
    except OSError:
        logger.exception("Failed to store uploaded image")
        remove_uploads(stored)
        raise

    return stored


def receive_images(request) -> list[str]:
    """Validate and store the request's images, returning public paths."""
    return store_images(incoming_images(request))


__all__ = ["incoming_images", "store_images", "receive_images"]
