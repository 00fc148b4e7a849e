"""Image paths under the uploads root: normalization and best-effort deletion.

Stored references always have the public form ``uploads/<filename>``. Older
records may hold a bare filename or an absolute OS path; every reader goes
through ``to_public_path`` and every deletion through ``to_uploads_rel``.
"""

import logging
import ntpath
import posixpath
import re
from pathlib import Path
from typing import Iterable, Optional

from celery import shared_task
from django.conf import settings

from core.celery import enqueue

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "uploads/"
_PUBLIC_TAIL = re.compile(r".*uploads/(.+)$", re.IGNORECASE | re.DOTALL)
_REL_TAIL = re.compile(r".*uploads[/\\]+(.+)$", re.IGNORECASE | re.DOTALL)


def _basename(path: str) -> str:
    # ntpath splits on both separators, posixpath only on "/".
    return ntpath.basename(path) or posixpath.basename(path)


def to_public_path(path) -> Optional[str]:
    """Return the ``uploads/<filename>`` form of a stored or uploaded path."""
    if not path:
        return None
    value = str(path).replace("\\", "/")
    if value.startswith(PUBLIC_PREFIX):
        return value
    match = _PUBLIC_TAIL.match(value)
    if match:
        return f"{PUBLIC_PREFIX}{match.group(1)}"
    return f"{PUBLIC_PREFIX}{_basename(value)}"


def to_uploads_rel(path) -> str:
    """Return the filename relative to the uploads root."""
    if not path:
        return ""
    value = str(path)
    match = _REL_TAIL.match(value)
    return match.group(1) if match else _basename(value)


def uploads_root() -> Path:
    return Path(settings.UPLOADS_ROOT).resolve()


def resolve_upload(path) -> Optional[Path]:
    """Absolute location of ``path`` inside the uploads root, or None if it escapes it."""
    rel = to_uploads_rel(path)
    if not rel:
        return None
    root = uploads_root()
    candidate = (root / rel).resolve()
    if candidate == root or root not in candidate.parents:
        logger.warning("Refusing to touch %r outside the uploads root", str(path))
        return None
    return candidate


def remove_upload(path) -> bool:
    """Delete one upload. A missing file is fine; other I/O errors are logged.

    Returns True when a file was removed.
    """
    target = resolve_upload(path)
    if target is None:
        return False
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError:
        logger.exception("Failed to delete upload %s", target)
        return False
    return True


@shared_task
def remove_uploads(paths: Iterable) -> None:
    """Delete every path; one bad entry does not stop the rest.

    Called directly for request-time cleanup and queued by ``discard_uploads``.
    """
    for path in list(paths):
        try:
            remove_upload(path)
        except (OSError, ValueError):
            logger.exception("Failed to delete upload %r", path)


def discard_uploads(paths: Iterable) -> None:
    """Queue deletion of uploads; the caller never waits on or sees failures."""
    paths = [str(p) for p in paths if p]
    if paths:
        enqueue(remove_uploads, paths)


__all__ = [
    "to_public_path",
    "to_uploads_rel",
    "resolve_upload",
    "remove_upload",
    "remove_uploads",
    "discard_uploads",
]
