"""Celery application running the CMS side effects (notification mail, upload cleanup).

The broker is the Redis instance that also holds the token blocklist.
"""

import logging
import os

from celery import Celery
from kombu.exceptions import OperationalError

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

logger = logging.getLogger(__name__)

app = Celery("cms")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


def enqueue(task, *args, **kwargs) -> None:
    """Queue ``task``; an unreachable broker is logged and never fails the request."""
    try:
        task.delay(*args, **kwargs)
    except OperationalError:
        logger.exception("Could not queue task %s", task.name)


__all__ = ["app", "enqueue"]
