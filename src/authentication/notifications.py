"""Emails sent when a registration request is approved or rejected.

Both are Celery tasks queued with ``core.celery.enqueue``. Delivery is
best-effort: a failed send is logged and the admin decision stands.
"""

import logging

from django.conf import settings
from celery import shared_task
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _approved_message(username: str) -> tuple[str, str]:
    subject = "Your account has been approved"
    text = (
        f"Hello {username},\n\n"
        "An administrator approved your registration. You can now sign in "
        "with the email address and password you registered with.\n"
    )
    return subject, text


def _rejected_message(username: str) -> tuple[str, str]:
    subject = "Your registration request was declined"
    text = (
        f"Hello {username},\n\n"
        "An administrator declined your registration request. You are welcome "
        "to submit a new request later.\n"
    )
    return subject, text


@shared_task
def send_approval_email(username: str, email: str) -> None:
    subject, text = _approved_message(username)
    try:
        send_mail(subject, text, settings.DEFAULT_FROM_EMAIL, [email])
    except Exception:
        logger.exception("Approval email to %s failed", email)
        return
    logger.info("Approval email sent to %s", email)


@shared_task
def send_rejection_email(username: str, email: str) -> None:
    subject, text = _rejected_message(username)
    try:
        send_mail(subject, text, settings.DEFAULT_FROM_EMAIL, [email])
    except Exception:
        logger.exception("Rejection email to %s failed", email)
        return
    logger.info("Rejection email sent to %s", email)


__all__ = ["send_approval_email", "send_rejection_email"]
