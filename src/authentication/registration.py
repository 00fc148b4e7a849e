"""Admin decisions on registration requests: Submitted -> Approved | Rejected."""

import logging

from django.db import transaction
from rest_framework.exceptions import NotFound

from core.celery import enqueue
from core.exceptions import Conflict

from .models import PendingUser, User
from .notifications import send_approval_email, send_rejection_email
from .serializers import clean_username

logger = logging.getLogger(__name__)


def _get_pending(pending_id) -> PendingUser:
    try:
        return PendingUser.objects.get(id=pending_id)
    except PendingUser.DoesNotExist:
        raise NotFound("Registration request does not exist.")


def approve_pending_user(pending_id) -> User:
    """Turn a registration request into an account.

    A request whose email was taken in the meantime is discarded; one whose
    username is unusable once cleaned is kept and answered with 400. The new
    account's password is hashed here, once, from the submitted value.
    """
    pending = _get_pending(pending_id)

    if User.objects.filter(email__iexact=pending.email).exists():
        pending.delete()
        logger.info("Discarded registration request %s: email already registered", pending_id)
        raise Conflict("Email is already taken.")

    username = clean_username(pending.username)
    if User.objects.filter(username=username).exists():
        raise Conflict("Username is already taken.")

    with transaction.atomic():
        user = User.objects.create_user(
            email=pending.email,
            username=username,
            password=pending.password,
            role=pending.role,
        )
        pending.delete()

    logger.info("Approved registration request %s as account %s", pending_id, user.id)
    enqueue(send_approval_email, user.username, user.email)
    return user


def reject_pending_user(pending_id) -> None:
    """Drop a registration request, notifying the applicant first."""
    pending = _get_pending(pending_id)

    enqueue(send_rejection_email, pending.username, pending.email)
    pending.delete()
    logger.info("Rejected registration request %s", pending_id)


__all__ = ["approve_pending_user", "reject_pending_user"]
