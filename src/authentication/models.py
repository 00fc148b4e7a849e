"""Accounts and self-submitted registrations awaiting approval.

Note: Django's built-in groups/permissions (PermissionsMixin) are not used;
authorization is a plain role field checked by ``access_control``.
"""

import uuid
from typing import ClassVar, Optional

from django.contrib.auth.models import AbstractBaseUser
from django.db import models

from .managers import UserManager


class Role(models.TextChoices):
    USER = "user", "User"
    AUTHOR = "author", "Author"
    ADMIN = "admin", "Admin"


# Self-registration may never ask for admin rights.
PENDING_ROLES = (Role.USER, Role.AUTHOR)


class User(AbstractBaseUser):
    """Approved account identified by email with a bcrypt password hash."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True)
    password_hash = models.CharField(max_length=128)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = ["username"]

    objects = UserManager()

    class Meta:
        """Default ordering shows newest accounts first."""
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def set_password(self, raw_password: Optional[str]) -> None:  # type: ignore[override]
        """Override to ensure bcrypt hashing via manager utility."""

        if raw_password is None:
            self.password_hash = ""
        else:
            self.password_hash = UserManager.hash_password(raw_password)

    def check_password(self, raw_password: Optional[str]) -> bool:  # type: ignore[override]
        """Delegate to bcrypt verification helper."""

        if raw_password is None:
            return False
        return UserManager.verify_password(self, raw_password)


class PendingUser(models.Model):
    """Registration request holding the submitted data until an admin decides.

    The password is kept as submitted and hashed once, when the request is
    approved and turned into a ``User``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    role = models.CharField(
        max_length=10,
        choices=[(role.value, role.label) for role in PENDING_ROLES],
        default=Role.USER,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email


__all__ = ["Role", "PENDING_ROLES", "User", "PendingUser"]
