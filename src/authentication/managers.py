"""Custom user manager handling bcrypt hashing and verification."""

import uuid

import bcrypt
from django.conf import settings
from django.contrib.auth.base_user import BaseUserManager


class UserManager(BaseUserManager):
    """Manager to create accounts with bcrypt password hashes.

    ``hash_password`` is the only place a raw password turns into a hash;
    nothing hashes on save, so a stored hash is never hashed twice.
    """

    use_in_migrations = True

    def _create_user(self, email: str, username: str, password: str, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        if not username:
            raise ValueError("The Username must be set")
        email = self.normalize_email(email).lower()
        user = self.model(id=uuid.uuid4(), email=email, username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email: str, username: str, password: str | None = None, **extra_fields):
        """Create an account (role ``user`` unless given) with a hashed password."""
        extra_fields.setdefault("role", "user")
        if password is None:
            raise ValueError("Password must be provided")
        return self._create_user(email, username, password, **extra_fields)

    def create_superuser(self, email: str, username: str, password: str, **extra_fields):
        """Create an admin account."""
        extra_fields["role"] = "admin"
        return self._create_user(email, username, password, **extra_fields)

    @staticmethod
    def hash_password(raw_password: str) -> str:
        """Hash a raw password using bcrypt and return the utf-8 string."""
        salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(str(raw_password).encode(), salt)
        return hashed.decode()

    @staticmethod
    def verify_password(user, raw_password: str) -> bool:
        """Verify raw password against stored bcrypt hash."""

        if not user.password_hash:
            return False
        try:
            return bcrypt.checkpw(str(raw_password).encode(), user.password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash.
            return False


__all__ = ["UserManager"]
