"""Serializers for registration requests, login, and account payloads."""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from rest_framework import serializers

from core.exceptions import Conflict
from core.sanitize import sanitize_title
from core.validation import raise_if_errors, validate_fields

from .models import PENDING_ROLES, PendingUser, User

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = User._meta.get_field("username").max_length
EMAIL_MAX_LENGTH = User._meta.get_field("email").max_length
# bcrypt only accepts this many bytes of input.
PASSWORD_MAX_BYTES = 72


def _text_field():
    # Presence is checked by validate_fields so every missing field is reported at once.
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)


def clean_username(value: str) -> str:
    """Strip markup from a username and enforce its length limits."""
    username = sanitize_title(value.strip())
    if len(username) < USERNAME_MIN_LENGTH:
        raise serializers.ValidationError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters long."
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise serializers.ValidationError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters long."
        )
    return username


def password_too_long(password: str) -> bool:
    return len(password.encode()) > PASSWORD_MAX_BYTES


class RegisterPendingSerializer(serializers.Serializer):
    """Validate a self-registration request and store it as a PendingUser."""

    username = _text_field()
    email = _text_field()
    password = _text_field()
    role = _text_field()

    def validate(self, attrs):
        """Require every field, a clean username, a well-formed email, and a self-assignable role."""
        raise_if_errors(
            validate_fields(
                {
                    "username": (attrs.get("username"), "Username is required."),
                    "email": (attrs.get("email"), "Email is required."),
                    "password": (attrs.get("password"), "Password is required."),
                    "role": (attrs.get("role"), "Role is required."),
                }
            )
        )

        username = clean_username(attrs["username"])

        email = attrs["email"].strip().lower()
        if len(email) > EMAIL_MAX_LENGTH:
            raise serializers.ValidationError("Invalid email address.")
        try:
            validate_email(email)
        except DjangoValidationError:
            raise serializers.ValidationError("Invalid email address.")

        if password_too_long(attrs["password"]):
            raise serializers.ValidationError(
                f"Password must be at most {PASSWORD_MAX_BYTES} bytes long."
            )

        role = attrs["role"].strip().lower()
        if role not in PENDING_ROLES:
            raise serializers.ValidationError("Invalid role.")

        if (
            PendingUser.objects.filter(email__iexact=email).exists()
            or User.objects.filter(email__iexact=email).exists()
        ):
            raise Conflict("Email is already taken.")

        attrs["username"] = username
        attrs["email"] = email
        attrs["role"] = role
        return attrs

    def create(self, validated_data):
        return PendingUser.objects.create(**validated_data)


class LoginSerializer(serializers.Serializer):
    """Authenticate an account via email/password using bcrypt verification."""

    email = _text_field()
    password = _text_field()

    def validate(self, attrs):
        """Authenticate credentials and attach the user to validated_data."""
        raise_if_errors(
            validate_fields(
                {
                    "email": (attrs.get("email"), "Email is required."),
                    "password": (attrs.get("password"), "Password is required."),
                }
            )
        )

        user = User.objects.filter(email__iexact=attrs["email"].strip()).first()
        if user is None or not user.check_password(attrs["password"]):
            raise serializers.ValidationError("Invalid email or password.")

        attrs["user"] = user
        return attrs


class UserDetailSerializer(serializers.ModelSerializer):
    """Account payload; the password hash never leaves the server."""

    class Meta:
        model = User
        fields = ["id", "username", "email", "role", "created_at", "updated_at"]
        read_only_fields = fields


class PendingUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = PendingUser
        fields = ["id", "username", "email", "role", "created_at"]
        read_only_fields = fields


__all__ = [
    "clean_username",
    "password_too_long",
    "RegisterPendingSerializer",
    "LoginSerializer",
    "UserDetailSerializer",
    "PendingUserSerializer",
]
