"""Input serializers for self-service profile changes and admin role changes."""

from rest_framework import serializers

from authentication.models import Role, User
from authentication.serializers import PASSWORD_MAX_BYTES, clean_username, password_too_long
from core.exceptions import Conflict
from core.validation import raise_if_errors, validate_fields

PASSWORD_MIN_LENGTH = 6


def _text_field():
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)


class ProfileUpdateSerializer(serializers.Serializer):
    """Optional username change for the signed-in account."""

    username = _text_field()

    def validate(self, attrs):
        username = attrs.get("username")
        if username is None:
            return {}

        username = clean_username(username)

        account = self.context["user"]
        if User.objects.filter(username=username).exclude(pk=account.pk).exists():
            raise Conflict("Username is already taken.")
        return {"username": username}


class PasswordChangeSerializer(serializers.Serializer):
    old_password = _text_field()
    new_password = _text_field()

    def validate(self, attrs):
        errors = validate_fields(
            {
                "old_password": (attrs.get("old_password"), "Current password is required."),
                "new_password": (attrs.get("new_password"), "New password is required."),
            }
        )
        new_password = attrs.get("new_password")
        if new_password and len(new_password) < PASSWORD_MIN_LENGTH:
            errors.append(f"New password must be at least {PASSWORD_MIN_LENGTH} characters long.")
        elif new_password and password_too_long(new_password):
            errors.append(f"New password must be at most {PASSWORD_MAX_BYTES} bytes long.")
        raise_if_errors(errors)

        if not self.context["user"].check_password(attrs["old_password"]):
            raise serializers.ValidationError("Current password is incorrect.")
        return attrs


class RoleChangeSerializer(serializers.Serializer):
    role = _text_field()

    def validate(self, attrs):
        raise_if_errors(validate_fields({"role": (attrs.get("role"), "Role is required.")}))
        role = attrs["role"].strip().lower()
        if role not in Role.values:
            raise serializers.ValidationError("Invalid role.")
        return {"role": role}


__all__ = ["ProfileUpdateSerializer", "PasswordChangeSerializer", "RoleChangeSerializer"]
