"""Presence checks shared by the request handlers."""

from typing import Any, Iterable

from rest_framework.exceptions import ValidationError

# Route fragment for the opaque UUID identifiers.
UUID_PATTERN = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


def validate_fields(fields: dict[str, tuple[Any, str]]) -> list[str]:
    """Return the message of every field whose value is missing or blank.

    ``fields`` maps a field name to ``(value, message)``. ``None`` and
    whitespace-only strings count as missing.
    """
    errors: list[str] = []
    for value, message in fields.values():
        if value is None or (isinstance(value, str) and value.strip() == ""):
            errors.append(message)
    return errors


def raise_if_errors(errors: Iterable[str]) -> None:
    """Raise a single ValidationError carrying all collected messages."""
    errors = list(errors)
    if errors:
        raise ValidationError(errors)


__all__ = ["UUID_PATTERN", "validate_fields", "raise_if_errors"]
