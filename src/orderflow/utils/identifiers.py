"""Identifier validation shared by the aggregates' stores and commands."""

from uuid import UUID

from protean.exceptions import ValidationError


def ensure_uuid(value, field: str = "id") -> str:
    """Return ``value`` as a canonical UUID string or raise ``ValidationError``."""
    try:
        return str(UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError({field: [f"Invalid identifier: {value!r}"]}) from None
