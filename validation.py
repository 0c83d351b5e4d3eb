"""
Field coercion shared by the author and book services.

Every helper either returns a clean value or raises ``ValidationError``
naming the offending field.
"""

from datetime import date, datetime

from errors import ValidationError


def parse_date(value, field: str, required: bool = False) -> date | None:
    """
    Coerce a date or an ISO 'YYYY-MM-DD' string (as sent by <input type="date">)
    into a datetime.date.

    Returns:
         datetime.date, or None for an empty optional value.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if value is None:
        date_str = ""
    elif isinstance(value, str):
        date_str = value.strip()
    else:
        raise ValidationError(field, "must be a date")

    if not date_str:
        if required:
            raise ValidationError(field, "is required")
        return None

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(field, f"'{date_str}' is not a valid YYYY-MM-DD date") from None


def require_text(value, field: str, max_length: int) -> str:
    """Strip ``value`` and check it is a non-empty string of at most ``max_length`` characters."""
    if not isinstance(value, str):
        raise ValidationError(field, "is required")
    text = value.strip()
    if not text:
        raise ValidationError(field, "is required")
    if len(text) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters")
    return text


def optional_text(value, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(field, "must be text")
    text = value.strip()
    return text or None


def parse_id(value, field: str) -> int:
    """Accept an int or a string of digits; bools and everything else are rejected."""
    if isinstance(value, bool):
        raise ValidationError(field, "must be an integer id")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(field, "must be an integer id") from None
