from datetime import datetime, timezone

from marshmallow import ValidationError


def norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def to_naive_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are assumed to be UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def validate_non_negative(value):
    if value is not None and value < 0:
        raise ValidationError("Must be greater than or equal to 0.")


def iso_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")
