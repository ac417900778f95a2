"""Request validators."""
from datetime import datetime, timezone
from decimal import Decimal, DecimalException, InvalidOperation

from bson.decimal128 import Decimal128

from fintrack.utils.errors import ValidationError


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, as Mongo stores them."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def require_keys(payload, *keys):
    missing = [k for k in keys if (payload or {}).get(k) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return True


def parse_decimal(value, field_name: str) -> Decimal:
    """Parse a JSON number or numeric string into a finite Decimal that fits Decimal128."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        # str() first so floats keep their printed value (0.1 -> "0.1")
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    # unary plus rounds to context precision
    amount = +amount
    try:
        Decimal128(amount)
    except DecimalException:
        raise ValidationError(f"{field_name} is out of range")
    return amount


def parse_datetime(value, field_name: str) -> datetime:
    """Parse an ISO-8601 string into a naive UTC datetime, as Mongo stores them."""
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO-8601 date")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
