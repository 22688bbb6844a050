"""
Validation utilities for input validation and error handling.

Every helper raises `ValidationError` with `details={"field": <name>}` so callers
can tell which input was rejected.
"""
import re
from datetime import datetime
from typing import Any

from ..models.choices import APPLICATION_STATUSES, JOB_STATUSES, JOB_TYPES, SELF_SERVICE_ROLES
from .dates import as_utc
from .error_handlers import ValidationError


def _fail(field: str, message: str) -> ValidationError:
    return ValidationError(message, details={"field": field})


def validate_email(email: str) -> str:
    """Validate email format."""
    if not email or not isinstance(email, str):
        raise _fail("email", "Email is required")

    email = email.strip().lower()
    if len(email) > 255:
        raise _fail("email", "Email too long (max 255 characters)")

    # Basic email regex
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    if not re.match(pattern, email):
        raise _fail("email", "Invalid email format")

    return email


def validate_password(password: str) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str):
        raise _fail("password", "Password is required")

    if len(password) < 6:
        raise _fail("password", "Password must be at least 6 characters")

    if len(password) > 72:
        raise _fail("password", "Password too long (max 72 characters)")


def validate_string_field(
    value: Any,
    field_name: str,
    min_length: int = 1,
    max_length: int = 1000,
    required: bool = True,
    pattern: str | None = None,
    label: str | None = None,
) -> str | None:
    """Validate a string field with common rules."""
    label = label or field_name
    if value is None:
        if required:
            raise _fail(field_name, f"{label} is required")
        return None

    if not isinstance(value, str):
        raise _fail(field_name, f"{label} must be a string")

    value = value.strip()

    if required and not value:
        raise _fail(field_name, f"{label} is required")

    if not value:
        return None

    if len(value) < min_length:
        raise _fail(field_name, f"{label} must be at least {min_length} characters")

    if len(value) > max_length:
        raise _fail(field_name, f"{label} must not exceed {max_length} characters")

    if pattern and not re.match(pattern, value):
        raise _fail(field_name, f"{label} format is invalid")

    return value


def validate_integer_field(
    value: Any,
    field_name: str,
    min_value: int | None = None,
    max_value: int | None = None,
    required: bool = True,
    label: str | None = None,
) -> int | None:
    """Validate an integer field."""
    label = label or field_name
    if value is None:
        if required:
            raise _fail(field_name, f"{label} is required")
        return None

    if isinstance(value, bool):
        raise _fail(field_name, f"{label} must be a valid integer")

    if not isinstance(value, int):
        try:
            value = int(value)
        except (ValueError, TypeError):
            raise _fail(field_name, f"{label} must be a valid integer") from None

    if min_value is not None and value < min_value:
        raise _fail(field_name, f"{label} must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise _fail(field_name, f"{label} must not exceed {max_value}")

    return value


def validate_string_list(value: Any, field_name: str, max_items: int = 100) -> list[str] | None:
    """Accept a list of strings; blanks are dropped, order is kept."""
    if value is None:
        return None
    if not isinstance(value, list):
        raise _fail(field_name, f"{field_name} must be a list")
    cleaned = [str(x).strip() for x in value if x is not None and str(x).strip()]
    if len(cleaned) > max_items:
        raise _fail(field_name, f"{field_name} must not exceed {max_items} items")
    return cleaned


def _choice(value: Any, field_name: str, choices: tuple[str, ...], label: str) -> str:
    if not value or not isinstance(value, str):
        raise _fail(field_name, f"{label} is required")
    value = value.strip().lower()
    if value not in choices:
        raise _fail(field_name, f"Invalid {label.lower()}. Must be one of: {', '.join(choices)}")
    return value


def validate_role(role: str) -> str:
    """Validate a self-service registration role."""
    return _choice(role, "role", SELF_SERVICE_ROLES, "Role")


def validate_job_type(job_type: str) -> str:
    return _choice(job_type, "type", JOB_TYPES, "Job type")


def validate_job_status(status: str | None) -> str:
    """Validate job status; missing means active."""
    if not status:
        return "active"
    return _choice(status, "status", JOB_STATUSES, "Status")


def validate_application_status(status: str) -> str:
    return _choice(status, "status", APPLICATION_STATUSES, "Status")


def parse_iso_datetime(value: Any, field_name: str) -> datetime | None:
    """Parse an ISO 8601 date or datetime; naive values are taken as UTC."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str):
        raise _fail(field_name, f"Invalid {field_name} format. Use ISO 8601 format.")
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise _fail(field_name, f"Invalid {field_name} format. Use ISO 8601 format.") from None
    return as_utc(parsed)
