"""Shared validation for quote-intake step submissions.

The frontend submits step payloads as dictionaries keyed by the form's field names.
These validators ensure required fields are present and well-formed.

On validation failure, raise `FormValidationError` so the API can return HTTP 422
with structured `field_errors`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional


@dataclass
class FormValidationError(Exception):
    """Exception raised for form validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str]
    message: str = "Validation failed"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(
    payload: Dict[str, Any],
    field: str,
    errors: Dict[str, str],
    *,
    label: Optional[str] = None,
    min_length: int = 1,
) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    elif len(value) < min_length:
        add_error(errors, field, f"{label or field} must be at least {min_length} characters")
    return value


def optional_str(payload: Dict[str, Any], field: str) -> str:
    return _strip(payload.get(field))


def parse_int(
    payload: Dict[str, Any],
    field: str,
    errors: Dict[str, str],
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
    required: bool = False,
    label: Optional[str] = None,
) -> int:
    raw = payload.get(field)
    name = label or field
    if raw is None or _strip(raw) == "":
        if required:
            add_error(errors, field, f"{name} is required")
        return 0
    try:
        val = int(_strip(raw))
    except ValueError:
        add_error(errors, field, f"{name} must be a whole number")
        return 0
    if min_value is not None and val < min_value:
        add_error(errors, field, f"{name} must be at least {min_value}")
    if max_value is not None and val > max_value:
        add_error(errors, field, f"{name} must be at most {max_value}")
    return val


def parse_decimal_str(
    payload: Dict[str, Any],
    field: str,
    errors: Dict[str, str],
    *,
    min_value: Optional[float] = None,
    exclusive_min: bool = False,
    required: bool = False,
    label: Optional[str] = None,
) -> str:
    """Validate numeric input but return it as a string (to avoid changing storage shape)."""
    raw = _strip(payload.get(field))
    name = label or field
    if not raw:
        if required:
            add_error(errors, field, f"{name} is required")
        return ""
    try:
        val = float(raw.replace(",", ""))
    except ValueError:
        add_error(errors, field, f"{name} must be a number")
        return raw
    if not math.isfinite(val):
        add_error(errors, field, f"{name} must be a number")
        return raw
    if min_value is not None:
        if exclusive_min and val <= min_value:
            add_error(errors, field, f"{name} must be greater than {min_value:g}")
        elif not exclusive_min and val < min_value:
            add_error(errors, field, f"{name} must be at least {min_value:g}")
    return raw


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email(value: str, errors: Dict[str, str], field: str = "email") -> str:
    value = _strip(value)
    if not value:
        add_error(errors, field, "Email is required")
        return value
    if not _EMAIL_RE.match(value):
        add_error(errors, field, "Invalid email address")
    return value


def phone_digits(value: str) -> str:
    return re.sub(r"\D", "", _strip(value))


def validate_phone(value: str, errors: Dict[str, str], field: str = "phone", *, min_digits: int = 10) -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Phone number is required")
        return raw
    if re.search(r"[^\d\s\-\(\)\.\+]", raw):
        add_error(errors, field, "Phone number contains invalid characters")
        return raw
    if len(phone_digits(raw)) < min_digits:
        add_error(errors, field, "Valid phone number is required")
    return raw


_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")


def validate_zip(value: str, errors: Dict[str, str], field: str = "zipCode") -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Zip code is required")
        return raw
    if not _ZIP_RE.match(raw):
        add_error(errors, field, "Zip code format is not valid (expected 12345 or 12345-6789)")
    return raw


def validate_date_iso(value: str, errors: Dict[str, str], field: str, *, required: bool = True, not_future: bool = False, label: Optional[str] = None) -> str:
    raw = _strip(value)
    name = label or field
    if not raw:
        if required:
            add_error(errors, field, f"{name} is required")
        return raw
    try:
        d = date.fromisoformat(raw)
    except ValueError:
        add_error(errors, field, f"{name} must be a valid date (YYYY-MM-DD)")
        return raw
    if not_future and d > date.today():
        add_error(errors, field, f"{name} cannot be in the future")
    return raw


def validate_in(value: str, allowed: Iterable[str], errors: Dict[str, str], field: str, *, required: bool = True, label: Optional[str] = None) -> str:
    raw = _strip(value)
    name = label or field
    if not raw:
        if required:
            add_error(errors, field, f"{name} is required")
        return raw
    if raw not in set(allowed):
        add_error(errors, field, f"{name} has an invalid value")
    return raw


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise FormValidationError(field_errors=errors, message=message)
