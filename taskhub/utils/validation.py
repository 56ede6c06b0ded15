"""Request payload checks shared by the route handlers.

Each ``clean_*`` helper reads one field from a JSON payload, records a
human readable message in ``errors`` when the value is unusable and
returns the normalized value otherwise. Handlers call
``errors.raise_if_any()`` once all fields have been looked at, so a
client gets every field problem in a single 400 response.
"""

import math
import re
from datetime import datetime, timezone

from flask import request

from taskhub.errors import ValidationFailed

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Largest value a SQLite INTEGER column holds
MAX_ID = 2**63 - 1

# Marker for "field absent" in partial updates
MISSING = object()


class FieldErrors(dict):
    def raise_if_any(self):
        if self:
            raise ValidationFailed(dict(self))


def get_payload():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _label(field):
    return field.replace("_", " ").capitalize()


def clean_string(payload, field, errors, required=False, max_length=None, min_length=None):
    if field not in payload:
        if required:
            errors[field] = f"{_label(field)} is required"
        return MISSING
    raw = payload[field]
    if raw is None:
        if required:
            errors[field] = f"{_label(field)} is required"
        return None
    if not isinstance(raw, str):
        errors[field] = f"{_label(field)} must be a string"
        return MISSING
    value = raw.strip()
    if required and not value:
        errors[field] = f"{_label(field)} is required"
    elif min_length is not None and len(value) < min_length:
        errors[field] = f"{_label(field)} must be at least {min_length} characters"
    elif max_length is not None and len(value) > max_length:
        errors[field] = f"{_label(field)} must be at most {max_length} characters"
    return value


def clean_email(payload, field, errors, required=True):
    value = clean_string(payload, field, errors, required=required, max_length=255)
    if isinstance(value, str) and field not in errors:
        value = value.lower()
        if not EMAIL_RE.match(value):
            errors[field] = "Please enter a valid email address"
    return value


def clean_choice(payload, field, errors, enum_cls, required=False):
    if field not in payload or payload[field] in (None, ""):
        if required:
            errors[field] = f"{_label(field)} is required"
        return MISSING
    raw = payload[field]
    try:
        return enum_cls(raw).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        errors[field] = f"{_label(field)} must be one of: {allowed}"
        return MISSING


def clean_number(payload, field, errors, required=False, minimum=None, maximum=None,
                 positive=False):
    if field not in payload or payload[field] in (None, ""):
        if required:
            errors[field] = f"{_label(field)} is required"
            return MISSING
        return None if field in payload else MISSING
    raw = payload[field]
    # bool is an int subclass; "true" is never a number of hours
    if isinstance(raw, bool):
        errors[field] = f"{_label(field)} must be a number"
        return MISSING
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        errors[field] = f"{_label(field)} must be a number"
        return MISSING
    # NaN slips past every comparison below and inf is not valid JSON
    if not math.isfinite(value):
        errors[field] = f"{_label(field)} must be a number"
        return MISSING
    if positive and value <= 0:
        errors[field] = f"{_label(field)} must be greater than 0"
    elif minimum is not None and value < minimum:
        errors[field] = f"{_label(field)} must be at least {minimum:g}"
    elif maximum is not None and value > maximum:
        errors[field] = f"{_label(field)} must be at most {maximum:g}"
    return value


def parse_datetime(raw):
    """Parse an ISO date or datetime string; a trailing ``Z`` is accepted."""
    if isinstance(raw, datetime):
        return raw
    value = str(raw).strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    # Stored naive in UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def clean_datetime(payload, field, errors):
    if field not in payload:
        return MISSING
    raw = payload[field]
    if raw in (None, ""):
        return None
    try:
        return parse_datetime(raw)
    except (TypeError, ValueError):
        errors[field] = f"Invalid {field} format"
        return MISSING


def parse_id(raw):
    """Return ``raw`` as a database id, or None if it is not a plain positive integer.

    Floats are refused rather than truncated; values past SQLite's
    INTEGER range are refused too.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw.isascii() or not raw.isdigit():
            return None
        raw = int(raw)
    if not isinstance(raw, int) or not 0 < raw <= MAX_ID:
        return None
    return raw


def clean_id(payload, field, errors, required=False):
    if field not in payload or payload[field] in (None, "", "none"):
        if required:
            errors[field] = f"{_label(field)} is required"
            return MISSING
        return None if field in payload else MISSING
    value = parse_id(payload[field])
    if value is None:
        errors[field] = f"Invalid {field}"
        return MISSING
    return value


def clean_id_list(payload, field, errors):
    raw = payload.get(field)
    if raw is None:
        return []
    if not isinstance(raw, list):
        errors[field] = f"{_label(field)} must be a list"
        return []
    ids = [parse_id(item) for item in raw]
    if None in ids:
        errors[field] = f"{_label(field)} must contain user ids"
        return []
    return ids


def provided(value):
    return value is not MISSING


def given(value):
    return value is not MISSING and value is not None
