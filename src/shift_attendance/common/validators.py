from __future__ import annotations

import re
from datetime import time

from ..core.exceptions import ValidationError

_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def parse_time_of_day(value: str, field_name: str = "time") -> time:
    """Parse a 24h ``HH:MM`` string into a ``time``."""
    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise ValidationError(f"{field_name} must use HH:MM 24h format, got {value!r}")
    return time(hour=int(match.group(1)), minute=int(match.group(2)))
