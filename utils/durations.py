"""
Duration strings used by the JWT settings: an integer followed by one of
s, m, h, d ("15m", "7d", ...).
"""
from __future__ import annotations

import re
from datetime import timedelta

DURATION_RE = re.compile(r"^(\d+)([smhd])$")

_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}

DEFAULT_REFRESH_DURATION = timedelta(days=30)
DEFAULT_ACCESS_DURATION = timedelta(days=7)

# anything longer cannot be added to "now" safely
MAX_DURATION = timedelta(days=100 * 365)


def _to_timedelta(value):
    if not isinstance(value, str):
        return None
    match = DURATION_RE.match(value.strip())
    if not match:
        return None
    amount, unit = match.groups()
    try:
        delta = timedelta(**{_UNITS[unit]: int(amount)})
    except OverflowError:
        return None
    return delta if delta <= MAX_DURATION else None


def is_valid_duration(value) -> bool:
    return _to_timedelta(value) is not None


def parse_duration(value, default: timedelta = DEFAULT_REFRESH_DURATION) -> timedelta:
    """Parse a duration string; anything unrecognised or out of range yields `default`."""
    delta = _to_timedelta(value)
    return default if delta is None else delta
