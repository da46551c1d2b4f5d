"""Shared utilities for parsing, formatting and masking."""

from __future__ import annotations

import math
import re
from datetime import UTC, date, datetime, time, timedelta

from .const import MIN_ADVANCE, PICKUP_GRANULARITY_MINUTES
from .exceptions import ValidationError

_FLIGHT_NUMBER_RE = re.compile(r"^[a-zA-Z0-9]{2,3}[\s-]?\d{1,4}[a-zA-Z]?$")
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_NON_DIGIT_RE = re.compile(r"\D")


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str) or not value:
        raise ValidationError("Timestamp must be a non-empty string.")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError("Timestamp is not a valid ISO 8601 value.") from exc
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(UTC)


def parse_reservation_time(value: str) -> time:
    """Return the time of day carried by a store time value.

    The sheet serializes times as full timestamps on a placeholder date
    (``1899-12-30T15:17:11.000Z``); only the UTC hour and minute are kept.
    Plain ``HH:MM`` values are accepted too.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Time must be a non-empty string.")
    match = _CLOCK_RE.match(value.strip())
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            raise ValidationError("Time is out of range.")
        return time(hours, minutes)
    parsed = parse_timestamp(value)
    return time(parsed.hour, parsed.minute)


def parse_reservation_date(value: str) -> date:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Date must be a non-empty string.")
    raw = value.strip()
    if len(raw) == 10:
        try:
            return date.fromisoformat(raw)
        except ValueError as exc:
            raise ValidationError("Date is not a valid ISO 8601 value.") from exc
    return parse_timestamp(raw).date()


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as a 12-hour clock label.

    The end of the day (1440) is shown as ``11:59 PM``.
    """
    if minutes >= 1440:
        minutes = 1439
    hours, mins = divmod(max(0, minutes), 60)
    suffix = "PM" if hours >= 12 else "AM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {suffix}"


def is_valid_flight_number(value: str) -> bool:
    if not isinstance(value, str):
        return False
    return _FLIGHT_NUMBER_RE.match(value.strip()) is not None


def mask_phone(phone: str) -> str:
    if not isinstance(phone, str):
        return "***"
    digits = _NON_DIGIT_RE.sub("", phone)
    if len(digits) <= 4:
        return "*" * len(digits) or "***"
    return f"{'*' * (len(digits) - 4)}{digits[-4:]}"


def soonest_pickup(
    now: datetime,
    *,
    advance: timedelta = MIN_ADVANCE,
    granularity: int = PICKUP_GRANULARITY_MINUTES,
) -> datetime:
    """Earliest bookable pickup rounded up to the next ``granularity`` minutes."""
    if granularity <= 0:
        raise ValidationError("granularity must be positive.")
    earliest = (now + advance).replace(second=0, microsecond=0)
    if earliest < now + advance:
        earliest += timedelta(minutes=1)
    rounded = math.ceil(earliest.minute / granularity) * granularity
    return earliest.replace(minute=0) + timedelta(minutes=rounded)
