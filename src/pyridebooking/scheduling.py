"""Blocked windows, conflict detection and availability merging.

Windows are computed per calendar day. A reservation late in the evening does
not block pickups on the following date; callers always pass the reservations
of a single day.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import time

from .const import (
    BUFFER_AFTER_MINUTES,
    BUFFER_BEFORE_MINUTES,
    DAY_MINUTES,
    MAX_SUGGESTIONS,
    PICKUP_GRANULARITY_MINUTES,
)
from .exceptions import ValidationError
from .models import Reservation, TimeWindow
from .util import minutes_since_midnight


def blocked_window(reservation: Reservation) -> TimeWindow:
    pickup = reservation.minutes
    return TimeWindow(
        start=pickup - BUFFER_BEFORE_MINUTES,
        end=pickup + BUFFER_AFTER_MINUTES,
    )


def blocked_windows(reservations: Iterable[Reservation]) -> list[TimeWindow]:
    return [blocked_window(reservation) for reservation in reservations]


def conflicting_reservations(
    candidate: time,
    reservations: Iterable[Reservation],
) -> list[Reservation]:
    minute = minutes_since_midnight(candidate)
    return [
        reservation for reservation in reservations if blocked_window(reservation).contains(minute)
    ]


def conflicts(candidate: time, reservations: Iterable[Reservation]) -> bool:
    """Return True when ``candidate`` falls inside any reservation's blocked window.

    Raw, unclamped windows are used so a window's true boundaries always apply.
    """
    minute = minutes_since_midnight(candidate)
    return any(blocked_window(reservation).contains(minute) for reservation in reservations)


def merge_windows(
    windows: Iterable[TimeWindow],
    *,
    day_minutes: int = DAY_MINUTES,
) -> list[TimeWindow]:
    """Merge overlapping or touching windows into a sorted disjoint list.

    Each window is clamped to the day first. The result is meant for display;
    conflict checks use the raw windows.
    """
    clamped = sorted(
        (window.clamp(day_minutes) for window in windows),
        key=lambda window: window.start,
    )
    merged: list[TimeWindow] = []
    for window in clamped:
        if window.end < window.start:
            # Entirely outside the day after clamping.
            continue
        if merged and window.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = TimeWindow(start=last.start, end=max(last.end, window.end))
            continue
        merged.append(window)
    return merged


def suggest_times(
    candidate: time,
    reservations: Sequence[Reservation],
    *,
    earliest_minute: int = 0,
    granularity: int = PICKUP_GRANULARITY_MINUTES,
    limit: int = MAX_SUGGESTIONS,
    day_minutes: int = DAY_MINUTES,
) -> list[time]:
    """Propose conflict-free pickup times on the same day, nearest first.

    Times are taken from a ``granularity`` minute grid and never precede
    ``earliest_minute``. On equal distance the earlier time wins.
    """
    if granularity <= 0:
        raise ValidationError("granularity must be positive.")
    if limit <= 0:
        return []
    windows = blocked_windows(reservations)
    origin = minutes_since_midnight(candidate)
    grid = range(0, day_minutes, granularity)
    free = [
        minute
        for minute in grid
        if minute >= earliest_minute and not any(window.contains(minute) for window in windows)
    ]
    free.sort(key=lambda minute: (abs(minute - origin), minute))
    return [time(*divmod(minute, 60)) for minute in free[:limit]]
