"""pyRideBooking package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .cache import CacheState, ReservationCache
from .client import BookingClient, booking_legs
from .exceptions import (
    NetworkError,
    PyRideBookingError,
    StoreError,
    SubmissionError,
    ValidationError,
)
from .models import (
    BookingCandidate,
    BookingLeg,
    DayAvailability,
    IssueKind,
    LegResult,
    Reservation,
    SpecialRequirements,
    SubmissionResult,
    Timeline,
    TimelineSegment,
    TimeWindow,
    ValidationIssue,
    Verdict,
)
from .pricing import capacity, quote
from .scheduling import blocked_window, conflicts, merge_windows, suggest_times
from .timeline import render, to_html
from .validator import BookingValidator

try:
    __version__ = version("pyridebooking")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "BookingCandidate",
    "BookingClient",
    "BookingLeg",
    "BookingValidator",
    "CacheState",
    "DayAvailability",
    "IssueKind",
    "LegResult",
    "NetworkError",
    "PyRideBookingError",
    "Reservation",
    "ReservationCache",
    "SpecialRequirements",
    "StoreError",
    "SubmissionError",
    "SubmissionResult",
    "TimeWindow",
    "Timeline",
    "TimelineSegment",
    "ValidationError",
    "ValidationIssue",
    "Verdict",
    "__version__",
    "blocked_window",
    "booking_legs",
    "capacity",
    "conflicts",
    "merge_windows",
    "quote",
    "render",
    "suggest_times",
    "to_html",
]
