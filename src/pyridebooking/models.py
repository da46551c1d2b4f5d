"""Public data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import StrEnum
from typing import Literal


@dataclass(frozen=True, slots=True)
class Reservation:
    date: date
    time: time

    @property
    def minutes(self) -> int:
        """Pickup time as minutes since midnight."""
        return self.time.hour * 60 + self.time.minute


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Blocked period in minutes since midnight, inclusive at both ends.

    ``start`` can be negative and ``end`` can pass the end of the day until the
    window is clamped for display.
    """

    start: int
    end: int

    @property
    def minutes(self) -> int:
        return self.end - self.start

    def contains(self, minute: int) -> bool:
        return self.start <= minute <= self.end

    def clamp(self, day_minutes: int) -> TimeWindow:
        return TimeWindow(start=max(0, self.start), end=min(day_minutes, self.end))


@dataclass(frozen=True, slots=True)
class SpecialRequirements:
    wheelchair: bool = False
    car_seat: bool = False
    checked_bags: bool = False
    other: str | None = None


@dataclass(frozen=True, slots=True)
class BookingCandidate:
    """In-progress booking input.

    Required for a valid booking: ``date``, ``time``, ``passengers`` and, for a
    round trip, ``return_date`` and ``return_time``. Everything else is
    optional. Contact fields are passed to the store as entered.
    """

    date: date | None = None
    time: time | None = None
    passengers: int = 1
    destination: str | None = None
    pickup_address: str = ""
    requirements: SpecialRequirements = field(default_factory=SpecialRequirements)
    airport_trip: bool = False
    flight_number: str | None = None
    round_trip: bool = False
    return_date: date | None = None
    return_time: time | None = None
    name: str = ""
    phone: str = ""
    email: str = ""
    notes: str = ""


class IssueKind(StrEnum):
    INPUT_INCOMPLETE = "input_incomplete"
    INPUT_INVALID = "input_invalid"
    POLICY_VIOLATION = "policy_violation"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    kind: IssueKind
    code: str
    message: str


@dataclass(frozen=True, slots=True)
class Verdict:
    issues: tuple[ValidationIssue, ...] = ()
    notices: tuple[str, ...] = ()
    suggestions: tuple[time, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def reasons(self) -> list[str]:
        return [issue.message for issue in self.issues]

    @property
    def codes(self) -> list[str]:
        return [issue.code for issue in self.issues]


@dataclass(frozen=True, slots=True)
class TimelineSegment:
    start: int
    end: int
    start_label: str
    end_label: str
    left_percent: float
    width_percent: float


@dataclass(frozen=True, slots=True)
class Timeline:
    segments: tuple[TimelineSegment, ...]
    day_minutes: int
    day: date | None = None

    @property
    def fully_available(self) -> bool:
        return not self.segments


@dataclass(frozen=True, slots=True)
class DayAvailability:
    date: date
    reservations: tuple[Reservation, ...]
    blocked: tuple[TimeWindow, ...]
    timeline: Timeline


@dataclass(frozen=True, slots=True)
class BookingLeg:
    """One ride as written to the reservation store."""

    kind: Literal["outbound", "return"]
    date: date
    time: time
    pickup: str
    destination: str
    passengers: int
    requirements: SpecialRequirements
    airport_trip: bool = False
    flight_number: str = ""
    name: str = ""
    phone: str = ""
    email: str = ""
    notes: str = ""


@dataclass(frozen=True, slots=True)
class LegResult:
    leg: BookingLeg
    ok: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    verdict: Verdict
    legs: tuple[LegResult, ...] = ()
    quote: int | None = None

    @property
    def submitted(self) -> bool:
        return self.verdict.valid and bool(self.legs) and all(leg.ok for leg in self.legs)
