"""Booking validation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .const import (
    BUSINESS_PHONE,
    DEFAULT_TIMEZONE,
    MAX_ADVANCE_HORIZON,
    MIN_ADVANCE,
    PICKUP_GRANULARITY_MINUTES,
)
from .models import (
    BookingCandidate,
    IssueKind,
    Reservation,
    ValidationIssue,
    Verdict,
)
from .pricing import capacity, quote
from .reference import Reference, load_reference
from .scheduling import conflicting_reservations, suggest_times
from .util import format_clock, is_valid_flight_number, minutes_since_midnight

_LOGGER = logging.getLogger(__name__)


def resolve_timezone(name: str | None) -> tzinfo:
    if not name:
        return UTC
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        _LOGGER.warning("Unknown timezone %s, falling back to UTC", name)
        return UTC


class BookingValidator:
    """Evaluate a booking candidate against policy and existing reservations.

    ``validate`` never raises; every failing check contributes an issue to the
    verdict. ``clock`` returns the current time and is injected so tests can pin
    "now".
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] | None = None,
        timezone: tzinfo | str | None = DEFAULT_TIMEZONE,
        min_advance: timedelta = MIN_ADVANCE,
        max_horizon: timedelta = MAX_ADVANCE_HORIZON,
        phone: str = BUSINESS_PHONE,
        reference: Reference | None = None,
    ) -> None:
        self._tz = timezone if isinstance(timezone, tzinfo) else resolve_timezone(timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._min_advance = min_advance
        self._max_horizon = max_horizon
        self._phone = phone
        self._reference = reference

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        current = self._clock()
        if current.tzinfo is None:
            return current.replace(tzinfo=self._tz)
        return current.astimezone(self._tz)

    def localize(self, day: date, clock_time: time) -> datetime:
        return datetime.combine(day, clock_time, tzinfo=self._tz)

    def _reference_data(self) -> Reference:
        if self._reference is None:
            self._reference = load_reference()
        return self._reference

    def validate(
        self,
        candidate: BookingCandidate,
        reservations: Sequence[Reservation],
        *,
        return_reservations: Sequence[Reservation] | None = None,
    ) -> Verdict:
        issues: list[ValidationIssue] = []
        notices: list[str] = []
        suggestions: tuple[time, ...] = ()
        now = self.now()
        outbound: datetime | None = None

        if candidate.date is None or candidate.time is None:
            issues.append(
                ValidationIssue(
                    IssueKind.INPUT_INCOMPLETE,
                    "missing_datetime",
                    "Please select both a pickup date and time.",
                )
            )
        else:
            outbound = self.localize(candidate.date, candidate.time)
            issues.extend(self._check_timing(outbound, now))
            day_reservations = [r for r in reservations if r.date == candidate.date]
            conflict_issue, suggestions = self._check_conflict(
                candidate.date,
                candidate.time,
                day_reservations,
                now,
            )
            if conflict_issue is not None:
                issues.append(conflict_issue)

        if candidate.round_trip:
            issues.extend(self._check_return(candidate, outbound, return_reservations, now))

        issues.extend(self._check_passengers(candidate))
        issues.extend(self._check_flight(candidate))
        notices.extend(self._collect_notices(candidate))

        verdict = Verdict(
            issues=tuple(issues),
            notices=tuple(notices),
            suggestions=suggestions,
        )
        if not verdict.valid:
            _LOGGER.debug("Candidate rejected: %s", ", ".join(verdict.codes))
        return verdict

    def _check_timing(self, pickup: datetime, now: datetime) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if pickup < now:
            issues.append(
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "in_past",
                    "Pickup time cannot be in the past.",
                )
            )
        if pickup < now + self._min_advance:
            hours = int(self._min_advance.total_seconds() // 3600)
            issues.append(
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "min_advance",
                    f"Please book at least {hours} hours in advance. "
                    f"For urgent bookings, call {self._phone}.",
                )
            )
        if pickup > now + self._max_horizon:
            issues.append(
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "max_horizon",
                    f"Bookings can be made at most {self._max_horizon.days} days ahead. "
                    f"For later trips, call {self._phone}.",
                )
            )
        return issues

    def _earliest_minute(self, day: date, now: datetime) -> int:
        earliest = now + self._min_advance
        if earliest.date() > day:
            return 24 * 60
        if earliest.date() < day:
            return 0
        minute = minutes_since_midnight(earliest.time())
        if earliest.second or earliest.microsecond:
            minute += 1
        return minute

    def _check_conflict(
        self,
        day: date,
        pickup: time,
        reservations: Sequence[Reservation],
        now: datetime,
    ) -> tuple[ValidationIssue | None, tuple[time, ...]]:
        clashes = conflicting_reservations(pickup, reservations)
        if not clashes:
            return None, ()
        _LOGGER.debug(
            "Pickup %s on %s conflicts with %d reservation(s)",
            pickup.strftime("%H:%M"),
            day.isoformat(),
            len(clashes),
        )
        suggestions = tuple(
            suggest_times(
                pickup,
                reservations,
                earliest_minute=self._earliest_minute(day, now),
                granularity=PICKUP_GRANULARITY_MINUTES,
            )
        )
        message = (
            "This time slot is not available (conflicts with an existing booking). "
            "Please choose a different time."
        )
        if suggestions:
            options = ", ".join(
                format_clock(minutes_since_midnight(value)) for value in suggestions
            )
            message = f"{message} Nearest open times: {options}."
        else:
            message = f"{message} No other times are open that day; call {self._phone}."
        return (
            ValidationIssue(IssueKind.POLICY_VIOLATION, "time_conflict", message),
            suggestions,
        )

    def _check_return(
        self,
        candidate: BookingCandidate,
        outbound: datetime | None,
        return_reservations: Sequence[Reservation] | None,
        now: datetime,
    ) -> list[ValidationIssue]:
        if candidate.return_date is None or candidate.return_time is None:
            return [
                ValidationIssue(
                    IssueKind.INPUT_INCOMPLETE,
                    "missing_return",
                    "Please select both a return date and time for a round trip.",
                )
            ]
        issues: list[ValidationIssue] = []
        inbound = self.localize(candidate.return_date, candidate.return_time)
        if outbound is not None and inbound <= outbound:
            issues.append(
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "return_before_outbound",
                    "The return pickup must be after the outbound pickup.",
                )
            )
        if inbound > now + self._max_horizon:
            issues.append(
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "return_max_horizon",
                    f"Return trips can be booked at most {self._max_horizon.days} days "
                    f"ahead. For later trips, call {self._phone}.",
                )
            )
        same_day = [r for r in return_reservations or () if r.date == candidate.return_date]
        # The outbound leg is written too and blocks its own window.
        if outbound is not None and inbound > outbound and outbound.date() == inbound.date():
            same_day.append(Reservation(date=candidate.return_date, time=outbound.time()))
        if conflicting_reservations(candidate.return_time, same_day):
            issues.append(
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "return_conflict",
                    "The return time slot is not available (conflicts with an existing "
                    "booking or with the outbound ride). Please choose a different return time.",
                )
            )
        return issues

    def _check_passengers(self, candidate: BookingCandidate) -> list[ValidationIssue]:
        passengers = candidate.passengers
        if isinstance(passengers, bool) or not isinstance(passengers, int) or passengers < 1:
            return [
                ValidationIssue(
                    IssueKind.INPUT_INVALID,
                    "invalid_passengers",
                    "Please enter at least one passenger.",
                )
            ]
        seats = capacity(candidate.requirements)
        if passengers > seats:
            return [
                ValidationIssue(
                    IssueKind.POLICY_VIOLATION,
                    "over_capacity",
                    f"With the selected requirements the vehicle seats at most {seats} "
                    f"passengers. For larger groups, call {self._phone}.",
                )
            ]
        return []

    def _check_flight(self, candidate: BookingCandidate) -> list[ValidationIssue]:
        if not candidate.airport_trip or not candidate.flight_number:
            return []
        if is_valid_flight_number(candidate.flight_number):
            return []
        return [
            ValidationIssue(
                IssueKind.INPUT_INVALID,
                "invalid_flight_number",
                "Please enter a valid flight number (e.g., AA1234).",
            )
        ]

    def _collect_notices(self, candidate: BookingCandidate) -> list[str]:
        reference = self._reference_data()
        notices: list[str] = []
        passengers = candidate.passengers if isinstance(candidate.passengers, int) else 1
        if quote(candidate.destination, passengers, rates=reference.rates) is None:
            notices.append(
                f"No online quote is available for this destination; call {self._phone} "
                "to confirm the price."
            )
        if candidate.pickup_address and not reference.service_area.contains(
            candidate.pickup_address
        ):
            notices.append(
                "This pickup address may be outside our service area; "
                "we will confirm availability by phone."
            )
        return notices
