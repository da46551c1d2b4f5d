"""Booking client facade."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import date, datetime, tzinfo

import aiohttp

from .cache import ReservationCache
from .const import (
    BUSINESS_PHONE,
    CACHE_TTL_SECONDS,
    DEFAULT_FORM_URL,
    DEFAULT_RESERVATIONS_URL,
    DEFAULT_TIMEZONE,
)
from .exceptions import NetworkError, StoreError, SubmissionError, ValidationError
from .models import (
    BookingCandidate,
    BookingLeg,
    DayAvailability,
    LegResult,
    SubmissionResult,
    Verdict,
)
from .pricing import capacity, quote
from .scheduling import blocked_windows, merge_windows
from .store.base import BaseReservationStore
from .store.sheets import Store
from .timeline import render
from .util import soonest_pickup
from .validator import BookingValidator

_LOGGER = logging.getLogger(__name__)
_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


def booking_legs(candidate: BookingCandidate) -> list[BookingLeg]:
    """Split a candidate into the records written to the store.

    A round trip yields a second leg with pickup and destination swapped and
    the return date and time as its pickup.
    """
    if candidate.date is None or candidate.time is None:
        raise ValidationError("Pickup date and time are required.")
    destination = candidate.destination or ""
    outbound = BookingLeg(
        kind="outbound",
        date=candidate.date,
        time=candidate.time,
        pickup=candidate.pickup_address,
        destination=destination,
        passengers=candidate.passengers,
        requirements=candidate.requirements,
        airport_trip=candidate.airport_trip,
        flight_number=candidate.flight_number or "",
        name=candidate.name,
        phone=candidate.phone,
        email=candidate.email,
        notes=candidate.notes,
    )
    if not candidate.round_trip:
        return [outbound]
    if candidate.return_date is None or candidate.return_time is None:
        raise ValidationError("Return date and time are required for a round trip.")
    inbound = BookingLeg(
        kind="return",
        date=candidate.return_date,
        time=candidate.return_time,
        pickup=destination,
        destination=candidate.pickup_address,
        passengers=candidate.passengers,
        requirements=candidate.requirements,
        airport_trip=candidate.airport_trip,
        flight_number=candidate.flight_number or "",
        name=candidate.name,
        phone=candidate.phone,
        email=candidate.email,
        notes=candidate.notes,
    )
    return [outbound, inbound]


class BookingClient:
    """Facade over the reservation store, cache and validator."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        store: BaseReservationStore | None = None,
        read_url: str = DEFAULT_RESERVATIONS_URL,
        write_url: str = DEFAULT_FORM_URL,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
        cache_ttl: float = CACHE_TTL_SECONDS,
        timezone: tzinfo | str | None = DEFAULT_TIMEZONE,
        phone: str = BUSINESS_PHONE,
        clock: Callable[[], datetime] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session = session
        self._owns_session = session is None and store is None
        self._store = store
        self._read_url = read_url
        self._write_url = write_url
        self._timeout = timeout or _DEFAULT_TIMEOUT
        self._retry_count = max(0, retry_count)
        self._cache_ttl = cache_ttl
        self._monotonic = monotonic
        self._cache: ReservationCache | None = None
        self._phone = phone
        self._validator = BookingValidator(clock=clock, timezone=timezone, phone=phone)

    async def __aenter__(self) -> BookingClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def validator(self) -> BookingValidator:
        return self._validator

    @property
    def cache(self) -> ReservationCache:
        if self._cache is None:
            self._cache = ReservationCache(
                self._ensure_store(),
                ttl=self._cache_ttl,
                clock=self._monotonic,
            )
        return self._cache

    async def get_availability(self, day: date) -> DayAvailability:
        """Return the day's reservations, merged blocked windows and timeline."""
        _LOGGER.debug("get_availability started for %s", day.isoformat())
        reservations = await self.cache.get_reservations_for_date(day)
        merged = merge_windows(blocked_windows(reservations))
        availability = DayAvailability(
            date=day,
            reservations=tuple(reservations),
            blocked=tuple(merged),
            timeline=render(merged, day=day),
        )
        _LOGGER.debug(
            "get_availability completed for %s (%d blocked window(s))",
            day.isoformat(),
            len(merged),
        )
        return availability

    async def check(self, candidate: BookingCandidate) -> Verdict:
        """Validate a candidate against cached (or freshly fetched) reservations."""
        reservations = await self.cache.get_reservations()
        return self._validator.validate(
            candidate,
            reservations,
            return_reservations=reservations if candidate.round_trip else None,
        )

    def quote(self, candidate: BookingCandidate) -> int | None:
        return quote(candidate.destination, candidate.passengers)

    def capacity(self, candidate: BookingCandidate) -> int:
        return capacity(candidate.requirements)

    def soonest_pickup(self) -> datetime:
        """Default pickup offered by the date/time picker."""
        return soonest_pickup(self._validator.now())

    async def submit(self, candidate: BookingCandidate) -> SubmissionResult:
        """Re-validate a candidate and write one store record per leg.

        Returns an unsubmitted result when validation fails. Every leg is
        attempted even after a failure; any failed leg raises
        :class:`SubmissionError` listing the outcome of each leg. Written legs
        are not rolled back.
        """
        _LOGGER.debug("submit started")
        verdict = await self.check(candidate)
        price = self.quote(candidate)
        if not verdict.valid:
            _LOGGER.debug("submit rejected: %s", ", ".join(verdict.codes))
            return SubmissionResult(verdict=verdict, quote=price)

        store = self._ensure_store()
        results: list[LegResult] = []
        for leg in booking_legs(candidate):
            try:
                await store.append_booking(leg)
            except (NetworkError, StoreError) as exc:
                _LOGGER.warning("Writing %s leg failed: %s", leg.kind, exc)
                results.append(LegResult(leg=leg, ok=False, error=str(exc)))
                continue
            results.append(LegResult(leg=leg, ok=True))

        legs = tuple(results)
        if any(result.ok for result in legs):
            self.cache.invalidate()
        if not all(result.ok for result in legs):
            raise SubmissionError(
                "Booking submission failed.",
                legs=legs,
                user_message=self._failure_message(legs),
            )
        _LOGGER.debug("submit completed (%d leg(s))", len(legs))
        return SubmissionResult(verdict=verdict, legs=legs, quote=price)

    def _failure_message(self, legs: tuple[LegResult, ...]) -> str:
        written = [result.leg.kind for result in legs if result.ok]
        if not written:
            return (
                "We could not submit your booking request. Please try again in a few "
                f"minutes or call {self._phone}."
            )
        failed = [result.leg.kind for result in legs if not result.ok]
        return (
            f"Your {' and '.join(written)} ride was received but the "
            f"{' and '.join(failed)} ride was not. Please call {self._phone} "
            "so we can complete your booking."
        )

    def _ensure_store(self) -> BaseReservationStore:
        if self._store is None:
            self._store = Store(
                self._ensure_session(),
                read_url=self._read_url,
                write_url=self._write_url,
                timeout=self._timeout,
                retry_count=self._retry_count,
            )
        return self._store

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session
