"""Time-boxed cache of the remote reservation list."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import date
from enum import StrEnum

from .const import CACHE_TTL_SECONDS
from .exceptions import NetworkError, StoreError, ValidationError
from .models import Reservation
from .store.base import BaseReservationStore

_LOGGER = logging.getLogger(__name__)


class CacheState(StrEnum):
    EMPTY = "empty"
    FETCHING = "fetching"
    FRESH = "fresh"
    STALE = "stale"


class ReservationCache:
    """Cache the store's reservations for ``ttl`` seconds.

    A failed fetch never reaches the caller: the last good list is served, or
    an empty list when nothing was ever fetched. The empty fallback means no
    conflicts are known, so a booking can go through while the store is down.

    Concurrent refreshes may finish out of order. Each refresh takes a sequence
    number; a response is dropped once a later-issued request has been applied.
    The list is always replaced as a whole.
    """

    def __init__(
        self,
        store: BaseReservationStore,
        *,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl < 0:
            raise ValidationError("ttl must not be negative.")
        self._store = store
        self._ttl = ttl
        self._clock = clock
        self._reservations: tuple[Reservation, ...] | None = None
        self._generation = 0
        self._applied_generation = 0
        self._fetched_at: float | None = None
        self._inflight = 0
        self._last_error: Exception | None = None

    @property
    def state(self) -> CacheState:
        if self._inflight:
            return CacheState.FETCHING
        if self._reservations is None:
            return CacheState.EMPTY
        if self._is_fresh():
            return CacheState.FRESH
        return CacheState.STALE

    @property
    def last_error(self) -> Exception | None:
        """Error of the most recent failed fetch, cleared by the next success."""
        return self._last_error

    @property
    def age(self) -> float | None:
        if self._fetched_at is None:
            return None
        return self._clock() - self._fetched_at

    def _is_fresh(self) -> bool:
        age = self.age
        return self._reservations is not None and age is not None and age < self._ttl

    def invalidate(self) -> None:
        """Force the next read to refetch; cached data stays available as fallback."""
        self._fetched_at = None

    async def get_reservations(self) -> list[Reservation]:
        if self._is_fresh():
            return list(self._reservations or ())
        return await self.refresh()

    async def get_reservations_for_date(self, day: date) -> list[Reservation]:
        reservations = await self.get_reservations()
        return [reservation for reservation in reservations if reservation.date == day]

    async def refresh(self) -> list[Reservation]:
        self._generation += 1
        generation = self._generation
        self._inflight += 1
        try:
            fetched = await self._store.list_reservations()
        except (NetworkError, StoreError) as exc:
            self._last_error = exc
            return self._fallback(exc)
        finally:
            self._inflight -= 1

        if generation < self._applied_generation:
            _LOGGER.debug("Discarding superseded reservation response")
            return list(self._reservations or ())
        self._reservations = tuple(fetched)
        self._applied_generation = generation
        self._fetched_at = self._clock()
        self._last_error = None
        return list(self._reservations)

    def _fallback(self, exc: Exception) -> list[Reservation]:
        if self._reservations is None:
            _LOGGER.warning(
                "Reservation fetch failed and nothing is cached; "
                "continuing without known conflicts: %s",
                exc,
            )
            return []
        _LOGGER.warning(
            "Reservation fetch failed; using %d cached reservation(s): %s",
            len(self._reservations),
            exc,
        )
        return list(self._reservations)
