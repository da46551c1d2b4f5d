"""Google Sheets reservation store.

Reservations are read from an Apps Script endpoint that dumps the booking
sheet as JSON, and appended through the booking Google Form.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ..const import DEFAULT_FORM_URL, DEFAULT_RESERVATIONS_URL
from ..exceptions import StoreError, ValidationError
from ..models import BookingLeg, Reservation
from ..util import mask_phone, parse_reservation_date, parse_reservation_time
from .base import BaseReservationStore
from .const import (
    CHECKED_BAGS_NOTE,
    DEFAULT_HEADERS,
    FIELD_AIRPORT_PICKUP,
    FIELD_DATE,
    FIELD_DESTINATION,
    FIELD_EMAIL,
    FIELD_FLIGHT_NUMBER,
    FIELD_NAME,
    FIELD_NOTES,
    FIELD_OTHER_REQUIREMENT,
    FIELD_PASSENGERS,
    FIELD_PHONE,
    FIELD_PICKUP,
    FIELD_REQUIREMENTS,
    FIELD_TIME,
    REQUIREMENT_CAR_SEAT,
    REQUIREMENT_OTHER,
    REQUIREMENT_WHEELCHAIR,
)

_LOGGER = logging.getLogger(__name__)


class Store(BaseReservationStore):
    """Reservation store backed by a Google Sheet and its booking form."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        read_url: str = DEFAULT_RESERVATIONS_URL,
        write_url: str = DEFAULT_FORM_URL,
        timeout: aiohttp.ClientTimeout | None = None,
        retry_count: int = 0,
    ) -> None:
        super().__init__(
            session,
            read_url=read_url,
            write_url=write_url,
            timeout=timeout,
            retry_count=retry_count,
        )

    async def list_reservations(self) -> list[Reservation]:
        """Return every reservation in the sheet."""
        _LOGGER.debug("Store list_reservations started")
        data = await self._request_json("GET", self._read_url, headers=dict(DEFAULT_HEADERS))
        reservations = self._map_reservation_list(data)
        _LOGGER.debug("Store list_reservations completed (%d)", len(reservations))
        return reservations

    async def append_booking(self, leg: BookingLeg) -> None:
        """Submit one ride leg through the booking form."""
        _LOGGER.debug(
            "Store append_booking started (%s leg, %s %s, phone %s)",
            leg.kind,
            leg.date.isoformat(),
            leg.time.strftime("%H:%M"),
            mask_phone(leg.phone),
        )
        await self._request_text(
            "POST",
            self._write_url,
            data=aiohttp.FormData(self._form_fields(leg)),
        )
        _LOGGER.debug("Store append_booking completed (%s leg)", leg.kind)

    def _map_reservation_list(self, data: Any) -> list[Reservation]:
        if data is None:
            raise StoreError("Store response did not include reservations.")
        if not isinstance(data, list):
            raise StoreError("Store response included invalid reservations.")
        reservations: list[Reservation] = []
        for item in data:
            if not isinstance(item, dict):
                _LOGGER.warning("Skipping reservation row that is not an object: %r", item)
                continue
            try:
                reservations.append(self._map_reservation(item))
            except StoreError as exc:
                _LOGGER.warning("Skipping unreadable reservation row: %s", exc)
        return reservations

    def _map_reservation(self, data: dict[str, Any]) -> Reservation:
        date_raw = data.get("date")
        time_raw = data.get("time")
        if date_raw is None or time_raw is None:
            raise StoreError("Store response missing reservation fields.")
        if not isinstance(date_raw, str) or not isinstance(time_raw, str):
            raise StoreError("Store response included invalid reservation data.")
        try:
            return Reservation(
                date=parse_reservation_date(date_raw),
                time=parse_reservation_time(time_raw),
            )
        except ValidationError as exc:
            raise StoreError("Store returned invalid reservation data.") from exc

    def _form_fields(self, leg: BookingLeg) -> list[tuple[str, str]]:
        fields = [
            (FIELD_NAME, leg.name),
            (FIELD_PHONE, leg.phone),
            (FIELD_EMAIL, leg.email),
            (FIELD_DATE, leg.date.isoformat()),
            (FIELD_TIME, leg.time.strftime("%H:%M")),
            (FIELD_PICKUP, leg.pickup),
            (FIELD_DESTINATION, leg.destination),
            (FIELD_PASSENGERS, str(leg.passengers)),
            (FIELD_NOTES, leg.notes),
            (FIELD_AIRPORT_PICKUP, "Yes" if leg.airport_trip else "No"),
            (FIELD_FLIGHT_NUMBER, leg.flight_number),
        ]
        requirements = leg.requirements
        if requirements.wheelchair:
            fields.append((FIELD_REQUIREMENTS, REQUIREMENT_WHEELCHAIR))
        if requirements.car_seat:
            fields.append((FIELD_REQUIREMENTS, REQUIREMENT_CAR_SEAT))
        # The form has no checked-bags choice; it travels in the "other" text.
        notes = [CHECKED_BAGS_NOTE] if requirements.checked_bags else []
        other = (requirements.other or "").strip()
        if other:
            notes.append(other)
        if notes:
            fields.append((FIELD_REQUIREMENTS, REQUIREMENT_OTHER))
            fields.append((FIELD_OTHER_REQUIREMENT, "; ".join(notes)))
        return fields
