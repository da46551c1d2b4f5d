"""Manual live check for the Google Sheets reservation store.

Run from the repository root with:
  PYTHONPATH=src python scripts/store_live_check.py

Optional environment variables:
  RESERVATIONS_URL
  BOOKING_FORM_URL
  BOOKING_DATE (YYYY-MM-DD, defaults to tomorrow)
  DEBUG (any value enables debug logging)

The script only reads; it never submits the booking form.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from datetime import date, timedelta

from pyridebooking import BookingClient
from pyridebooking.const import DEFAULT_FORM_URL, DEFAULT_RESERVATIONS_URL
from pyridebooking.util import format_clock, minutes_since_midnight


def _booking_date() -> date:
    raw = os.getenv("BOOKING_DATE")
    if not raw:
        return date.today() + timedelta(days=1)
    try:
        return date.fromisoformat(raw)
    except ValueError:
        print(f"Invalid BOOKING_DATE: {raw}", file=sys.stderr)
        raise SystemExit(2) from None


async def main() -> int:
    logging.basicConfig(level=logging.DEBUG if os.getenv("DEBUG") else logging.WARNING)
    read_url = os.getenv("RESERVATIONS_URL") or DEFAULT_RESERVATIONS_URL
    write_url = os.getenv("BOOKING_FORM_URL") or DEFAULT_FORM_URL
    day = _booking_date()

    async with BookingClient(read_url=read_url, write_url=write_url) as client:
        availability = await client.get_availability(day)
        error = client.cache.last_error
    if error is not None:
        print(f"Error: {error.__class__.__name__}: {error}", file=sys.stderr)
        return 1

    print(f"Date: {day.isoformat()}")
    print(f"Reservations: {len(availability.reservations)}")
    for reservation in availability.reservations:
        print(f"- {reservation.time.strftime('%H:%M')}")
    if availability.timeline.fully_available:
        print("Blocked: none")
    for segment in availability.timeline.segments:
        print(f"Blocked: {segment.start_label} - {segment.end_label}")
    soonest = client.soonest_pickup()
    label = format_clock(minutes_since_midnight(soonest.time()))
    print(f"Soonest pickup: {soonest.date().isoformat()} {label}")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
