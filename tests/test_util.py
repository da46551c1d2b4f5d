from datetime import UTC, date, datetime, time

import pytest

from pyridebooking.exceptions import ValidationError
from pyridebooking.util import (
    format_clock,
    is_valid_flight_number,
    mask_phone,
    parse_reservation_date,
    parse_reservation_time,
    soonest_pickup,
)


def test_parse_reservation_time_discards_placeholder_date() -> None:
    assert parse_reservation_time("1899-12-30T15:17:11.000Z") == time(15, 17)


def test_parse_reservation_time_accepts_clock_values() -> None:
    assert parse_reservation_time("09:05") == time(9, 5)
    assert parse_reservation_time(" 18:30:00 ") == time(18, 30)


@pytest.mark.parametrize("value", ["", "25:00", "12:75", "not a time"])
def test_parse_reservation_time_invalid(value: str) -> None:
    with pytest.raises(ValidationError):
        parse_reservation_time(value)


def test_parse_reservation_date() -> None:
    assert parse_reservation_date("2026-10-20") == date(2026, 10, 20)
    assert parse_reservation_date("2026-10-20T00:00:00.000Z") == date(2026, 10, 20)
    with pytest.raises(ValidationError):
        parse_reservation_date("2026-13-01")


def test_format_clock() -> None:
    assert format_clock(0) == "12:00 AM"
    assert format_clock(720) == "12:00 PM"
    assert format_clock(780) == "1:00 PM"
    assert format_clock(1005) == "4:45 PM"
    assert format_clock(1440) == "11:59 PM"


def test_is_valid_flight_number() -> None:
    assert is_valid_flight_number("AA1234")
    assert is_valid_flight_number("aa 1234")
    assert is_valid_flight_number("DL-45A")
    assert is_valid_flight_number("U2 9")
    assert not is_valid_flight_number("A1")
    assert not is_valid_flight_number("ABCD12345")


def test_mask_phone() -> None:
    assert mask_phone("704-555-1234") == "******1234"
    assert mask_phone("12") == "**"
    assert mask_phone(None) == "***"  # type: ignore[arg-type]


def test_soonest_pickup_rounds_up_to_quarter_hour() -> None:
    assert soonest_pickup(datetime(2026, 10, 16, 9, 7, tzinfo=UTC)) == datetime(
        2026, 10, 16, 12, 15, tzinfo=UTC
    )
    assert soonest_pickup(datetime(2026, 10, 16, 9, 0, tzinfo=UTC)) == datetime(
        2026, 10, 16, 12, 0, tzinfo=UTC
    )
    assert soonest_pickup(datetime(2026, 10, 16, 9, 50, 30, tzinfo=UTC)) == datetime(
        2026, 10, 16, 13, 0, tzinfo=UTC
    )


def test_soonest_pickup_crosses_midnight() -> None:
    assert soonest_pickup(datetime(2026, 10, 16, 21, 50, tzinfo=UTC)) == datetime(
        2026, 10, 17, 1, 0, tzinfo=UTC
    )
