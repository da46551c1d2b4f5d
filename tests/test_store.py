from __future__ import annotations

import logging
from datetime import date, time
from typing import Any

import aiohttp
import pytest

from pyridebooking.exceptions import NetworkError, StoreError, ValidationError
from pyridebooking.models import BookingLeg, Reservation, SpecialRequirements
from pyridebooking.store import Store
from pyridebooking.store.const import (
    FIELD_AIRPORT_PICKUP,
    FIELD_DATE,
    FIELD_OTHER_REQUIREMENT,
    FIELD_PASSENGERS,
    FIELD_REQUIREMENTS,
    FIELD_TIME,
    REQUIREMENT_CAR_SEAT,
    REQUIREMENT_OTHER,
    REQUIREMENT_WHEELCHAIR,
)


class _DummySession:
    def request(self, *args, **kwargs):
        raise RuntimeError("Session should not be used in these tests.")


class _FakeResponse:
    def __init__(
        self,
        payload: Any = None,
        *,
        status: int = 200,
        text_data: str = "",
        json_error: Exception | None = None,
    ) -> None:
        self.status = status
        self._payload = payload
        self._text_data = text_data
        self._json_error = json_error

    async def json(self, **kwargs: Any) -> Any:
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    async def text(self) -> str:
        return self._text_data


class _FakeRequestContext:
    def __init__(self, response: _FakeResponse) -> None:
        self._response = response

    async def __aenter__(self) -> _FakeResponse:
        return self._response

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _SequenceSession:
    def __init__(self, responses: list[object]) -> None:
        self._responses = responses
        self.calls: list[dict[str, Any]] = []
        self._index = 0

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeRequestContext:
        self.calls.append({"method": method, "url": url, "kwargs": kwargs})
        response = self._responses[self._index]
        self._index += 1
        if isinstance(response, Exception):
            raise response
        return _FakeRequestContext(response)  # type: ignore[arg-type]


def _store(session: object | None = None, **kwargs: Any) -> Store:
    return Store(
        session or _DummySession(),  # type: ignore[arg-type]
        read_url="https://example/reservations",
        write_url="https://example/form",
        **kwargs,
    )


def _leg(**overrides: Any) -> BookingLeg:
    values: dict[str, Any] = {
        "kind": "outbound",
        "date": date(2026, 10, 17),
        "time": time(9, 5),
        "pickup": "123 Main St, Mooresville",
        "destination": "CLT",
        "passengers": 3,
        "requirements": SpecialRequirements(),
        "name": "Sam Rider",
        "phone": "704-555-0199",
        "email": "sam@example.com",
    }
    values.update(overrides)
    return BookingLeg(**values)


def test_map_reservation_list() -> None:
    store = _store()
    payload = [
        {"date": "2026-10-17T04:00:00.000Z", "time": "1899-12-30T15:00:00.000Z"},
        {"date": "2026-10-18", "time": "09:30"},
        {"date": "2026-10-18", "time": None},
        {"date": "not a date", "time": "09:30"},
        {"date": 20261018, "time": "09:30"},
        "garbage",
    ]

    assert store._map_reservation_list(payload) == [
        Reservation(date(2026, 10, 17), time(15, 0)),
        Reservation(date(2026, 10, 18), time(9, 30)),
    ]


def test_map_reservation_list_empty_payload() -> None:
    assert _store()._map_reservation_list([]) == []


def test_map_reservation_list_rejects_null_payload() -> None:
    with pytest.raises(StoreError):
        _store()._map_reservation_list(None)


def test_map_reservation_list_logs_skipped_rows(caplog: pytest.LogCaptureFixture) -> None:
    payload = [
        "garbage",
        {"date": "2026-10-18", "time": None},
        {"date": "2026-10-18", "time": "09:30"},
    ]

    with caplog.at_level(logging.WARNING, logger="pyridebooking.store.sheets"):
        reservations = _store()._map_reservation_list(payload)

    assert reservations == [Reservation(date(2026, 10, 18), time(9, 30))]
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "not an object" in warnings[0].getMessage()


def test_map_reservation_list_rejects_non_list() -> None:
    with pytest.raises(StoreError):
        _store()._map_reservation_list({"date": "2026-10-17"})


@pytest.mark.asyncio
async def test_list_reservations_reads_endpoint() -> None:
    session = _SequenceSession([_FakeResponse([{"date": "2026-10-17", "time": "15:00"}])])
    store = _store(session)

    reservations = await store.list_reservations()

    assert reservations == [Reservation(date(2026, 10, 17), time(15, 0))]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://example/reservations"
    assert call["kwargs"]["headers"]["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_list_reservations_null_body() -> None:
    store = _store(_SequenceSession([_FakeResponse(None)]))

    with pytest.raises(StoreError):
        await store.list_reservations()


@pytest.mark.asyncio
async def test_list_reservations_http_error() -> None:
    store = _store(_SequenceSession([_FakeResponse(status=500)]))

    with pytest.raises(StoreError) as excinfo:
        await store.list_reservations()

    assert excinfo.value.error_code == "store_status"


@pytest.mark.asyncio
async def test_list_reservations_invalid_json() -> None:
    store = _store(_SequenceSession([_FakeResponse(json_error=ValueError("bad"))]))

    with pytest.raises(StoreError):
        await store.list_reservations()


@pytest.mark.asyncio
async def test_list_reservations_network_error() -> None:
    store = _store(_SequenceSession([aiohttp.ClientConnectionError("boom")]))

    with pytest.raises(NetworkError):
        await store.list_reservations()


@pytest.mark.asyncio
async def test_reads_are_retried() -> None:
    session = _SequenceSession([TimeoutError(), _FakeResponse([])])
    store = _store(session, retry_count=1)

    assert await store.list_reservations() == []
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_writes_are_not_retried() -> None:
    session = _SequenceSession([aiohttp.ClientConnectionError("boom"), _FakeResponse()])
    store = _store(session, retry_count=3)

    with pytest.raises(NetworkError):
        await store.append_booking(_leg())
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_append_booking_posts_form() -> None:
    session = _SequenceSession([_FakeResponse(text_data="ok")])
    store = _store(session)

    await store.append_booking(_leg())

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://example/form"
    assert isinstance(call["kwargs"]["data"], aiohttp.FormData)


def test_form_fields() -> None:
    leg = _leg(
        requirements=SpecialRequirements(wheelchair=True, car_seat=True, other="Service dog"),
        airport_trip=True,
        flight_number="AA1234",
    )

    fields = _store()._form_fields(leg)

    assert (FIELD_DATE, "2026-10-17") in fields
    assert (FIELD_TIME, "09:05") in fields
    assert (FIELD_PASSENGERS, "3") in fields
    assert (FIELD_AIRPORT_PICKUP, "Yes") in fields
    assert [value for key, value in fields if key == FIELD_REQUIREMENTS] == [
        REQUIREMENT_WHEELCHAIR,
        REQUIREMENT_CAR_SEAT,
        REQUIREMENT_OTHER,
    ]
    assert (FIELD_OTHER_REQUIREMENT, "Service dog") in fields


def test_form_fields_checked_bags_use_other_option() -> None:
    bags_only = _store()._form_fields(
        _leg(requirements=SpecialRequirements(checked_bags=True))
    )
    bags_and_other = _store()._form_fields(
        _leg(requirements=SpecialRequirements(checked_bags=True, other="Service dog"))
    )

    assert [value for key, value in bags_only if key == FIELD_REQUIREMENTS] == [REQUIREMENT_OTHER]
    assert (FIELD_OTHER_REQUIREMENT, "Checked bags") in bags_only
    assert [value for key, value in bags_and_other if key == FIELD_REQUIREMENTS] == [
        REQUIREMENT_OTHER
    ]
    assert (FIELD_OTHER_REQUIREMENT, "Checked bags; Service dog") in bags_and_other


def test_form_fields_without_requirements() -> None:
    fields = _store()._form_fields(_leg())

    assert (FIELD_AIRPORT_PICKUP, "No") in fields
    assert all(key != FIELD_REQUIREMENTS for key, _ in fields)
    assert all(key != FIELD_OTHER_REQUIREMENT for key, _ in fields)


def test_store_requires_session() -> None:
    with pytest.raises(ValidationError):
        Store(None)  # type: ignore[arg-type]


@pytest.mark.parametrize("url", ["", "   ", "example.com/form"])
def test_store_rejects_bad_urls(url: str) -> None:
    with pytest.raises(ValidationError):
        Store(
            _DummySession(),  # type: ignore[arg-type]
            read_url="https://example/reservations",
            write_url=url,
        )


def test_store_default_urls() -> None:
    store = Store(_DummySession())  # type: ignore[arg-type]
    assert store.read_url.startswith("https://script.google.com/")
    assert store.write_url.startswith("https://docs.google.com/forms/")
