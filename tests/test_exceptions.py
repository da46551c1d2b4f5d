from datetime import date, time

from pyridebooking.exceptions import (
    NetworkError,
    PyRideBookingError,
    StoreError,
    SubmissionError,
    ValidationError,
)
from pyridebooking.models import BookingLeg, LegResult, SpecialRequirements


def _leg(kind: str) -> BookingLeg:
    return BookingLeg(
        kind=kind,  # type: ignore[arg-type]
        date=date(2026, 10, 17),
        time=time(10, 0),
        pickup="Mooresville",
        destination="CLT",
        passengers=2,
        requirements=SpecialRequirements(),
    )


def test_error_defaults() -> None:
    exc = PyRideBookingError("base error")
    assert exc.error_type == "unknown"
    assert exc.error_code is None
    assert exc.detail == "base error"
    assert exc.user_message is None


def test_error_detail_fallback() -> None:
    exc = StoreError(detail="short detail")
    assert str(exc) == "short detail"
    assert exc.detail == "short detail"
    assert exc.error_code == "store_error"


def test_error_overrides() -> None:
    exc = NetworkError(
        "network down",
        error_code="network_timeout",
        detail="timeout talking to the store",
        user_message="Network issue. Please try again later.",
    )
    assert exc.error_type == "network"
    assert exc.error_code == "network_timeout"
    assert exc.detail == "timeout talking to the store"
    assert exc.user_message == "Network issue. Please try again later."


def test_error_types_have_codes() -> None:
    assert NetworkError("nope").error_code == "network_error"
    assert ValidationError("nope").error_code == "validation_error"
    assert StoreError("nope").error_code == "store_error"
    assert SubmissionError("nope").error_code == "submission_failed"


def test_submission_error_partial() -> None:
    outbound = LegResult(leg=_leg("outbound"), ok=True)
    inbound = LegResult(leg=_leg("return"), ok=False, error="boom")

    partial = SubmissionError("failed", legs=(outbound, inbound))
    total = SubmissionError("failed", legs=(LegResult(leg=_leg("outbound"), ok=False),))

    assert partial.partial is True
    assert partial.legs == (outbound, inbound)
    assert total.partial is False
    assert isinstance(partial, PyRideBookingError)
