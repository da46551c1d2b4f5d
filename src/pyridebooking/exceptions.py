"""Library exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import LegResult


class PyRideBookingError(Exception):
    """Base exception for the library."""

    error_type = "unknown"
    default_error_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        detail: str | None = None,
        user_message: str | None = None,
    ) -> None:
        text = message if message is not None else (detail or "")
        super().__init__(text)
        self.error_code = error_code if error_code is not None else self.default_error_code
        self.detail = detail if detail is not None else text
        self.user_message = user_message


class ValidationError(PyRideBookingError):
    """Raised when inputs to a library call fail validation."""

    error_type = "validation"
    default_error_code = "validation_error"


class NetworkError(PyRideBookingError):
    """Raised when network communication with the reservation store fails."""

    error_type = "network"
    default_error_code = "network_error"


class StoreError(PyRideBookingError):
    """Raised when the reservation store returns an error or malformed data."""

    error_type = "store"
    default_error_code = "store_error"


class SubmissionError(PyRideBookingError):
    """Raised when one or more legs of a booking could not be written."""

    error_type = "submission"
    default_error_code = "submission_failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        legs: tuple[LegResult, ...] = (),
        error_code: str | None = None,
        detail: str | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            detail=detail,
            user_message=user_message,
        )
        self.legs = legs

    @property
    def partial(self) -> bool:
        """True when at least one leg was written before the failure."""
        return any(leg.ok for leg in self.legs)
