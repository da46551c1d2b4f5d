"""Seat capacity and advisory quotes."""

from __future__ import annotations

from .const import BASE_CAPACITY
from .models import SpecialRequirements
from .reference import RateTable, load_reference


def capacity(requirements: SpecialRequirements | None = None) -> int:
    """Return the number of passenger seats left for the given requirements.

    A wheelchair and a car seat share one reserved seat; checked bags take a
    full seat of their own.
    """
    if requirements is None:
        requirements = SpecialRequirements()
    seats = BASE_CAPACITY
    if requirements.wheelchair or requirements.car_seat:
        seats -= 1
    if requirements.checked_bags:
        seats -= 1
    return max(1, seats)


def quote(
    destination: str | None,
    passengers: int,
    *,
    rates: RateTable | None = None,
) -> int | None:
    """Return a non-binding price in whole dollars, or None when unavailable.

    Unknown destinations have no quote; the customer confirms by phone.
    """
    table = rates if rates is not None else load_reference().rates
    entry = table.get(destination)
    if entry is None:
        return None
    extra = max(0, passengers - table.included_passengers)
    return entry.base_rate + extra * table.extra_passenger_fee
