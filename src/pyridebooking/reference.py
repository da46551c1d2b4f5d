"""Rate table and service area reference data."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable

from .exceptions import ValidationError

REFERENCE_FILENAME = "reference.json"
SCHEMA_FILENAME = "reference.schema.json"
_REFERENCE_CACHE: Reference | None = None


@dataclass(frozen=True, slots=True)
class Destination:
    code: str
    name: str
    base_rate: int
    airport: bool = False


@dataclass(frozen=True, slots=True)
class RateTable:
    destinations: tuple[Destination, ...]
    included_passengers: int
    extra_passenger_fee: int

    def get(self, code: str | None) -> Destination | None:
        if not code:
            return None
        for destination in self.destinations:
            if destination.code == code:
                return destination
        return None


@dataclass(frozen=True, slots=True)
class ServiceArea:
    names: tuple[str, ...]

    def contains(self, address: str | None) -> bool:
        """Return True when the address mentions a known locality."""
        if not address:
            return False
        folded = address.casefold()
        return any(name.casefold() in folded for name in self.names)


@dataclass(frozen=True, slots=True)
class Reference:
    rates: RateTable
    service_area: ServiceArea


def _package_root() -> Traversable:
    return resources.files("pyridebooking")


def load_reference_schema() -> dict:
    schema_path = _package_root() / SCHEMA_FILENAME
    return json.loads(schema_path.read_text(encoding="utf-8"))


def _build_destination(data: dict) -> Destination:
    if not isinstance(data, dict):
        raise ValidationError("Destination entry must be a JSON object.")
    code = data.get("code")
    name = data.get("name")
    base_rate = data.get("base_rate")
    if not isinstance(code, str) or not code:
        raise ValidationError("Destination code must be a non-empty string.")
    if not isinstance(name, str) or not name:
        raise ValidationError("Destination name must be a non-empty string.")
    if isinstance(base_rate, bool) or not isinstance(base_rate, int) or base_rate < 0:
        raise ValidationError("Destination base_rate must be a non-negative integer.")
    return Destination(
        code=code,
        name=name,
        base_rate=base_rate,
        airport=data.get("airport") is True,
    )


def build_reference(data: dict) -> Reference:
    if not isinstance(data, dict):
        raise ValidationError("Reference data must be a JSON object.")
    missing = [
        key
        for key in ("included_passengers", "extra_passenger_fee", "destinations", "service_areas")
        if key not in data
    ]
    if missing:
        raise ValidationError(f"Reference data missing keys: {', '.join(missing)}.")
    destinations = data["destinations"]
    service_areas = data["service_areas"]
    if not isinstance(destinations, list) or not destinations:
        raise ValidationError("Reference destinations must be a non-empty list.")
    if not isinstance(service_areas, list):
        raise ValidationError("Reference service_areas must be a list.")
    if not all(isinstance(name, str) and name for name in service_areas):
        raise ValidationError("Reference service_areas must contain non-empty strings.")
    included = data["included_passengers"]
    fee = data["extra_passenger_fee"]
    if isinstance(included, bool) or not isinstance(included, int) or included < 1:
        raise ValidationError("included_passengers must be a positive integer.")
    if isinstance(fee, bool) or not isinstance(fee, int) or fee < 0:
        raise ValidationError("extra_passenger_fee must be a non-negative integer.")
    rates = RateTable(
        destinations=tuple(_build_destination(entry) for entry in destinations),
        included_passengers=included,
        extra_passenger_fee=fee,
    )
    return Reference(rates=rates, service_area=ServiceArea(names=tuple(service_areas)))


def load_reference() -> Reference:
    global _REFERENCE_CACHE
    if _REFERENCE_CACHE is not None:
        return _REFERENCE_CACHE
    path = _package_root() / REFERENCE_FILENAME
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError("Reference data is not valid JSON.") from exc
    _REFERENCE_CACHE = build_reference(data)
    return _REFERENCE_CACHE


def clear_reference_cache() -> None:
    """Clear cached reference data (used in tests)."""
    global _REFERENCE_CACHE
    _REFERENCE_CACHE = None
