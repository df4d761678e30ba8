"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from catalog_ingest.common.constants import WEEKDAYS
from catalog_ingest.common.errors import DecodeError

# Geoportal property key for each RawSourceRecord string field.
STRING_FIELD_KEYS = {
    "identifier": "identifikator",
    "kpzs": "kpzs",
    "specialization": "druh_zariadenia",
    "name": "nazov_zariadenia",
    "address_line": "addressline",
    "municipality": "municipality",
    "building_number": "buildingnumber",
    "county": "county",
    "street_name": "streetname",
    "postal_code": "postalcode",
    "email": "email",
    "cellphone": "mobil",
    "phone": "telefon",
    "staff": "odborni_zastupcovia",
    "monday_hours": "pondelok",
    "tuesday_hours": "utorok",
    "wednesday_hours": "streda",
    "thursday_hours": "stvrtok",
    "friday_hours": "piatok",
    "saturday_hours": "sobota",
    "sunday_hours": "nedela",
    "absence_from": "nepritomnost_od",
    "absence_to": "nepritomnost_do",
    "info": "info",
    "union": "union",
    "vszp": "vszp",
    "dovera": "dovera",
}


def _as_str(properties: Mapping[str, Any], key: str) -> str:
    value = properties.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"property {key!r} must be a string, got {type(value).__name__}")
    return value


def _as_int(properties: Mapping[str, Any], key: str) -> int:
    value = properties.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"property {key!r} must be an integer, got {value!r}")
    return value


def _as_float(properties: Mapping[str, Any], key: str) -> float:
    value = properties.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"property {key!r} must be a number, got {value!r}")
    return float(value)


def _as_bbox(properties: Mapping[str, Any]) -> tuple[float, ...]:
    value = properties.get("bbox")
    if value is None:
        return ()
    if not isinstance(value, list):
        raise DecodeError(f"property 'bbox' must be a list, got {value!r}")
    try:
        return tuple(float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"property 'bbox' must hold numbers, got {value!r}") from exc


@dataclass(frozen=True)
class RawSourceRecord:
    """One geoportal feature, before normalisation."""

    id: int = 0
    identifier: str = ""
    kpzs: str = ""
    specialization: str = ""
    name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    address_line: str = ""
    municipality: str = ""
    building_number: str = ""
    county: str = ""
    street_name: str = ""
    postal_code: str = ""
    email: str = ""
    cellphone: str = ""
    phone: str = ""
    staff: str = ""
    monday_hours: str = ""
    tuesday_hours: str = ""
    wednesday_hours: str = ""
    thursday_hours: str = ""
    friday_hours: str = ""
    saturday_hours: str = ""
    sunday_hours: str = ""
    absence_from: str = ""
    absence_to: str = ""
    info: str = ""
    union: str = ""
    vszp: str = ""
    dovera: str = ""
    bbox: tuple[float, ...] = ()

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "RawSourceRecord":
        if not isinstance(properties, Mapping):
            raise DecodeError(f"feature properties must be an object, got {type(properties).__name__}")
        values: dict[str, Any] = {
            attr: _as_str(properties, key) for attr, key in STRING_FIELD_KEYS.items()
        }
        values["id"] = _as_int(properties, "id")
        values["latitude"] = _as_float(properties, "poloha_lat")
        values["longitude"] = _as_float(properties, "poloha_lon")
        values["bbox"] = _as_bbox(properties)
        return cls(**values)


@dataclass(frozen=True)
class Specialty:
    name: str
    description: str = ""
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Specialist:
    """A catalog specialist.

    ``staff`` and the insurer flags are derived from the source record but are
    not persisted by the catalog store.
    """

    name: str
    specialty_id: int
    location_wkt: str
    address: str = ""
    telephone: str = ""
    email: str = ""
    monday: str = ""
    tuesday: str = ""
    wednesday: str = ""
    thursday: str = ""
    friday: str = ""
    saturday: str = ""
    sunday: str = ""
    id: int | None = None
    staff: str = field(default="", compare=False)
    union: bool = field(default=False, compare=False)
    vszp: bool = field(default=False, compare=False)
    dovera: bool = field(default=False, compare=False)

    def opening_hours(self) -> dict[str, str]:
        return {day: getattr(self, day) for day in WEEKDAYS}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
