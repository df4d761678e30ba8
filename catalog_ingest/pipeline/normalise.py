"""Normalise geoportal records into catalog specialists.

Rules applied to each record:

* location: WGS84 coordinates encoded as ``POINT(<lon> <lat>)``
* address: the source address line, or one assembled from its components
* telephone: landline and mobile joined with ``", "``; empty parts are kept,
  so a record without a mobile number yields ``"<phone>, "``
* staff: role annotations stripped from the roster
* insurer flags: ``True`` only for the exact affirmative token
* opening hours: passed through, empty meaning closed
"""

from __future__ import annotations

from functools import reduce

from catalog_ingest.common.constants import (
    AFFIRMATIVE_TOKEN,
    DEFAULT_COUNTRY,
    STAFF_ROLE_SUFFIXES,
    WGS84_EPSG,
)
from catalog_ingest.common.models import RawSourceRecord, Specialist
from catalog_ingest.common.wkt import encode_point
from catalog_ingest.pipeline.coordinates import resolve_wgs84


def build_location(raw: RawSourceRecord, source_epsg: int = WGS84_EPSG) -> str:
    lat, lon = resolve_wgs84(raw.latitude, raw.longitude, source_epsg)
    return encode_point(lon, lat)


def build_address(raw: RawSourceRecord, country: str = DEFAULT_COUNTRY) -> str:
    if raw.address_line:
        return raw.address_line
    return f"{raw.street_name} {raw.building_number}, {raw.postal_code} {raw.municipality}, {country}"


def join_phones(raw: RawSourceRecord) -> str:
    return f"{raw.phone}, {raw.cellphone}"


def strip_role_suffix(staff: str, suffix: str) -> str:
    return staff.replace(suffix, "")


def clean_staff_names(staff: str, suffixes: tuple[str, ...] = STAFF_ROLE_SUFFIXES) -> str:
    return reduce(strip_role_suffix, suffixes, staff)


def is_affirmative(value: str) -> bool:
    return value == AFFIRMATIVE_TOKEN


def weekday_hours(raw: RawSourceRecord) -> dict[str, str]:
    return {
        "monday": raw.monday_hours,
        "tuesday": raw.tuesday_hours,
        "wednesday": raw.wednesday_hours,
        "thursday": raw.thursday_hours,
        "friday": raw.friday_hours,
        "saturday": raw.saturday_hours,
        "sunday": raw.sunday_hours,
    }


def normalise_record(
    raw: RawSourceRecord,
    specialty_id: int,
    *,
    country: str = DEFAULT_COUNTRY,
    source_epsg: int = WGS84_EPSG,
) -> Specialist:
    return Specialist(
        name=raw.name,
        specialty_id=specialty_id,
        location_wkt=build_location(raw, source_epsg),
        address=build_address(raw, country),
        telephone=join_phones(raw),
        email=raw.email,
        staff=clean_staff_names(raw.staff),
        union=is_affirmative(raw.union),
        vszp=is_affirmative(raw.vszp),
        dovera=is_affirmative(raw.dovera),
        **weekday_hours(raw),
    )
