"""Well-Known-Text point encoding and decoding.

Points are always written longitude first, ``POINT(<lon> <lat>)``, which is
the order PostGIS and the proximity queries downstream expect.
"""

from __future__ import annotations

import re
from decimal import Decimal

from catalog_ingest.common.errors import MalformedWKT

POINT_RE = re.compile(r"POINT\(([-+]?[0-9]*\.?[0-9]+) ([-+]?[0-9]*\.?[0-9]+)\)")


def format_coordinate(value: float) -> str:
    """Shortest exact decimal for ``value``, without exponent or trailing zeros."""
    # repr() gives the shortest round-tripping digits; Decimal drops the exponent.
    digits = Decimal(repr(float(value))).normalize()
    return format(digits, "f")


def encode_point(longitude: float, latitude: float) -> str:
    return f"POINT({format_coordinate(longitude)} {format_coordinate(latitude)})"


def decode_point(wkt: str) -> tuple[str, str]:
    """Return the literal ``(longitude, latitude)`` substrings of a WKT point."""
    match = POINT_RE.fullmatch(wkt or "")
    if match is None:
        raise MalformedWKT(f"invalid WKT point: {wkt!r}")
    return match.group(1), match.group(2)
