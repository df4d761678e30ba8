"""Coordinate validation and reprojection to WGS84."""

from __future__ import annotations

import math
from functools import lru_cache

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError

from catalog_ingest.common.constants import WGS84_EPSG
from catalog_ingest.common.errors import MalformedWKT


def _valid_lat_lon(lat: float, lon: float) -> bool:
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


@lru_cache(maxsize=8)
def _wgs84_transformer(source_epsg: int) -> Transformer:
    return Transformer.from_crs(CRS.from_epsg(source_epsg), CRS.from_epsg(WGS84_EPSG), always_xy=True)


def _transform_to_wgs84(lat: float, lon: float, source_epsg: int) -> tuple[float, float]:
    if source_epsg == WGS84_EPSG:
        return lat, lon
    try:
        transformed_lon, transformed_lat = _wgs84_transformer(source_epsg).transform(lon, lat)
    except (CRSError, ProjError) as exc:
        raise MalformedWKT(f"cannot reproject EPSG:{source_epsg} coordinates ({lat}, {lon})") from exc
    return transformed_lat, transformed_lon


def resolve_wgs84(lat: float, lon: float, source_epsg: int = WGS84_EPSG) -> tuple[float, float]:
    """Return ``(lat, lon)`` in WGS84, raising MalformedWKT when out of range."""
    resolved_lat, resolved_lon = _transform_to_wgs84(lat, lon, source_epsg)
    if not _valid_lat_lon(resolved_lat, resolved_lon):
        raise MalformedWKT(f"coordinates out of range: lat={resolved_lat}, lon={resolved_lon}")
    return resolved_lat, resolved_lon
