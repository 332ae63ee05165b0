#!/usr/bin/env python3
# mercator_image/geodesy.py
"""
Geodesy utilities for mercator-image.
Spherical Mercator forward/inverse projection and XYZ tile indices.

Projected coordinates live on a square of side `world_size`: x grows
eastward from the antimeridian, y grows southward from the northern edge.
Called with the default world size of 1.0 the functions return the
unscaled unit-square position.
"""

import math
from typing import Tuple

__all__ = [
    "MAX_LAT",
    "lon2merc",
    "lat2merc",
    "merc2lon",
    "merc2lat",
    "clamp_lat",
    "latlon_to_tile_xy",
    "tile_xy_to_latlon",
    "tile_bounds",
]

# Web Mercator valid latitude limit
MAX_LAT = 85.05112878


def _div(a: float, b: float) -> float:
    """a / b with IEEE semantics: a zero divisor yields +-inf, or nan for 0 / 0."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a)
    return a / b


def lon2merc(lon: float, world_size: float = 1.0) -> float:
    """Project a longitude onto a world of `world_size` pixels."""
    return (lon + 180.0) / 360.0 * world_size


def lat2merc(lat: float, world_size: float = 1.0) -> float:
    """
    Project a latitude onto a world of `world_size` pixels.
    No clamping is applied: the north pole maps to -inf, the south pole to
    +inf, and latitudes beyond +-90 to nan. Never raises.
    """
    if abs(lat) > 90.0:
        return math.nan
    if abs(lat) == 90.0:
        return -math.copysign(math.inf, lat) * world_size
    lat_rad = math.radians(lat)
    # asinh(tan) == ln(tan + sec), without the cancellation near the south pole
    y = (1.0 - math.asinh(math.tan(lat_rad)) / math.pi) / 2.0
    return y * world_size


def merc2lon(x: float, world_size: float) -> float:
    """Inverse of lon2merc."""
    return _div(x, world_size) * 360.0 - 180.0


def merc2lat(y: float, world_size: float) -> float:
    """Inverse of lat2merc. Positions far outside the world saturate at +-90."""
    t = math.pi * (1 - 2 * _div(y, world_size))
    try:
        lat_rad = math.atan(math.sinh(t))
    except OverflowError:
        return math.copysign(90.0, t)
    return math.degrees(lat_rad)


def clamp_lat(lat: float) -> float:
    """Clamp latitude to Web Mercator valid range."""
    return max(min(lat, MAX_LAT), -MAX_LAT)


def latlon_to_tile_xy(lat: float, lon: float, zoom: int) -> Tuple[float, float]:
    """
    Convert lat/lon to fractional tile coordinates at a given zoom.
    Returns (x, y) tile coordinate floats.
    """
    n = 2.0 ** zoom
    return lon2merc(lon, n), lat2merc(clamp_lat(lat), n)


def tile_xy_to_latlon(x: float, y: float, zoom: int) -> Tuple[float, float]:
    """
    Convert tile coordinate to latitude/longitude (tile corner).
    Returns (lat, lon).
    """
    n = 2.0 ** zoom
    return merc2lat(y, n), merc2lon(x, n)


def tile_bounds(x: int, y: int, zoom: int) -> Tuple[float, float, float, float]:
    """
    Return bounding box (lon1, lat1, lon2, lat2) of a tile, west/north/east/south.
    """
    lat1, lon1 = tile_xy_to_latlon(x, y, zoom)
    lat2, lon2 = tile_xy_to_latlon(x + 1, y + 1, zoom)
    return lon1, lat1, lon2, lat2
