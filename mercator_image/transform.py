#!/usr/bin/env python3
# mercator_image/transform.py
"""
Shared lon/lat -> pixel capability.

ViewportTransform and TileTransform share no state, only this behaviour,
so it is a structural Protocol rather than a base class. Rendering code
takes a CoordinateTransformer and never needs to know which one it holds.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Tuple, runtime_checkable

import numpy as np

__all__ = [
    "CoordinateTransformer",
    "project",
    "project_points",
]


@runtime_checkable
class CoordinateTransformer(Protocol):
    """Anything that maps a longitude to x and a latitude to y in pixels."""

    def get_x(self, lon: float) -> float:
        ...

    def get_y(self, lat: float) -> float:
        ...


def project(transformer: CoordinateTransformer, lon: float, lat: float) -> Tuple[float, float]:
    """Project a single lon/lat pair to (x, y)."""
    return transformer.get_x(lon), transformer.get_y(lat)


def project_points(
    transformer: CoordinateTransformer,
    lons: Iterable[float],
    lats: Iterable[float],
) -> np.ndarray:
    """
    Project a sequence of coordinates, e.g. a polyline, to an (n, 2) float array
    of pixel positions. lons and lats must have the same length.

    Each point goes through transformer.get_x / get_y one at a time, so any
    CoordinateTransformer works; numpy only holds the result.
    """
    lon_arr = np.asarray(list(lons), dtype=np.float64)
    lat_arr = np.asarray(list(lats), dtype=np.float64)
    if lon_arr.shape != lat_arr.shape:
        raise ValueError(f"lons and lats differ in length: {lon_arr.size} != {lat_arr.size}")

    xs = np.fromiter((transformer.get_x(v) for v in lon_arr.tolist()), dtype=np.float64, count=lon_arr.size)
    ys = np.fromiter((transformer.get_y(v) for v in lat_arr.tolist()), dtype=np.float64, count=lat_arr.size)
    return np.column_stack((xs, ys))
