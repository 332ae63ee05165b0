#!/usr/bin/env python3
# mercator_image/tile.py
"""
A single XYZ map tile seen as a small Mercator image.

Tiles are addressed by (zoom, x, y) on the 2^zoom x 2^zoom grid, y counted
from the north. The tile's geographic box is cached and rebuilt whenever
any part of its address changes.

Also provides quad-tree helpers: parent/children, the tile containing a
point, and the tiles covering a box.
"""

from __future__ import annotations

import logging
import math
from typing import Iterator, List, Optional

from mercator_image.bbox import BBox
from mercator_image.geodesy import lat2merc, latlon_to_tile_xy, lon2merc, tile_bounds

__all__ = [
    "DEFAULT_TILE_SIZE",
    "TileTransform",
    "tile_at",
    "tiles_covering",
]

log = logging.getLogger(__name__)

DEFAULT_TILE_SIZE = 256


class TileTransform:
    """
    lon/lat -> pixel mapping local to one tile. Satisfies CoordinateTransformer.

    Mutable: zoom, x and y may be reassigned (or all at once via move_to).
    No internal locking; share an instance between threads only with
    external serialization.
    """

    def __init__(
        self,
        zoom: int,
        x: int,
        y: int,
        tile_width: int = DEFAULT_TILE_SIZE,
        tile_height: int = DEFAULT_TILE_SIZE,
    ) -> None:
        self._zoom = int(zoom)
        self._x = int(x)
        self._y = int(y)
        self.tile_width = tile_width
        self.tile_height = tile_height
        self._rebuild()

    # ------------- box -------------

    def _rebuild(self) -> None:
        self._lon1, self._lat1, self._lon2, self._lat2 = tile_bounds(self._x, self._y, self._zoom)
        log.debug("Tile %s -> (%.6f, %.6f, %.6f, %.6f)", self, self._lon1, self._lat1, self._lon2, self._lat2)

    def move_to(self, zoom: int, x: int, y: int) -> None:
        """Change the whole address and rebuild the box once."""
        self._zoom = int(zoom)
        self._x = int(x)
        self._y = int(y)
        self._rebuild()

    # ------------- projection -------------

    def get_x(self, lon: float) -> float:
        absx = lon2merc(lon, 2.0 ** self._zoom)
        return (absx - self._x) * self._tile_width

    def get_y(self, lat: float) -> float:
        absy = lat2merc(lat, 2.0 ** self._zoom)
        return (absy - self._y) * self._tile_height

    # ------------- address -------------

    @property
    def zoom(self) -> int:
        return self._zoom

    @zoom.setter
    def zoom(self, value: int) -> None:
        self._zoom = int(value)
        self._rebuild()

    @property
    def x(self) -> int:
        return self._x

    @x.setter
    def x(self, value: int) -> None:
        self._x = int(value)
        self._rebuild()

    @property
    def y(self) -> int:
        return self._y

    @y.setter
    def y(self, value: int) -> None:
        self._y = int(value)
        self._rebuild()

    # ------------- size -------------

    @property
    def tile_width(self) -> int:
        return self._tile_width

    @tile_width.setter
    def tile_width(self, value: int) -> None:
        self._tile_width = int(value)

    @property
    def tile_height(self) -> int:
        return self._tile_height

    @tile_height.setter
    def tile_height(self, value: int) -> None:
        self._tile_height = int(value)

    # ------------- geographic box -------------

    @property
    def lon1(self) -> float:
        """Western edge."""
        return self._lon1

    @property
    def lat1(self) -> float:
        """Northern edge."""
        return self._lat1

    @property
    def lon2(self) -> float:
        """Eastern edge."""
        return self._lon2

    @property
    def lat2(self) -> float:
        """Southern edge."""
        return self._lat2

    def bounding_box(self) -> BBox:
        return BBox(self._lon1, self._lat1, self._lon2, self._lat2)

    # ------------- quad-tree -------------

    def parent(self) -> Optional["TileTransform"]:
        """The tile one zoom level up that contains this one, or None at zoom 0."""
        if self._zoom <= 0:
            return None
        return TileTransform(self._zoom - 1, self._x // 2, self._y // 2, self._tile_width, self._tile_height)

    def children(self) -> List["TileTransform"]:
        """The four tiles at zoom + 1, NW, NE, SW, SE."""
        z = self._zoom + 1
        x0, y0 = self._x * 2, self._y * 2
        return [
            TileTransform(z, x0 + dx, y0 + dy, self._tile_width, self._tile_height)
            for dy in (0, 1)
            for dx in (0, 1)
        ]

    # ------------- identity -------------

    def __str__(self) -> str:
        return f"{self._zoom} {self._x} {self._y}"

    def __repr__(self) -> str:
        return (
            f"TileTransform(zoom={self._zoom}, x={self._x}, y={self._y}, "
            f"tile_width={self._tile_width}, tile_height={self._tile_height})"
        )


# -------------------------
# Grid helpers
# -------------------------

def _grid_index(value: float, n: int) -> int:
    return max(0, min(n - 1, int(math.floor(value))))


def tile_at(
    lon: float,
    lat: float,
    zoom: int,
    tile_width: int = DEFAULT_TILE_SIZE,
    tile_height: int = DEFAULT_TILE_SIZE,
) -> TileTransform:
    """Return the tile at `zoom` that contains lon/lat. Latitude is clamped to the Mercator limit."""
    xt, yt = latlon_to_tile_xy(lat, lon, zoom)
    n = 2 ** zoom
    return TileTransform(zoom, _grid_index(xt, n), _grid_index(yt, n), tile_width, tile_height)


def tiles_covering(
    bbox: BBox,
    zoom: int,
    tile_width: int = DEFAULT_TILE_SIZE,
    tile_height: int = DEFAULT_TILE_SIZE,
) -> Iterator[TileTransform]:
    """
    Yield every tile at `zoom` that intersects bbox, row by row from the
    north-west. A box edge lying exactly on a tile boundary does not pull
    in the neighbouring tile.
    """
    box = bbox.normalized()
    n = 2 ** zoom
    x_min, y_min = latlon_to_tile_xy(box.lat1, box.lon1, zoom)
    x_max, y_max = latlon_to_tile_xy(box.lat2, box.lon2, zoom)

    x_start = _grid_index(x_min, n)
    y_start = _grid_index(y_min, n)
    x_end = max(x_start, _grid_index(math.ceil(x_max) - 1, n))
    y_end = max(y_start, _grid_index(math.ceil(y_max) - 1, n))

    for ty in range(y_start, y_end + 1):
        for tx in range(x_start, x_end + 1):
            yield TileTransform(zoom, tx, ty, tile_width, tile_height)
