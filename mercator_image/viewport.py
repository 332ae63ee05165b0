#!/usr/bin/env python3
# mercator_image/viewport.py
"""
Fit a geographic bounding box into a fixed-size Mercator image.

The image is built from a *defining* bounding box and a pixel width/height.
A single world size is chosen so that the whole defining box is visible;
if the box's aspect ratio differs from the image's, the box is centred and
the image shows more than was asked for along one axis. That larger area
is the *visible* bounding box.
"""

from __future__ import annotations

import logging
import math

from mercator_image.bbox import BBox
from mercator_image.geodesy import lat2merc, lon2merc, merc2lat, merc2lon

__all__ = ["ViewportTransform"]

log = logging.getLogger(__name__)


def _ratio(size: int, span: float) -> float:
    """size / span with IEEE semantics: a zero span yields inf (or nan for size 0)."""
    if span == 0:
        return math.inf if size > 0 else math.nan
    return size / span


class ViewportTransform:
    """
    Immutable lon/lat -> pixel mapping for an image of `width` x `height`
    pixels that shows at least the given box. Satisfies CoordinateTransformer.
    """

    __slots__ = (
        "_width",
        "_height",
        "_defining",
        "_visible",
        "_world_size",
        "_sx",
        "_sy",
    )

    def __init__(
        self,
        lon1: float,
        lat1: float,
        lon2: float,
        lat2: float,
        width: int,
        height: int,
    ) -> None:
        self._width = int(width)
        self._height = int(height)

        # West <= east, north >= south
        box = BBox(float(lon1), float(lat1), float(lon2), float(lat2)).normalized()
        self._defining = box
        if box.is_degenerate:
            log.warning(
                "Degenerate bounding box %s (%.6f x %.6f deg); projections may not be finite",
                box.as_tuple(), box.width_deg, box.height_deg,
            )

        # Unscaled span decides the scale so the whole box fits
        xs = lon2merc(box.lon2) - lon2merc(box.lon1)
        ys = lat2merc(box.lat2) - lat2merc(box.lat1)
        self._world_size = min(_ratio(self._width, xs), _ratio(self._height, ys))

        # Top-left of the box at that scale, then centre whatever is left over
        sx = lon2merc(box.lon1, self._world_size)
        sy = lat2merc(box.lat1, self._world_size)
        dx = lon2merc(box.lon2, self._world_size) - sx
        dy = lat2merc(box.lat2, self._world_size) - sy
        if dx < self._width:
            sx -= (self._width - dx) / 2
        if dy < self._height:
            sy -= (self._height - dy) / 2
        self._sx = sx
        self._sy = sy

        self._visible = BBox(
            self.get_lon(0),
            self.get_lat(0),
            self.get_lon(self._width),
            self.get_lat(self._height),
        )
        log.debug(
            "Viewport %dx%d for %s: world_size=%.6f sx=%.3f sy=%.3f",
            self._width, self._height, box.as_tuple(), self._world_size, sx, sy,
        )

    @classmethod
    def from_bbox(cls, bbox: BBox, width: int, height: int) -> "ViewportTransform":
        return cls(bbox.lon1, bbox.lat1, bbox.lon2, bbox.lat2, width, height)

    # ------------- projection -------------

    def get_x(self, lon: float) -> float:
        return lon2merc(lon, self._world_size) - self._sx

    def get_y(self, lat: float) -> float:
        return lat2merc(lat, self._world_size) - self._sy

    def get_lon(self, x: float) -> float:
        """Longitude under image column x."""
        return merc2lon(self._sx + x, self._world_size)

    def get_lat(self, y: float) -> float:
        """Latitude under image row y."""
        return merc2lat(self._sy + y, self._world_size)

    # ------------- boxes -------------

    def defining_bounding_box(self) -> BBox:
        """The box this image was built from, normalized. May be smaller than the visible box."""
        return self._defining

    def visible_bounding_box(self) -> BBox:
        """
        The box actually covered by the image. Always contains the defining
        box and is larger along the axis that had slack.
        """
        return self._visible

    # ------------- accessors -------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def lon1(self) -> float:
        return self._defining.lon1

    @property
    def lat1(self) -> float:
        return self._defining.lat1

    @property
    def lon2(self) -> float:
        return self._defining.lon2

    @property
    def lat2(self) -> float:
        return self._defining.lat2

    @property
    def world_size(self) -> float:
        """Pixel size of the whole projected world at this image's scale."""
        return self._world_size

    @property
    def sx(self) -> float:
        """Projected x (at world_size) of the image's left edge."""
        return self._sx

    @property
    def sy(self) -> float:
        """Projected y (at world_size) of the image's top edge."""
        return self._sy

    def __repr__(self) -> str:
        return (
            f"ViewportTransform({self.lon1!r}, {self.lat1!r}, {self.lon2!r}, {self.lat2!r}, "
            f"width={self._width}, height={self._height})"
        )
