#!/usr/bin/env python3
# mercator_image/bbox.py
"""Geographic bounding box value: west/north/east/south degrees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

__all__ = ["BBox"]


@dataclass(frozen=True)
class BBox:
    """
    A lon/lat box given as (lon1, lat1, lon2, lat2).
    lon1/lat1 is the north-west corner, lon2/lat2 the south-east one
    once normalized; a raw box may carry them in any order.
    """

    lon1: float
    lat1: float
    lon2: float
    lat2: float

    # ------------- construction -------------

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "BBox":
        lon1, lat1, lon2, lat2 = (float(v) for v in values)
        return cls(lon1, lat1, lon2, lat2)

    @classmethod
    def parse(cls, text: str) -> "BBox":
        """Parse "lon1,lat1,lon2,lat2" as accepted on the command line."""
        parts = [p for p in text.replace(" ", "").split(",") if p]
        if len(parts) != 4:
            raise ValueError(f"expected 4 comma-separated numbers, got {text!r}")
        return cls.from_tuple(parts)

    # ------------- derived -------------

    def normalized(self) -> "BBox":
        """Return a copy with west <= east and north >= south."""
        lon1, lon2 = (self.lon1, self.lon2) if self.lon1 <= self.lon2 else (self.lon2, self.lon1)
        lat1, lat2 = (self.lat1, self.lat2) if self.lat1 >= self.lat2 else (self.lat2, self.lat1)
        return BBox(lon1, lat1, lon2, lat2)

    @property
    def width_deg(self) -> float:
        return abs(self.lon2 - self.lon1)

    @property
    def height_deg(self) -> float:
        return abs(self.lat1 - self.lat2)

    @property
    def is_degenerate(self) -> bool:
        """True when the box has no extent along at least one axis."""
        return self.width_deg == 0 or self.height_deg == 0

    def contains(self, other: "BBox", tol: float = 0.0) -> bool:
        """Inclusive containment of `other`, both boxes taken normalized."""
        a = self.normalized()
        b = other.normalized()
        return (
            a.lon1 <= b.lon1 + tol
            and a.lon2 >= b.lon2 - tol
            and a.lat1 >= b.lat1 - tol
            and a.lat2 <= b.lat2 + tol
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.lon1, self.lat1, self.lon2, self.lat2
