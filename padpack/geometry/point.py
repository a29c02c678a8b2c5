"""Point / Rect value types shared by the kernel and the placer."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """An immutable (x, y) pair with vector operations."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point) -> float:
        """Z component of the 2D cross product (positive = other is CCW)."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalized(self) -> Point:
        n = self.length()
        if n == 0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Point(self.x / n, self.y / n)

    def rotated(self, degrees: float) -> Point:
        """Rotate counter-clockwise about the origin.

        Quarter turns are exact so pad centres stay on the input grid.
        """
        quarter = degrees / 90.0
        if quarter == int(quarter):
            q = int(quarter) % 4
            if q == 0:
                return Point(self.x, self.y)
            if q == 1:
                return Point(-self.y, self.x)
            if q == 2:
                return Point(-self.x, -self.y)
            return Point(self.y, -self.x)
        rad = math.radians(degrees)
        c, s = math.cos(rad), math.sin(rad)
        return Point(self.x * c - self.y * s, self.x * s + self.y * c)

    def almost_equals(self, other: Point, eps: float = 1e-9) -> bool:
        return abs(self.x - other.x) < eps and abs(self.y - other.y) < eps

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


Segment = tuple[Point, Point]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its extents."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> Rect:
        return cls(
            center.x - width / 2, center.y - height / 2,
            center.x + width / 2, center.y + height / 2,
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def expanded(self, margin: float) -> Rect:
        return Rect(
            self.min_x - margin, self.min_y - margin,
            self.max_x + margin, self.max_y + margin,
        )

    def corners(self) -> list[Point]:
        """Corners in counter-clockwise order starting bottom-left."""
        return [
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        ]

    def edges(self) -> list[Segment]:
        c = self.corners()
        return [(c[i], c[(i + 1) % 4]) for i in range(4)]

    def contains_point(self, p: Point, eps: float = 0.0) -> bool:
        return (self.min_x - eps <= p.x <= self.max_x + eps
                and self.min_y - eps <= p.y <= self.max_y + eps)

    def contains_rect(self, other: Rect, eps: float = 1e-9) -> bool:
        return (other.min_x >= self.min_x - eps and other.max_x <= self.max_x + eps
                and other.min_y >= self.min_y - eps and other.max_y <= self.max_y + eps)

    def union(self, other: Rect) -> Rect:
        return Rect(
            min(self.min_x, other.min_x), min(self.min_y, other.min_y),
            max(self.max_x, other.max_x), max(self.max_y, other.max_y),
        )
