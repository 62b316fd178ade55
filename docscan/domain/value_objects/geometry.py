"""Geometry value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class Point:
    """2D point in pixel space of a specific frame or canvas."""
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        """Calculate Euclidean distance to another point."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)


@dataclass(frozen=True, slots=True)
class Quadrilateral:
    """Four corners of a document, tagged by role.

    The corners are expected to form a convex polygon in the cyclic order
    top-left, top-right, bottom-right, bottom-left.
    """
    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    def __iter__(self) -> Iterator[Point]:
        """Allow unpacking: tl, tr, br, bl = quad"""
        yield self.top_left
        yield self.top_right
        yield self.bottom_right
        yield self.bottom_left

    @property
    def points(self) -> list[Point]:
        return [self.top_left, self.top_right, self.bottom_right, self.bottom_left]

    @property
    def area(self) -> float:
        """Calculate area using shoelace formula."""
        points = self.points + [self.top_left]  # Close the polygon
        area = 0.0
        for i in range(4):
            area += points[i].x * points[i + 1].y
            area -= points[i + 1].x * points[i].y
        return abs(area) / 2

    def edge_lengths(self) -> tuple[float, float, float, float]:
        """Return (top, bottom, left, right) edge lengths."""
        return (
            self.top_left.distance_to(self.top_right),
            self.bottom_left.distance_to(self.bottom_right),
            self.top_left.distance_to(self.bottom_left),
            self.top_right.distance_to(self.bottom_right),
        )

    def scale(self, factor: float) -> Quadrilateral:
        """Scale every corner about the origin."""
        return Quadrilateral(*(p * factor for p in self))

    def is_close_to(self, other: Quadrilateral, tolerance: float) -> bool:
        """Check that each corner is within tolerance of the same corner of other."""
        return all(
            mine.distance_to(theirs) <= tolerance
            for mine, theirs in zip(self, other)
        )

    @classmethod
    def from_bbox(cls, x: float, y: float, w: float, h: float) -> Quadrilateral:
        """Create quadrilateral from bounding box."""
        return cls(
            Point(x, y),
            Point(x + w, y),
            Point(x + w, y + h),
            Point(x, y + h)
        )
