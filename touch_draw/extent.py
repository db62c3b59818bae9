"""Axis-aligned extent helpers.

Extents are ``(min_x, min_y, max_x, max_y)`` tuples in map units.
"""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from .types import Coordinate, Extent


def create_empty() -> Extent:
    return math.inf, math.inf, -math.inf, -math.inf


def bounding_extent(coordinates: Iterable[Coordinate]) -> Extent:
    min_x, min_y, max_x, max_y = create_empty()
    for x, y in coordinates:
        min_x = min(min_x, x)
        min_y = min(min_y, y)
        max_x = max(max_x, x)
        max_y = max(max_y, y)
    return min_x, min_y, max_x, max_y


def contains_coordinate(extent: Extent, coordinate: Coordinate) -> bool:
    x, y = coordinate
    return extent[0] <= x <= extent[2] and extent[1] <= y <= extent[3]


def intersects(a: Extent, b: Extent) -> bool:
    return a[0] <= b[2] and a[2] >= b[0] and a[1] <= b[3] and a[3] >= b[1]


def is_empty(extent: Extent) -> bool:
    """Return ``True`` for inverted extents. Zero-width or zero-height extents are not empty."""

    return extent[2] < extent[0] or extent[3] < extent[1]


def get_size(extent: Extent) -> Tuple[float, float]:
    return extent[2] - extent[0], extent[3] - extent[1]


def get_diagonal_length(extent: Extent) -> float:
    return math.hypot(*get_size(extent))


def get_center(extent: Extent) -> Coordinate:
    return (extent[0] + extent[2]) / 2, (extent[1] + extent[3]) / 2


def buffer(extent: Extent, value: float) -> Extent:
    return extent[0] - value, extent[1] - value, extent[2] + value, extent[3] + value


def get_bottom_left(extent: Extent) -> Coordinate:
    return extent[0], extent[1]


def get_bottom_right(extent: Extent) -> Coordinate:
    return extent[2], extent[1]


def get_top_left(extent: Extent) -> Coordinate:
    return extent[0], extent[3]


def get_top_right(extent: Extent) -> Coordinate:
    return extent[2], extent[3]


def equals(a: Extent, b: Extent) -> bool:
    return tuple(a) == tuple(b)
