from __future__ import annotations

from typing import Sequence, Tuple

Coordinate = Tuple[float, float]
Vector2 = Tuple[float, float]
Extent = Tuple[float, float, float, float]
Segment = Tuple[Coordinate, Coordinate]
Pixel = Tuple[float, float]


def as_coordinate(value: Sequence[float]) -> Coordinate:
    """Return the first two ordinates of ``value`` as a float pair."""

    if len(value) < 2:
        raise ValueError(f"coordinate needs at least two ordinates, got {value!r}")
    return float(value[0]), float(value[1])


def as_segment(value: Sequence[Sequence[float]]) -> Segment:
    if len(value) != 2:
        raise ValueError(f"segment needs exactly two coordinates, got {len(value)}")
    return as_coordinate(value[0]), as_coordinate(value[1])


__all__ = [
    "Coordinate",
    "Vector2",
    "Extent",
    "Segment",
    "Pixel",
    "as_coordinate",
    "as_segment",
]
