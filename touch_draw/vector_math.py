"""Vector helpers for orthogonal drag axes."""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from .logging_utils import apply_debug_logging
from .types import Coordinate, Vector2

logger = logging.getLogger(__name__)


def get_planar_distance(p0: Coordinate, p1: Coordinate) -> float:
    return math.hypot(abs(p0[0] - p1[0]), abs(p0[1] - p1[1]))


def get_orthogonal_basis_vector(p0: Coordinate, p1: Coordinate) -> Vector2:
    """Return a unit vector perpendicular to the segment ``p0 -> p1``.

    The vector is derived from the right triangle spanned by ``p0``, ``p1``
    and the corner points ``(p0.x, p1.y)`` and ``(p1.x, p0.y)``. A zero-length
    segment yields ``(nan, nan)``; use :func:`is_finite_vector` to guard.
    """

    rise_corner = (p0[0], p1[1])
    run_corner = (p1[0], p0[1])

    length = get_planar_distance(p0, p1)
    rise = get_planar_distance(p0, rise_corner)
    run = get_planar_distance(p0, run_corner)

    if length == 0.0:
        return math.nan, math.nan

    rise_factor = rise / length
    run_factor = run / length

    if (p1[0] - p0[0]) * (p1[1] - p0[1]) < 0:
        run_factor *= -1

    return -rise_factor, run_factor


def scale_vector(v: Vector2, c: float) -> Vector2:
    return v[0] * c, v[1] * c


def subtract_vectors(a: Vector2, b: Vector2) -> Vector2:
    return a[0] - b[0], a[1] - b[1]


def add_vectors(a: Vector2, b: Vector2) -> Vector2:
    return a[0] + b[0], a[1] + b[1]


def get_midpoint(p0: Coordinate, p1: Coordinate) -> Coordinate:
    return (p0[0] + p1[0]) * 0.5, (p0[1] + p1[1]) * 0.5


def is_finite_vector(v: Vector2) -> bool:
    return math.isfinite(v[0]) and math.isfinite(v[1])


def translate_coordinates(coords: Sequence[Coordinate], v: Vector2) -> np.ndarray:
    """Return ``coords`` shifted by ``v`` as an ``(n, 2)`` float array."""

    arr = np.asarray(coords, dtype=float).reshape(-1, 2)
    return arr + np.asarray(v, dtype=float)


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "get_planar_distance",
    "get_orthogonal_basis_vector",
    "scale_vector",
    "subtract_vectors",
    "add_vectors",
    "get_midpoint",
    "is_finite_vector",
    "translate_coordinates",
]
