"""Segment/segment intersection and segment cropping against extents."""

from __future__ import annotations

import logging
from typing import List, Optional

from . import extent as _extent
from .logging_utils import apply_debug_logging
from .types import Coordinate, Extent, Segment

logger = logging.getLogger(__name__)


def get_line_intersection(
    p0: Coordinate, p1: Coordinate, p2: Coordinate, p3: Coordinate
) -> Optional[Coordinate]:
    """Return the crossing point of segments ``p0-p1`` and ``p2-p3``.

    Uses the parametric form ``p0 + t * s1 == p2 + s * s2`` and accepts the
    crossing when both ``s`` and ``t`` lie in ``[0, 1]``. Parallel and
    collinear segments have a zero denominator and return ``None``.
    """

    s1_x = p1[0] - p0[0]
    s1_y = p1[1] - p0[1]
    s2_x = p3[0] - p2[0]
    s2_y = p3[1] - p2[1]

    denom = -s2_x * s1_y + s1_x * s2_y
    if denom == 0:
        return None

    s = (-s1_y * (p0[0] - p2[0]) + s1_x * (p0[1] - p2[1])) / denom
    t = (s2_x * (p0[1] - p2[1]) - s2_y * (p0[0] - p2[0])) / denom

    if 0 <= s <= 1 and 0 <= t <= 1:
        return p0[0] + t * s1_x, p0[1] + t * s1_y

    return None


def _extent_edge_intersections(segment: Segment, extent: Extent) -> List[Coordinate]:
    p0, p1 = segment
    bottom_left = _extent.get_bottom_left(extent)
    bottom_right = _extent.get_bottom_right(extent)
    top_left = _extent.get_top_left(extent)
    top_right = _extent.get_top_right(extent)

    # bottom, top, left, right
    candidates = [
        get_line_intersection(p0, p1, bottom_left, bottom_right),
        get_line_intersection(p0, p1, top_left, top_right),
        get_line_intersection(p0, p1, top_left, bottom_left),
        get_line_intersection(p0, p1, top_right, bottom_right),
    ]
    return [point for point in candidates if point is not None]


def crop_line_segment_by_extent(segment: Segment, extent: Extent) -> Optional[Segment]:
    """Return the part of ``segment`` that lies within ``extent``.

    * both endpoints inside: ``segment`` itself,
    * neither inside: the first two edge crossings, or ``None``,
    * one inside: that endpoint followed by the first edge crossing.
    """

    p0, p1 = segment

    p0_inside = _extent.contains_coordinate(extent, p0)
    p1_inside = _extent.contains_coordinate(extent, p1)

    if p0_inside and p1_inside:
        return segment

    intersections = _extent_edge_intersections(segment, extent)

    if not p0_inside and not p1_inside:
        if len(intersections) > 1:
            return intersections[0], intersections[1]
        return None

    if not intersections:
        return None

    if p0_inside:
        return p0, intersections[0]
    return p1, intersections[0]


apply_debug_logging(globals(), logger=logger)


__all__ = ["get_line_intersection", "crop_line_segment_by_extent"]
