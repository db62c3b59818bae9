"""Proposal of draggable handles next to visible reference segments."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from shapely.geometry import LineString, MultiLineString
from shapely.geometry.base import BaseGeometry

from . import extent as _extent
from .clipping import crop_line_segment_by_extent
from .config import CandidateSearchConfig, get_candidate_search_config
from .features import Feature, FeatureStore
from .handle import OrthogonalMovementHandle
from .types import Coordinate, Extent, Segment, as_coordinate
from .vector_math import get_midpoint, get_orthogonal_basis_vector, is_finite_vector
from .view import MapView

logger = logging.getLogger(__name__)

BucketKey = Tuple[int, int]


@dataclass
class CandidateSet:
    """One rebuild worth of proposals."""

    handles: List[OrthogonalMovementHandle] = field(default_factory=list)
    highlighted_segments: List[Segment] = field(default_factory=list)
    buckets: Dict[BucketKey, OrthogonalMovementHandle] = field(default_factory=dict)
    view_extent: Optional[Extent] = None

    def __len__(self) -> int:
        return len(self.handles)


def has_plain_xy_layout(geometry: Optional[BaseGeometry]) -> bool:
    if geometry is None or geometry.is_empty:
        return False
    return not geometry.has_z and not getattr(geometry, "has_m", False)


def iter_linear_coordinates(geometry: BaseGeometry) -> Iterator[List[Coordinate]]:
    """Yield the coordinate runs of every line-like part of ``geometry``.

    Rings come out closed; points and empty parts yield nothing.
    """

    if geometry.is_empty:
        return
    geom_type = geometry.geom_type
    if geom_type == "LineString":
        yield [as_coordinate(c) for c in geometry.coords]
    elif geom_type == "LinearRing":
        coords = [as_coordinate(c) for c in geometry.coords]
        if len(coords) >= 2 and coords[0] != coords[-1]:
            coords.append(coords[0])
        yield coords
    elif geom_type == "Polygon":
        yield from iter_linear_coordinates(geometry.exterior)
        for ring in geometry.interiors:
            yield from iter_linear_coordinates(ring)
    elif geom_type in ("MultiLineString", "MultiPolygon", "GeometryCollection"):
        for part in geometry.geoms:
            yield from iter_linear_coordinates(part)


def bucket_key(pixel: Sequence[float], bucket_size_px: float) -> BucketKey:
    return math.floor(pixel[0] / bucket_size_px), math.floor(pixel[1] / bucket_size_px)


class CandidateHandleFinder:
    """Builds :class:`CandidateSet` instances for a view and a reference store.

    :meth:`update` is cheap to call every frame: it compares the view extent
    by value and the store revision with the previous run and does real
    work only when either changed.
    """

    def __init__(self, config: Optional[CandidateSearchConfig] = None) -> None:
        self.config = config or get_candidate_search_config()
        self._last_extent: Optional[Extent] = None
        self._last_revision: Optional[int] = None

    def invalidate(self) -> None:
        self._last_extent = None
        self._last_revision = None

    def needs_update(self, view: MapView, store: FeatureStore) -> bool:
        view_extent = tuple(view.calculate_extent())
        return view_extent != self._last_extent or store.revision != self._last_revision

    def update(self, view: MapView, store: FeatureStore) -> Optional[CandidateSet]:
        if not self.needs_update(view, store):
            return None
        candidates = self.find(view, store)
        self._last_extent = candidates.view_extent
        self._last_revision = store.revision
        return candidates

    def find(self, view: MapView, store: FeatureStore) -> CandidateSet:
        view_extent: Extent = tuple(view.calculate_extent())  # type: ignore[assignment]
        diagonal = _extent.get_diagonal_length(view_extent)
        focus_region = _extent.buffer(
            _extent.bounding_extent([_extent.get_center(view_extent)]),
            diagonal * self.config.focus_region_fraction,
        )

        candidates = CandidateSet(view_extent=view_extent)
        if diagonal <= 0:
            return candidates

        features = store.features_in_extent(view_extent)
        for feature in features:
            if not has_plain_xy_layout(feature.geometry):
                continue
            for coords in iter_linear_coordinates(feature.geometry):
                self._collect_from_run(coords, view, view_extent, focus_region, diagonal, candidates)

        logger.info(
            "Proposed %d handle(s) from %d feature(s) in view extent %s",
            len(candidates.handles),
            len(features),
            view_extent,
        )
        return candidates

    def _collect_from_run(
        self,
        coords: Sequence[Coordinate],
        view: MapView,
        view_extent: Extent,
        focus_region: Extent,
        diagonal: float,
        candidates: CandidateSet,
    ) -> None:
        if len(coords) < 2:
            return

        for i in range(len(coords) - 1):
            segment: Segment = (coords[i], coords[i + 1])

            in_focus = crop_line_segment_by_extent(segment, focus_region)
            if in_focus is None:
                continue

            focus_bbox = _extent.bounding_extent(in_focus)
            if _extent.is_empty(focus_bbox):
                continue
            if _extent.get_diagonal_length(focus_bbox) / diagonal < self.config.min_focus_length_ratio:
                continue

            in_view = crop_line_segment_by_extent(segment, view_extent)
            if in_view is None:
                continue

            midpoint = get_midpoint(*in_view)
            basis_vector = get_orthogonal_basis_vector(midpoint, in_view[1])
            if not is_finite_vector(basis_vector):
                logger.debug("Skipping degenerate segment %s", segment)
                continue

            key = bucket_key(view.get_pixel_from_coordinate(midpoint), self.config.bucket_size_px)
            if key in candidates.buckets:
                continue

            handle = OrthogonalMovementHandle(midpoint, basis_vector, 0.0, segment=segment, kind="proposal")
            candidates.buckets[key] = handle
            candidates.handles.append(handle)
            candidates.highlighted_segments.append(in_view)


def highlighted_segments_feature(candidates: Optional[CandidateSet] = None) -> Feature:
    """Aggregate line feature marking the segments that received handles."""

    segments = candidates.highlighted_segments if candidates is not None else []
    geometry = MultiLineString([LineString(segment) for segment in segments]) if segments else MultiLineString()
    return Feature(geometry, {"role": "highlighted-segments", "stroke": "#ffcc33", "stroke_width": 2})


__all__ = [
    "CandidateSet",
    "CandidateHandleFinder",
    "has_plain_xy_layout",
    "iter_linear_coordinates",
    "bucket_key",
    "highlighted_segments_feature",
]
