"""Map view collaborator contract and a static in-memory view."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, Tuple, TypeVar

from . import extent as _extent
from .types import Coordinate, Extent, Pixel
from .vector_math import get_planar_distance

T = TypeVar("T")


@dataclass(frozen=True)
class PointerEvent:
    """A pointer down/drag/up sample in both model and screen space."""

    coordinate: Coordinate
    pixel: Pixel

    @classmethod
    def at_coordinate(cls, view: "MapView", coordinate: Coordinate) -> "PointerEvent":
        return cls(coordinate=coordinate, pixel=view.get_pixel_from_coordinate(coordinate))

    @classmethod
    def at_pixel(cls, view: "MapView", pixel: Pixel) -> "PointerEvent":
        return cls(coordinate=view.get_coordinate_from_pixel(pixel), pixel=pixel)


class MapView(Protocol):
    """What the core needs from the host's map view."""

    @property
    def rotation(self) -> float:
        ...

    def calculate_extent(self) -> Extent:
        ...

    def get_pixel_from_coordinate(self, coordinate: Coordinate) -> Pixel:
        ...

    def get_coordinate_from_pixel(self, pixel: Pixel) -> Coordinate:
        ...

    def get_length(self, p0: Coordinate, p1: Coordinate) -> float:
        ...

    def feature_at_pixel(self, pixel: Pixel, candidates: Iterable[T]) -> Optional[T]:
        ...


class StaticMapView:
    """A view defined by centre, resolution (map units per pixel), pixel size and rotation.

    Pixel ``y`` grows downwards; rotation is counter-clockwise in radians,
    the convention of web mapping toolkits.
    """

    def __init__(
        self,
        center: Coordinate,
        resolution: float,
        size: Tuple[int, int] = (1000, 1000),
        rotation: float = 0.0,
        hit_tolerance_px: float = 24.0,
    ) -> None:
        if resolution <= 0:
            raise ValueError("resolution must be positive")
        self.center = (float(center[0]), float(center[1]))
        self.resolution = float(resolution)
        self.size = (int(size[0]), int(size[1]))
        self._rotation = float(rotation)
        self.hit_tolerance_px = float(hit_tolerance_px)

    @property
    def rotation(self) -> float:
        return self._rotation

    def set_rotation(self, rotation: float) -> None:
        self._rotation = float(rotation)

    def set_center(self, center: Coordinate) -> None:
        self.center = (float(center[0]), float(center[1]))

    def set_resolution(self, resolution: float) -> None:
        if resolution <= 0:
            raise ValueError("resolution must be positive")
        self.resolution = float(resolution)

    @classmethod
    def fit(
        cls,
        extent: Extent,
        size: Tuple[int, int] = (1000, 1000),
        padding: float = 0.1,
    ) -> "StaticMapView":
        """Return an unrotated view that shows ``extent`` with ``padding`` margin on each side."""

        width, height = _extent.get_size(extent)
        span_x = max(width, 1e-9) * (1 + 2 * padding)
        span_y = max(height, 1e-9) * (1 + 2 * padding)
        resolution = max(span_x / size[0], span_y / size[1])
        return cls(_extent.get_center(extent), resolution, size)

    def calculate_extent(self) -> Extent:
        half_w = self.size[0] * self.resolution / 2
        half_h = self.size[1] * self.resolution / 2
        cos_r = math.cos(self._rotation)
        sin_r = math.sin(self._rotation)
        corners = []
        for dx, dy in ((-half_w, -half_h), (-half_w, half_h), (half_w, half_h), (half_w, -half_h)):
            corners.append(
                (
                    self.center[0] + dx * cos_r - dy * sin_r,
                    self.center[1] + dx * sin_r + dy * cos_r,
                )
            )
        return _extent.bounding_extent(corners)

    def get_pixel_from_coordinate(self, coordinate: Coordinate) -> Pixel:
        dx = coordinate[0] - self.center[0]
        dy = coordinate[1] - self.center[1]
        cos_r = math.cos(-self._rotation)
        sin_r = math.sin(-self._rotation)
        rx = dx * cos_r - dy * sin_r
        ry = dx * sin_r + dy * cos_r
        return (
            self.size[0] / 2 + rx / self.resolution,
            self.size[1] / 2 - ry / self.resolution,
        )

    def get_coordinate_from_pixel(self, pixel: Pixel) -> Coordinate:
        rx = (pixel[0] - self.size[0] / 2) * self.resolution
        ry = (self.size[1] / 2 - pixel[1]) * self.resolution
        cos_r = math.cos(self._rotation)
        sin_r = math.sin(self._rotation)
        return (
            self.center[0] + rx * cos_r - ry * sin_r,
            self.center[1] + rx * sin_r + ry * cos_r,
        )

    def get_length(self, p0: Coordinate, p1: Coordinate) -> float:
        return get_planar_distance(p0, p1)

    def feature_at_pixel(self, pixel: Pixel, candidates: Iterable[T]) -> Optional[T]:
        """Return the candidate whose ``geometry`` is nearest ``pixel`` within the hit tolerance."""

        best: Optional[T] = None
        best_distance = self.hit_tolerance_px
        for candidate in candidates:
            geometry: Sequence[float] = getattr(candidate, "geometry")
            px = self.get_pixel_from_coordinate((geometry[0], geometry[1]))
            distance = math.hypot(px[0] - pixel[0], px[1] - pixel[1])
            if distance < best_distance or (best is None and distance == best_distance):
                best = candidate
                best_distance = distance
        return best


__all__ = ["PointerEvent", "MapView", "StaticMapView"]
