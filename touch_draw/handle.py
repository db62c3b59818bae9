"""Draggable handle constrained to a single axis."""

from __future__ import annotations

import logging
import math
from typing import Optional

from .events import Observable
from .types import Coordinate, Segment, Vector2, as_coordinate
from .vector_math import add_vectors, scale_vector, subtract_vectors
from .view import PointerEvent

logger = logging.getLogger(__name__)

CHANGE_MAGNITUDE = "change:magnitude"
CHANGE_MOVEMENT_VECTOR = "change:movement_vector"
CHANGE_ORIGIN = "change:origin"
CHANGE_GEOMETRY = "change:geometry"

HANDLE_KINDS = ("proposal", "scale", "move")


class OrthogonalMovementHandle(Observable):
    """A point at ``origin + basis_vector * magnitude``.

    ``basis_vector`` is fixed at construction. ``origin`` changes only via
    :meth:`update_location` and ``magnitude`` only via :meth:`set_magnitude`
    or a drag; ``movement_vector`` and ``geometry`` are always derived.

    Events (payload is the handle): ``change:magnitude``,
    ``change:movement_vector``, ``change:origin``, ``change:geometry``.
    """

    def __init__(
        self,
        origin: Coordinate,
        basis_vector: Vector2,
        magnitude: float = 0.0,
        *,
        segment: Optional[Segment] = None,
        kind: str = "proposal",
    ) -> None:
        super().__init__()
        if kind not in HANDLE_KINDS:
            raise ValueError(f"unknown handle kind {kind!r}")
        self._origin = as_coordinate(origin)
        self._basis_vector = as_coordinate(basis_vector)
        self._magnitude = float(magnitude)
        self._movement_vector = scale_vector(self._basis_vector, self._magnitude)
        self._geometry = add_vectors(self._origin, self._movement_vector)
        self._drag_coordinate: Optional[Coordinate] = None
        self.segment = segment
        self.kind = kind

    def __repr__(self) -> str:
        return (
            f"OrthogonalMovementHandle(kind={self.kind!r}, origin={self._origin!r}, "
            f"basis_vector={self._basis_vector!r}, magnitude={self._magnitude!r})"
        )

    @property
    def origin(self) -> Coordinate:
        return self._origin

    @property
    def basis_vector(self) -> Vector2:
        return self._basis_vector

    @property
    def magnitude(self) -> float:
        return self._magnitude

    @property
    def movement_vector(self) -> Vector2:
        return self._movement_vector

    @property
    def geometry(self) -> Coordinate:
        return self._geometry

    @property
    def is_dragging(self) -> bool:
        return self._drag_coordinate is not None

    @property
    def icon_rotation(self) -> float:
        """Rotation (radians) for a double-headed arrow icon drawn along the basis vector."""

        rotation = math.asin(min(abs(self._basis_vector[1]), 1.0))
        if self._basis_vector[1] < 0:
            rotation = math.pi - rotation
        return rotation

    def set_magnitude(self, magnitude: float) -> None:
        magnitude = float(magnitude)
        if magnitude == self._magnitude:
            return
        self._magnitude = magnitude
        self.emit(CHANGE_MAGNITUDE, self)

        movement_vector = scale_vector(self._basis_vector, magnitude)
        if movement_vector == self._movement_vector:
            return
        self._movement_vector = movement_vector
        self._geometry = add_vectors(self._origin, movement_vector)
        self.emit(CHANGE_GEOMETRY, self)
        self.emit(CHANGE_MOVEMENT_VECTOR, self)

    def update_location(self, new_location: Coordinate) -> None:
        """Move the handle to ``new_location`` by re-deriving its origin."""

        origin = subtract_vectors(as_coordinate(new_location), self._movement_vector)
        if origin == self._origin:
            return
        self._origin = origin
        self._geometry = add_vectors(origin, self._movement_vector)
        self.emit(CHANGE_ORIGIN, self)
        self.emit(CHANGE_GEOMETRY, self)

    def handle_down(self, event: PointerEvent) -> None:
        self._drag_coordinate = as_coordinate(event.coordinate)

    def handle_drag(self, event: PointerEvent) -> None:
        if self._drag_coordinate is None:
            logger.debug("Drag on %r without a preceding pointer down; ignored", self)
            return

        x, y = as_coordinate(event.coordinate)
        delta_x = x - self._drag_coordinate[0]
        delta_y = y - self._drag_coordinate[1]

        if self._basis_vector[0] < 0:
            delta_x *= -1
        if self._basis_vector[1] < 0:
            delta_y *= -1

        # Sum of axis deltas, not a projection onto the basis vector.
        self._drag_coordinate = (x, y)
        self.set_magnitude(self._magnitude + delta_x + delta_y)

    def handle_up(self, event: Optional[PointerEvent] = None) -> None:
        self._drag_coordinate = None


__all__ = [
    "OrthogonalMovementHandle",
    "CHANGE_MAGNITUDE",
    "CHANGE_MOVEMENT_VECTOR",
    "CHANGE_ORIGIN",
    "CHANGE_GEOMETRY",
    "HANDLE_KINDS",
]
