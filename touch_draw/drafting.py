"""State of one in-progress quadrilateral draft."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
from shapely.geometry import LineString, Polygon

from .config import DEFAULT_UNIT, DEFAULT_UNIT_CONVERSIONS
from .events import Observable, TouchDrawEvent, TouchDrawEventType
from .features import Feature
from .handle import CHANGE_MOVEMENT_VECTOR, OrthogonalMovementHandle
from .overlays import (
    ButtonControl,
    DimensionOverlay,
    OverlayHost,
    OverlayLayer,
    SelectControl,
    basis_vector_rotation,
)
from .types import Coordinate, Segment, as_segment
from .vector_math import (
    get_midpoint,
    get_orthogonal_basis_vector,
    is_finite_vector,
    subtract_vectors,
    translate_coordinates,
)
from .view import MapView

logger = logging.getLogger(__name__)

GUIDE_STYLE = {"stroke": "#ccc", "stroke_width": 2, "line_dash": (4, 8)}


class DraftingError(RuntimeError):
    """Raised when a draft cannot be started from the grabbed handle."""


def _point(row: np.ndarray) -> Coordinate:
    return float(row[0]), float(row[1])


class DraftingState(Observable):
    """Owns the draft quad, its three handles and their dimension overlays.

    Ring corners 0 and 1 are the spine, corners 2 and 3 the far edge. The
    x-move handle translates the whole quad across the spine, the y-move
    handle along it, and the scale handle pushes the far edge out.

    Emits ``drawend`` from :meth:`confirm`, ``drawabort`` from
    :meth:`cancel` and ``change:geometry`` after every recompute.
    """

    def __init__(
        self,
        scale_handle: OrthogonalMovementHandle,
        *,
        view: MapView,
        overlay_host: OverlayHost,
        overlay_layer: Optional[OverlayLayer] = None,
        unit_conversions: Optional[Mapping[str, float]] = None,
        selected_unit: str = DEFAULT_UNIT,
    ) -> None:
        super().__init__()
        if scale_handle.segment is None:
            raise DraftingError("handle carries no spine segment")
        p0, p1 = as_segment(scale_handle.segment)
        x_basis = get_orthogonal_basis_vector(p0, p1)
        if not is_finite_vector(x_basis):
            raise DraftingError(f"degenerate spine {p0!r} -> {p1!r}")

        self.view = view
        self.overlay_host = overlay_host
        self.overlay_layer = overlay_layer if overlay_layer is not None else OverlayLayer()
        self.unit_conversions: Dict[str, float] = dict(unit_conversions or DEFAULT_UNIT_CONVERSIONS)
        self.spine: Segment = (p0, p1)
        self.active = True
        self._recomputing = False
        self._pending: List[OrthogonalMovementHandle] = []
        # Sign of each handle's last non-zero magnitude.
        self._directions: Dict[OrthogonalMovementHandle, float] = {}

        self.scale_handle = scale_handle
        scale_handle.kind = "scale"
        self.x_move_handle = OrthogonalMovementHandle(get_midpoint(p1, p0), x_basis, kind="move")
        self.y_move_handle = OrthogonalMovementHandle(
            get_midpoint(p0, p1),
            get_orthogonal_basis_vector((0.0, 0.0), x_basis),
            kind="move",
        )

        self._base_ring = np.array([p0, p1, p1, p0, p0], dtype=float)
        self._ring = self._base_ring.copy()
        self.draft_feature = Feature(Polygon(self._ring))

        self.x_guide = Feature(LineString([p1, p1]), {"role": "guide", **GUIDE_STYLE})
        self.y_guide = Feature(LineString([p1, p1]), {"role": "guide", **GUIDE_STYLE})

        self.unit_select = SelectControl(
            "unit-selector-touch-draw",
            list(self.unit_conversions),
            selected_unit,
        )
        self.scale_overlay = DimensionOverlay("scale", basis_vector_rotation(self.scale_handle.basis_vector))
        self.x_move_overlay = DimensionOverlay("x-move", basis_vector_rotation(self.x_move_handle.basis_vector))
        self.y_move_overlay = DimensionOverlay("y-move", basis_vector_rotation(self.y_move_handle.basis_vector))
        self.x_move_overlay.hide()
        self.y_move_overlay.hide()
        self.scale_overlay.set_position(p1)
        self.x_move_overlay.set_position(p1)
        self.y_move_overlay.set_position(p1)

        self.confirm_button = ButtonControl("confirm-touch-draw", "✓")
        self.cancel_button = ButtonControl("cancel-touch-draw", "X")

        self._subscriptions: List[Tuple[Observable, str, object]] = []
        for handle, overlay in self.handle_overlays():
            self._subscribe(handle, CHANGE_MOVEMENT_VECTOR, self._handle_movement_changed)
            self._subscribe(overlay, "input", self._bind_dimension_input(handle))
            self._subscribe(overlay, "blur", lambda _overlay: self.refresh_overlays())
        self._subscribe(self.unit_select, "change:selection", lambda _unit: self.refresh_overlays())
        self._subscribe(self.confirm_button, "click", lambda _button: self.confirm())
        self._subscribe(self.cancel_button, "click", lambda _button: self.cancel())

        self.overlay_layer.clear()
        self.overlay_layer.add_all(
            [
                self.scale_handle,
                self.x_move_handle,
                self.y_move_handle,
                self.x_guide,
                self.y_guide,
                self.draft_feature,
            ]
        )
        self.overlay_host.add_control(self.unit_select)
        for _handle, overlay in self.handle_overlays():
            self.overlay_host.add_overlay(overlay)
        self.overlay_host.add_control(self.confirm_button)
        self.overlay_host.add_control(self.cancel_button)

        self.refresh_overlays()
        logger.info("Draft started on spine %s -> %s", p0, p1)

    def _subscribe(self, target: Observable, event_type: str, listener) -> None:
        target.on(event_type, listener)
        self._subscriptions.append((target, event_type, listener))

    def _bind_dimension_input(self, handle: OrthogonalMovementHandle):
        def _on_input(value: float) -> None:
            self.set_dimension(handle, value)

        return _on_input

    # -- accessors ---------------------------------------------------------

    @property
    def ring(self) -> List[Coordinate]:
        return [_point(row) for row in self._ring]

    @property
    def handles(self) -> List[OrthogonalMovementHandle]:
        return [self.scale_handle, self.x_move_handle, self.y_move_handle]

    def handle_overlays(self) -> List[Tuple[OrthogonalMovementHandle, DimensionOverlay]]:
        return [
            (self.scale_handle, self.scale_overlay),
            (self.x_move_handle, self.x_move_overlay),
            (self.y_move_handle, self.y_move_overlay),
        ]

    @property
    def selected_unit(self) -> str:
        return self.unit_select.selection

    @property
    def unit_conversion_factor(self) -> float:
        return self.unit_conversions[self.unit_select.selection]

    def handle_length(self, handle: OrthogonalMovementHandle) -> float:
        """Distance the handle has been moved, in map units."""

        return self.view.get_length(handle.origin, handle.geometry)

    def get_dimension(self, handle: OrthogonalMovementHandle) -> float:
        """Distance the handle has been moved, in the selected unit."""

        return self.handle_length(handle) / self.unit_conversion_factor

    # -- recompute ---------------------------------------------------------

    def compute_ring(self) -> np.ndarray:
        ring = translate_coordinates(self._base_ring, self.x_move_handle.movement_vector)
        ring = translate_coordinates(ring, self.y_move_handle.movement_vector)
        scale = np.asarray(self.scale_handle.movement_vector, dtype=float)
        ring[2] += scale
        ring[3] += scale
        ring[4] = ring[0]
        return ring

    def _handle_movement_changed(self, handle: OrthogonalMovementHandle) -> None:
        if not self.active:
            return
        if handle.magnitude != 0:
            self._directions[handle] = math.copysign(1.0, handle.magnitude)
        if self._recomputing:
            logger.debug("Deferring movement change from %r until the running recompute ends", handle)
            self._pending.append(handle)
            return
        self._recomputing = True
        try:
            source: Optional[OrthogonalMovementHandle] = handle
            while True:
                self._recompute(source)
                if not self._pending:
                    break
                self._pending.clear()
                # Handles moved mid-recompute may have been re-anchored on a
                # stale ring, so later passes re-anchor all three.
                source = None
            self.refresh_overlays()
        finally:
            self._recomputing = False
            self._pending.clear()
        self.emit("change:geometry", self.draft_feature)

    def _recompute(self, source: Optional[OrthogonalMovementHandle]) -> None:
        self._ring = self.compute_ring()
        self.draft_feature.geometry = Polygon(self._ring)

        ring = self._ring
        if source is not self.scale_handle:
            self.scale_handle.update_location(get_midpoint(_point(ring[2]), _point(ring[3])))
        if source is not self.x_move_handle:
            self.x_move_handle.update_location(get_midpoint(_point(ring[3]), _point(ring[0])))
        if source is not self.y_move_handle:
            self.y_move_handle.update_location(get_midpoint(_point(ring[0]), _point(ring[1])))

    def guide_segments(self) -> Tuple[Segment, Segment]:
        """Return the x and y guide lines for the current ring.

        Both end at spine corner 1 pulled back by the x translation; the x
        guide starts at the current corner 1, the y guide at the spine end.
        """

        corner = _point(self._ring[1])
        pulled_back = subtract_vectors(corner, self.x_move_handle.movement_vector)
        return (corner, pulled_back), (self.spine[1], pulled_back)

    def refresh_overlays(self) -> None:
        if not self.active:
            return
        ring = self._ring
        x_guide, y_guide = self.guide_segments()
        self.x_guide.geometry = LineString(x_guide)
        self.y_guide.geometry = LineString(y_guide)

        self.scale_overlay.set_position(get_midpoint(_point(ring[1]), _point(ring[2])))
        self.x_move_overlay.set_position(get_midpoint(*x_guide))
        self.y_move_overlay.set_position(get_midpoint(*y_guide))

        for handle, guide, overlay in (
            (self.x_move_handle, self.x_guide, self.x_move_overlay),
            (self.y_move_handle, self.y_guide, self.y_move_overlay),
        ):
            moved = handle.magnitude != 0
            guide.set("visible", moved)
            if moved:
                overlay.show()
            else:
                overlay.hide()

        view_rotation = self.view.rotation
        for handle, overlay in self.handle_overlays():
            overlay.update_rotation(view_rotation)
            overlay.display(self.get_dimension(handle))

    # -- editing -----------------------------------------------------------

    def set_dimension(self, handle: OrthogonalMovementHandle, desired: float) -> None:
        """Move ``handle`` so its length reads ``desired`` in the selected unit."""

        if not self.active:
            return
        factor = self.unit_conversion_factor
        current_length = self.handle_length(handle)
        if current_length == 0 or handle.magnitude == 0:
            magnitude = self._directions.get(handle, 1.0) * desired * factor
        else:
            magnitude = handle.magnitude / current_length * desired * factor
        logger.debug("Dimension %s set to %s %s (magnitude %s)", handle.kind, desired, self.selected_unit, magnitude)
        handle.set_magnitude(magnitude)

    def select_unit(self, unit: str) -> None:
        self.unit_select.select(unit)

    # -- termination -------------------------------------------------------

    def confirm(self) -> None:
        if not self.active:
            return
        logger.info("Draft confirmed")
        self.emit(TouchDrawEventType.DRAWEND, TouchDrawEvent(TouchDrawEventType.DRAWEND, self.draft_feature))

    def cancel(self) -> None:
        if not self.active:
            return
        logger.info("Draft cancelled")
        self.emit(TouchDrawEventType.DRAWABORT, TouchDrawEvent(TouchDrawEventType.DRAWABORT, self.draft_feature))

    def cancel_draft(self) -> None:
        """Remove every overlay, control and listener this draft installed. Safe to repeat."""

        if not self.active:
            return
        self.active = False

        for target, event_type, listener in self._subscriptions:
            target.off(event_type, listener)
        self._subscriptions.clear()

        for _handle, overlay in self.handle_overlays():
            self.overlay_host.remove_overlay(overlay)
        self.overlay_host.remove_control(self.unit_select)
        self.overlay_host.remove_control(self.confirm_button)
        self.overlay_host.remove_control(self.cancel_button)

        for item in (
            self.scale_handle,
            self.x_move_handle,
            self.y_move_handle,
            self.x_guide,
            self.y_guide,
            self.draft_feature,
        ):
            self.overlay_layer.remove(item)
        logger.debug("Draft torn down")


__all__ = ["DraftingState", "DraftingError", "GUIDE_STYLE"]
