"""Top-level touch-draw interaction: handle proposals and draft lifecycle."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .candidates import CandidateHandleFinder, CandidateSet, highlighted_segments_feature
from .config import TouchDrawOptions
from .drafting import DraftingError, DraftingState
from .events import Observable, TouchDrawEvent, TouchDrawEventType
from .features import Feature
from .handle import OrthogonalMovementHandle
from .overlays import MemoryOverlayHost, OverlayHost, OverlayLayer
from .view import MapView, PointerEvent

logger = logging.getLogger(__name__)


class TouchDrawState(Enum):
    PROPOSING_HANDLES = 1
    DRAWING = 2


class TouchDrawInteraction(Observable):
    """Proposes handles next to reference geometry and drafts quads from them.

    Emits ``drawstart``, ``drawend`` and ``drawabort`` with a
    :class:`TouchDrawEvent` payload.
    """

    def __init__(self, options: Optional[TouchDrawOptions] = None, **kwargs: Any) -> None:
        super().__init__()
        if options is None:
            options = TouchDrawOptions(**kwargs)
        elif kwargs:
            raise TypeError("pass either options or keyword options, not both")
        self.options = options
        self.source = options.reference
        self.target = options.destination

        self.finder = CandidateHandleFinder(options.candidate_search)
        self.overlay_layer = OverlayLayer()
        self.highlighted_segments = highlighted_segments_feature()
        self.overlay_layer.add(self.highlighted_segments)

        self._state = TouchDrawState.PROPOSING_HANDLES
        self._view: Optional[MapView] = None
        self._overlay_host: Optional[OverlayHost] = None
        self._active = True
        self._candidates = CandidateSet()
        self._drafting_state: Optional[DraftingState] = None
        self._active_handle: Optional[OrthogonalMovementHandle] = None

    # -- wiring ------------------------------------------------------------

    @property
    def state(self) -> TouchDrawState:
        return self._state

    @property
    def candidates(self) -> CandidateSet:
        return self._candidates

    @property
    def drafting_state(self) -> Optional[DraftingState]:
        return self._drafting_state

    @property
    def view(self) -> Optional[MapView]:
        return self._view

    @property
    def overlay_host(self) -> Optional[OverlayHost]:
        return self._overlay_host

    @property
    def active(self) -> bool:
        return self._active

    def set_map(self, view: Optional[MapView], overlay_host: Optional[OverlayHost] = None) -> None:
        self._view = view
        if view is None:
            self._overlay_host = None
        else:
            self._overlay_host = overlay_host if overlay_host is not None else MemoryOverlayHost()
        self._update_state()

    def set_active(self, active: bool) -> None:
        if self._active == active:
            return
        self._active = active
        self._update_state()

    def _update_state(self) -> None:
        if self._view is None or not self._active:
            self.abort_drawing()

    def _ready(self) -> bool:
        return self._view is not None and self._active

    # -- pointer routing ---------------------------------------------------

    def handle_down_event(self, event: PointerEvent) -> bool:
        if not self._ready():
            return False
        handle = self._view.feature_at_pixel(event.pixel, self.overlay_layer.handles())
        if handle is None:
            return False

        handle.handle_down(event)
        self._active_handle = handle

        if self._state is TouchDrawState.PROPOSING_HANDLES:
            try:
                self._start_drawing(handle)
            except DraftingError as exc:
                logger.warning("Cannot start draft from %r: %s", handle, exc)
                handle.handle_up(event)
                self._active_handle = None
                return False
        return True

    def handle_drag_event(self, event: PointerEvent) -> bool:
        if self._active_handle is None:
            return False
        self._active_handle.handle_drag(event)
        return True

    def handle_up_event(self, event: PointerEvent) -> bool:
        if self._active_handle is None:
            return False
        self._active_handle.handle_up(event)
        self._active_handle = None
        return True

    # -- drafting lifecycle ------------------------------------------------

    def _start_drawing(self, handle: OrthogonalMovementHandle) -> None:
        drafting_state = DraftingState(
            handle,
            view=self._view,
            overlay_host=self._overlay_host,
            overlay_layer=self.overlay_layer,
            unit_conversions=self.options.unit_conversions,
            selected_unit=self.options.selected_unit,
        )
        drafting_state.once(TouchDrawEventType.DRAWEND, self._handle_draw_end)
        drafting_state.once(TouchDrawEventType.DRAWABORT, self._handle_draw_abort)
        self._drafting_state = drafting_state
        self._state = TouchDrawState.DRAWING
        self.emit(
            TouchDrawEventType.DRAWSTART,
            TouchDrawEvent(TouchDrawEventType.DRAWSTART, drafting_state.draft_feature),
        )

    def _handle_draw_end(self, event: TouchDrawEvent) -> None:
        feature: Feature = event.feature
        self._finish_drawing()
        # Listeners see the feature before the destination store does.
        self.emit(TouchDrawEventType.DRAWEND, event)
        self.target.add_feature(feature)
        logger.info("Draft committed as feature %s", feature.id)

    def _handle_draw_abort(self, event: TouchDrawEvent) -> None:
        self._finish_drawing()
        self.emit(TouchDrawEventType.DRAWABORT, event)
        logger.info("Draft aborted")

    def _finish_drawing(self) -> None:
        if self._drafting_state is not None:
            self._drafting_state.cancel_draft()
            self._drafting_state = None
        if self._active_handle is not None:
            self._active_handle.handle_up()
            self._active_handle = None
        self._state = TouchDrawState.PROPOSING_HANDLES

        self._candidates = CandidateSet()
        self.overlay_layer.clear()
        self.highlighted_segments.geometry = highlighted_segments_feature().geometry
        self.overlay_layer.add(self.highlighted_segments)
        self.finder.invalidate()

    def abort_drawing(self) -> None:
        """Abort the active draft, if any, emitting ``drawabort``."""

        drafting_state = self._drafting_state
        if drafting_state is None:
            return
        feature = drafting_state.draft_feature
        self._finish_drawing()
        self.emit(TouchDrawEventType.DRAWABORT, TouchDrawEvent(TouchDrawEventType.DRAWABORT, feature))
        logger.info("Draft aborted")

    # -- per-frame hook ----------------------------------------------------

    def handle_post_render(self) -> bool:
        """Rebuild handle proposals if the view or reference store changed.

        Returns ``True`` when the overlay layer content was replaced.
        """

        if not self._ready() or self._state is not TouchDrawState.PROPOSING_HANDLES:
            return False
        candidates = self.finder.update(self._view, self.source)
        if candidates is None:
            return False

        self._candidates = candidates
        self.overlay_layer.clear()
        self.highlighted_segments.geometry = highlighted_segments_feature(candidates).geometry
        self.overlay_layer.add(self.highlighted_segments)
        self.overlay_layer.add_all(candidates.handles)
        return True


__all__ = ["TouchDrawInteraction", "TouchDrawState"]
