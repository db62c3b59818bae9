"""Headless overlay widgets, controls and the vector overlay layer.

The host toolkit positions and paints these; the core only keeps their
state (position, rotation, text, visibility) current.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from .events import Observable
from .features import Feature
from .types import Coordinate, Vector2

logger = logging.getLogger(__name__)

DIMENSION_INPUT_PATTERN = re.compile(r"-?([0-9]+)?(\.[0-9]+)?")

QUARTER_TURN = math.pi / 2


def basis_vector_rotation(basis_vector: Vector2) -> float:
    """Screen rotation (radians) of text laid out along ``basis_vector``."""

    rotation = math.asin(min(abs(basis_vector[1]), 1.0))
    if basis_vector[1] < 0:
        rotation = 2 * math.pi - rotation
    return rotation


def fold_rotation(rotation: float) -> float:
    """Fold ``rotation`` into ``[0, pi/2)`` so overlay text is never upside down."""

    folded = rotation % QUARTER_TURN
    if math.isclose(folded, QUARTER_TURN):
        return 0.0
    return folded


class DimensionOverlay(Observable):
    """Numeric text field anchored at a model coordinate.

    Emits ``input`` with the parsed float when valid text is entered,
    ``blur`` when focus leaves the field, and ``change:visible``.
    """

    def __init__(
        self,
        name: str,
        base_rotation: float = 0.0,
        *,
        rotate_with_view: bool = True,
        positioning: str = "top-center",
    ) -> None:
        super().__init__()
        self.name = name
        self.base_rotation = base_rotation
        self.rotate_with_view = rotate_with_view
        self.positioning = positioning
        self.position: Optional[Coordinate] = None
        self.rotation = fold_rotation(base_rotation % (2 * math.pi))
        self.text = "0"
        self.valid = True
        self.visible = True
        self.focused = False

    def __repr__(self) -> str:
        return f"DimensionOverlay(name={self.name!r}, text={self.text!r}, visible={self.visible})"

    def get_rotation(self, view_rotation: float = 0.0) -> float:
        rotation = self.base_rotation
        if self.rotate_with_view:
            rotation += view_rotation
        return fold_rotation(rotation % (2 * math.pi))

    def update_rotation(self, view_rotation: float = 0.0) -> float:
        self.rotation = self.get_rotation(view_rotation)
        return self.rotation

    def set_position(self, position: Optional[Coordinate]) -> None:
        self.position = position

    def show(self) -> None:
        self._set_visible(True)

    def hide(self) -> None:
        self._set_visible(False)

    def _set_visible(self, visible: bool) -> None:
        if self.visible == visible:
            return
        self.visible = visible
        self.emit("change:visible", self)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False
        self.emit("blur", self)

    def display(self, value: float) -> None:
        """Show ``value`` unless the user is editing the field."""

        if self.focused:
            return
        self.text = f"{value:.4f}"
        self.valid = True

    def set_text(self, text: str) -> None:
        """Accept user input; out-of-pattern text only flags the field invalid."""

        self.text = text
        self.valid = bool(text) and DIMENSION_INPUT_PATTERN.fullmatch(text) is not None
        if not self.valid:
            logger.debug("Dimension %s rejected input %r", self.name, text)
            return
        try:
            value = float(text)
        except ValueError:
            return
        if not math.isfinite(value):
            return
        self.emit("input", value)


class ButtonControl(Observable):
    def __init__(self, class_name: str, label: str = "?") -> None:
        super().__init__()
        self.class_name = class_name
        self.label = label

    def __repr__(self) -> str:
        return f"ButtonControl(class_name={self.class_name!r}, label={self.label!r})"

    def click(self) -> None:
        self.emit("click", self)


class SelectControl(Observable):
    """Drop-down control; emits ``change:selection`` with the new value."""

    def __init__(
        self,
        class_name: str,
        options: Sequence[str],
        selected: Optional[str] = None,
    ) -> None:
        super().__init__()
        if not options:
            raise ValueError("SelectControl needs at least one option")
        self.class_name = class_name
        self.options: List[str] = list(options)
        self.selection = selected if selected is not None else self.options[0]
        if self.selection not in self.options:
            raise ValueError(f"{self.selection!r} is not one of {self.options!r}")

    def __repr__(self) -> str:
        return f"SelectControl(class_name={self.class_name!r}, selection={self.selection!r})"

    def select(self, value: str) -> None:
        if value not in self.options:
            raise ValueError(f"{value!r} is not one of {self.options!r}")
        if value == self.selection:
            return
        self.selection = value
        self.emit("change:selection", value)


class OverlayHost(Protocol):
    """Places widgets and controls on the host map."""

    def add_overlay(self, overlay: DimensionOverlay) -> None:
        ...

    def remove_overlay(self, overlay: DimensionOverlay) -> None:
        ...

    def add_control(self, control: Any) -> None:
        ...

    def remove_control(self, control: Any) -> None:
        ...


class MemoryOverlayHost:
    """Overlay host that just records what is currently placed."""

    def __init__(self) -> None:
        self.overlays: List[DimensionOverlay] = []
        self.controls: List[Any] = []

    def add_overlay(self, overlay: DimensionOverlay) -> None:
        if overlay not in self.overlays:
            self.overlays.append(overlay)

    def remove_overlay(self, overlay: DimensionOverlay) -> None:
        if overlay in self.overlays:
            self.overlays.remove(overlay)

    def add_control(self, control: Any) -> None:
        if control not in self.controls:
            self.controls.append(control)

    def remove_control(self, control: Any) -> None:
        if control in self.controls:
            self.controls.remove(control)

    def find_control(self, class_name: str) -> Optional[Any]:
        for control in self.controls:
            if getattr(control, "class_name", None) == class_name:
                return control
        return None


class OverlayLayer:
    """Always-visible vector layer holding handles and helper features.

    Items are either :class:`Feature` records or handles; the layer never
    filters by extent.
    """

    def __init__(self) -> None:
        self._items: List[Any] = []
        self.revision = 0

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: Any) -> bool:
        return any(existing is item for existing in self._items)

    @property
    def items(self) -> List[Any]:
        return list(self._items)

    def features(self) -> List[Feature]:
        return [item for item in self._items if isinstance(item, Feature)]

    def handles(self) -> List[Any]:
        return [item for item in self._items if not isinstance(item, Feature)]

    def add(self, item: Any) -> None:
        if item in self:
            return
        self._items.append(item)
        self.revision += 1

    def add_all(self, items: Iterable[Any]) -> None:
        for item in items:
            self.add(item)

    def remove(self, item: Any) -> None:
        for idx, existing in enumerate(self._items):
            if existing is item:
                del self._items[idx]
                self.revision += 1
                return

    def clear(self) -> None:
        self._items.clear()
        self.revision += 1


__all__ = [
    "DIMENSION_INPUT_PATTERN",
    "basis_vector_rotation",
    "fold_rotation",
    "DimensionOverlay",
    "ButtonControl",
    "SelectControl",
    "OverlayHost",
    "MemoryOverlayHost",
    "OverlayLayer",
]
