"""Draw events and a minimal synchronous pub-sub."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

Listener = Callable[[Any], None]


class TouchDrawEventType(str, Enum):
    DRAWSTART = "drawstart"
    DRAWEND = "drawend"
    DRAWABORT = "drawabort"


@dataclass
class TouchDrawEvent:
    """Event emitted by the interaction and by drafting states."""

    type: TouchDrawEventType
    feature: Any


def _key(event_type: Union[str, Enum]) -> str:
    if isinstance(event_type, Enum):
        return str(event_type.value)
    return event_type


class Observable:
    """Synchronous event emitter.

    Listeners run in subscription order, on the caller's stack, before
    :meth:`emit` returns. A listener added or removed while an event is
    being dispatched takes effect from the next :meth:`emit`.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event_type: str, listener: Listener) -> Listener:
        self._listeners.setdefault(_key(event_type), []).append(listener)
        return listener

    def once(self, event_type: str, listener: Listener) -> Listener:
        def _once(payload: Any) -> None:
            self.off(event_type, _once)
            listener(payload)

        return self.on(event_type, _once)

    def off(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(_key(event_type))
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return

    def has_listeners(self, event_type: Optional[str] = None) -> bool:
        if event_type is None:
            return any(self._listeners.values())
        return bool(self._listeners.get(_key(event_type)))

    def emit(self, event_type: str, payload: Any = None) -> None:
        listeners = list(self._listeners.get(_key(event_type), ()))
        for listener in listeners:
            listener(payload)

    def clear_listeners(self) -> None:
        self._listeners.clear()


__all__ = ["TouchDrawEventType", "TouchDrawEvent", "Observable", "Listener"]
