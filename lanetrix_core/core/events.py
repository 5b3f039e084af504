from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Mapping, Optional

LOGGER = logging.getLogger(__name__)


EventType = Literal[
    "pointer_move",
    "pointer_down",
    "pointer_up",
    "pointer_cancel",
    "pointer_capture_lost",
    "double_click",
    "wheel",
    "key_down",
    "blur",
    "focus_lost",
]

EVENT_TYPES: tuple[str, ...] = (
    "pointer_move",
    "pointer_down",
    "pointer_up",
    "pointer_cancel",
    "pointer_capture_lost",
    "double_click",
    "wheel",
    "key_down",
    "blur",
    "focus_lost",
)

EventHandler = Callable[["InputEvent"], None]


@dataclass(frozen=True)
class InputEvent:
    event_type: EventType
    timestamp: float = 0.0
    x: Optional[float] = None
    y: Optional[float] = None
    pointer_id: int = 1
    button: Optional[int] = None
    delta_y: Optional[float] = None
    key: Optional[str] = None
    text: Optional[str] = None
    modifiers: Optional[dict[str, bool]] = None

    def has_modifier(self, name: str) -> bool:
        return bool(self.modifiers and self.modifiers.get(name))


def input_event_from_dict(raw: Mapping[str, object]) -> InputEvent:
    event_type = raw.get("type", raw.get("event_type"))
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unsupported input event type: {event_type!r}")
    modifiers = raw.get("modifiers")
    if modifiers is not None and not isinstance(modifiers, Mapping):
        raise TypeError("`modifiers` must be a mapping when provided")
    return InputEvent(
        event_type=event_type,  # type: ignore[arg-type]
        timestamp=float(raw.get("timestamp", 0.0)),
        x=_optional_float(raw.get("x")),
        y=_optional_float(raw.get("y")),
        pointer_id=int(raw.get("pointer_id", 1)),
        button=None if raw.get("button") is None else int(raw["button"]),
        delta_y=_optional_float(raw.get("delta_y")),
        key=None if raw.get("key") is None else str(raw["key"]),
        text=None if raw.get("text") is None else str(raw["text"]),
        modifiers=None if modifiers is None else {str(k): bool(v) for k, v in modifiers.items()},
    )


class InputEventBus:
    """Window-level listener fan-out plus the global text-selection flag.

    Drag sessions subscribe here for the lifetime of a gesture; the host forwards every
    window-level input event through `dispatch`.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._text_selection_suppressed = False

    @property
    def text_selection_suppressed(self) -> bool:
        return self._text_selection_suppressed

    def set_text_selection_suppressed(self, suppressed: bool) -> None:
        self._text_selection_suppressed = bool(suppressed)

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, ()))
        return sum(len(handlers) for handlers in self._handlers.values())

    def subscribe(self, event_type: EventType, handler: EventHandler) -> Callable[[], None]:
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unsupported input event type: {event_type!r}")
        self._handlers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_type)
            if handlers and handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def dispatch(self, event: InputEvent) -> int:
        handlers = tuple(self._handlers.get(event.event_type, ()))
        for handler in handlers:
            handler(event)
        if not handlers:
            LOGGER.debug("no listener for %s", event.event_type)
        return len(handlers)


def _optional_float(raw: object) -> float | None:
    if raw is None:
        return None
    return float(raw)  # type: ignore[arg-type]
