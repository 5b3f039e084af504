"""Pointer-driven move/resize/rename state machine for timeline items.

States: ``idle`` -> ``pending_move`` (pointer down on a bar body, threshold not yet crossed)
-> ``active_drag`` (move, resize-start or resize-end) -> ``idle`` on release; ``idle`` ->
``editing`` on double click -> ``idle`` on commit or cancel.

A controller owns at most one `DragSession`. The session subscribes to window-level pointer
events when it is created and `DragSession.close` is the single teardown path for every way a
gesture can end (release, cancel, capture loss, focus loss).
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import dataclass
from typing import Callable, Literal, Protocol

from lanetrix_core.core.dates import add_days
from lanetrix_core.core.events import EventHandler, EventType, InputEvent
from lanetrix_core.core.items import ItemId, ItemLookup, MutationSink, TimelineItem

LOGGER = logging.getLogger(__name__)

DragKind = Literal["resize-start", "resize-end", "move"]
HitRole = Literal["resize-start", "resize-end", "body"]
ControllerState = Literal["idle", "pending_move", "active_drag", "editing"]

_RELEASE_EVENTS: tuple[EventType, ...] = ("pointer_up", "pointer_cancel", "pointer_capture_lost", "focus_lost")


class InputSurface(Protocol):
    def subscribe(self, event_type: EventType, handler: EventHandler) -> Callable[[], None]:
        ...

    def set_text_selection_suppressed(self, suppressed: bool) -> None:
        ...


@dataclass(frozen=True)
class HitTarget:
    item_id: ItemId
    role: HitRole


@dataclass(frozen=True)
class EditingState:
    item_id: ItemId
    original_name: str
    draft: str


class DragSession:
    """Transient state of one pointer gesture plus the listeners it holds."""

    def __init__(
        self,
        *,
        kind: DragKind,
        target_item_id: ItemId,
        pointer_id: int,
        pointer_origin_x: float,
        original_start: dt.date,
        original_end: dt.date,
        surface: InputSurface,
        on_move: EventHandler,
        on_release: EventHandler,
        pending: bool = False,
    ) -> None:
        self.kind = kind
        self.target_item_id = target_item_id
        self.pointer_id = pointer_id
        self.pointer_origin_x = pointer_origin_x
        self.original_start = original_start
        self.original_end = original_end
        self.last_applied_delta_days = 0
        self.pending = pending
        self._surface = surface
        self._selection_suppressed = False
        self._closed = False
        self._unsubscribers: list[Callable[[], None]] = []
        try:
            self._unsubscribers.append(surface.subscribe("pointer_move", on_move))
            for event_type in _RELEASE_EVENTS:
                self._unsubscribers.append(surface.subscribe(event_type, on_release))
            if not pending:
                self._suppress_selection()
        except Exception:
            self.close()
            raise

    @property
    def closed(self) -> bool:
        return self._closed

    def activate(self) -> None:
        self.pending = False
        self._suppress_selection()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()
        if self._selection_suppressed:
            self._selection_suppressed = False
            self._surface.set_text_selection_suppressed(False)

    def _suppress_selection(self) -> None:
        if self._selection_suppressed:
            return
        self._selection_suppressed = True
        self._surface.set_text_selection_suppressed(True)


class DragController:
    def __init__(
        self,
        lookup: ItemLookup,
        sink: MutationSink,
        surface: InputSurface,
        *,
        pixels_per_day: Callable[[], float],
        drag_threshold_px: float = 4.0,
    ) -> None:
        if drag_threshold_px < 0:
            raise ValueError("drag_threshold_px must be >= 0")
        self._lookup = lookup
        self._sink = sink
        self._surface = surface
        self._pixels_per_day = pixels_per_day
        self._drag_threshold_px = drag_threshold_px
        self._session: DragSession | None = None
        self._editing: EditingState | None = None

    @property
    def state(self) -> ControllerState:
        if self._editing is not None:
            return "editing"
        if self._session is None:
            return "idle"
        return "pending_move" if self._session.pending else "active_drag"

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def editing(self) -> EditingState | None:
        return self._editing

    def pointer_down(self, target: HitTarget, event: InputEvent) -> bool:
        if self._session is not None:
            LOGGER.debug("pointer %s ignored: drag session already active", event.pointer_id)
            return False
        if self._editing is not None:
            LOGGER.debug("pointer down ignored while renaming %r", self._editing.item_id)
            return False
        if event.x is None:
            return False
        item = self._lookup.get(target.item_id)
        if item is None:
            LOGGER.debug("pointer down on unknown item %r", target.item_id)
            return False
        kind: DragKind = "move" if target.role == "body" else target.role
        self._session = DragSession(
            kind=kind,
            target_item_id=item.item_id,
            pointer_id=event.pointer_id,
            pointer_origin_x=float(event.x),
            original_start=item.start,
            original_end=item.end,
            surface=self._surface,
            on_move=self._on_pointer_move,
            on_release=self._on_pointer_release,
            pending=target.role == "body",
        )
        return True

    def cancel_session(self) -> None:
        """Abandon the current gesture; the last applied mutation stands."""
        session, self._session = self._session, None
        if session is not None:
            session.close()

    def double_click(self, item_id: ItemId) -> bool:
        if self._editing is not None:
            return False
        if self._session is not None:
            if not self._session.pending:
                return False
            self.cancel_session()
        item = self._lookup.get(item_id)
        if item is None:
            return False
        self._editing = EditingState(item_id=item.item_id, original_name=item.name, draft=item.name)
        return True

    def set_draft(self, text: str) -> None:
        if self._editing is None:
            return
        self._editing = EditingState(
            item_id=self._editing.item_id,
            original_name=self._editing.original_name,
            draft=str(text),
        )

    def key_down(self, key: str) -> TimelineItem | None:
        if self._editing is None:
            # Move/resize drags have no rollback; Escape is not bound during a drag.
            return None
        if key == "Enter":
            return self.commit_edit()
        if key == "Escape":
            self.cancel_edit()
        return None

    def blur(self) -> TimelineItem | None:
        if self._editing is None:
            return None
        return self.commit_edit()

    def commit_edit(self) -> TimelineItem | None:
        editing, self._editing = self._editing, None
        if editing is None:
            return None
        draft = editing.draft.strip()
        if not draft:
            return None
        current = self._lookup.get(editing.item_id)
        if current is None or draft == current.name:
            return None
        updated = current.with_changes(name=draft)
        self._sink.change_item(updated)
        return updated

    def cancel_edit(self) -> None:
        self._editing = None

    def _on_pointer_move(self, event: InputEvent) -> None:
        session = self._session
        if session is None or event.pointer_id != session.pointer_id or event.x is None:
            return
        dx = float(event.x) - session.pointer_origin_x
        if session.pending:
            if abs(dx) < self._drag_threshold_px:
                return
            session.activate()
        delta_days = _round_half_up(dx / self._pixels_per_day())
        if delta_days == session.last_applied_delta_days:
            return
        session.last_applied_delta_days = delta_days
        current = self._lookup.get(session.target_item_id)
        if current is None:
            LOGGER.debug("drag mutation skipped: item %r no longer present", session.target_item_id)
            return
        self._sink.change_item(apply_drag_delta(current, session, delta_days))

    def _on_pointer_release(self, event: InputEvent) -> None:
        session = self._session
        if session is None:
            return
        if event.event_type != "focus_lost" and event.pointer_id != session.pointer_id:
            return
        self.cancel_session()


def apply_drag_delta(current: TimelineItem, session: DragSession, delta_days: int) -> TimelineItem:
    if session.kind == "resize-start":
        candidate = add_days(session.original_start, delta_days)
        return current.with_changes(start=min(candidate, session.original_end))
    if session.kind == "resize-end":
        candidate = add_days(session.original_end, delta_days)
        return current.with_changes(end=max(candidate, session.original_start))
    return current.with_changes(
        start=add_days(session.original_start, delta_days),
        end=add_days(session.original_end, delta_days),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
