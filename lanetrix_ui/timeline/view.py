from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable

from lanetrix_core.core.dates import today
from lanetrix_core.core.events import InputEvent, InputEventBus
from lanetrix_core.core.items import ItemStore, MutationSink, TimelineItem
from lanetrix_core.core.lanes import LaneAssignment, LanePackingOptions, assign_lanes, lane_count

from .config import TimelineViewConfig
from .drag import DragController, HitTarget
from .viewport import BarGeometry, Tick, ViewportModel, ZoomResult, resolve_viewport_bounds

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineLayout:
    bars: tuple[BarGeometry, ...]
    ticks: tuple[Tick, ...]
    tick_step: int
    today_x: float | None
    total_width: float
    lane_count: int
    diagnostics: tuple[str, ...] = ()


class TimelineView:
    """Presentation boundary: store items in, lanes and pixel geometry out, input routed to drags.

    Lane and bound computation is fail-soft. A failure is logged and recorded in
    `diagnostics`, and the view degrades to no lanes (or a single-day viewport at today)
    instead of raising into the host's render path.
    """

    def __init__(
        self,
        store: ItemStore,
        *,
        config: TimelineViewConfig | None = None,
        sink: MutationSink | None = None,
        surface: InputEventBus | None = None,
        viewport_start: str | None = None,
        viewport_end: str | None = None,
        today_provider: Callable[[], dt.date] = today,
    ) -> None:
        self.config = config or TimelineViewConfig()
        self.store = store
        self.surface = surface or InputEventBus()
        self.viewport_start = viewport_start
        self.viewport_end = viewport_end
        self._today_provider = today_provider
        self._pixels_per_day = self.config.pixels_per_day
        self.scroll_offset = 0.0
        self._lanes: tuple[LaneAssignment, ...] = ()
        self._bounds: tuple[dt.date, dt.date] = (today_provider(), today_provider())
        self._diagnostics: list[str] = []
        self.controller = DragController(
            store,
            sink if sink is not None else store,
            self.surface,
            pixels_per_day=lambda: self._pixels_per_day,
            drag_threshold_px=self.config.drag_threshold_px,
        )
        self._unsubscribe_store = store.subscribe(lambda _items: self.refresh())
        self.refresh()

    @property
    def lanes(self) -> tuple[LaneAssignment, ...]:
        return self._lanes

    @property
    def diagnostics(self) -> tuple[str, ...]:
        return tuple(self._diagnostics)

    @property
    def pixels_per_day(self) -> float:
        return self._pixels_per_day

    @property
    def viewport(self) -> ViewportModel:
        low, high = self._bounds
        return ViewportModel.from_config(low, high, self.config, pixels_per_day=self._pixels_per_day)

    def close(self) -> None:
        self.controller.cancel_session()
        self._unsubscribe_store()

    def refresh(self) -> None:
        self._diagnostics = []
        items = self.store.items()
        options = LanePackingOptions(gap_days=self.config.gap_days, min_span_days=self.config.min_span_days)
        try:
            self._lanes = assign_lanes(items, options)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("lane assignment failed; rendering no lanes")
            self._diagnostics.append(f"lane assignment failed: {exc}")
            self._lanes = ()
        current_day = self._today_provider()
        try:
            low, high = resolve_viewport_bounds(
                [a.item for a in self._lanes],
                viewport_start=self.viewport_start,
                viewport_end=self.viewport_end,
                today=current_day,
            )
            if high < low:
                raise ValueError(f"viewport end {high} precedes start {low}")
            self._bounds = (low, high)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("viewport bounds unresolved; falling back to today")
            self._diagnostics.append(f"viewport bounds failed: {exc}")
            self._bounds = (current_day, current_day)

    def layout(self, visible_width: float | None = None) -> TimelineLayout:
        viewport = self.viewport
        ticks = viewport.ticks(self.config.min_label_px)
        return TimelineLayout(
            bars=tuple(viewport.bar_for(a, lane_height=self.config.lane_height_px) for a in self._lanes),
            ticks=tuple(ticks),
            tick_step=ticks.step,
            today_x=viewport.today_marker_x(
                self._today_provider(),
                scroll_offset=self.scroll_offset,
                visible_width=visible_width,
            ),
            total_width=viewport.total_width,
            lane_count=lane_count(self._lanes),
            diagnostics=self.diagnostics,
        )

    def zoom(self, cursor_screen_x: float, direction: int) -> ZoomResult:
        result = self.viewport.zoom_at(cursor_screen_x, self.scroll_offset, direction)
        self._pixels_per_day = result.pixels_per_day
        self.scroll_offset = max(0.0, result.scroll_offset)
        return result

    def scroll_to(self, offset: float) -> None:
        self.scroll_offset = max(0.0, float(offset))

    def handle_event(self, event: InputEvent, target: HitTarget | None = None) -> None:
        kind = event.event_type
        if kind == "pointer_down":
            if target is not None:
                self.controller.pointer_down(target, event)
            return
        if kind == "double_click":
            if target is not None and target.role == "body":
                self.controller.double_click(target.item_id)
            return
        if kind == "wheel":
            if (event.has_modifier("ctrl") or event.has_modifier("meta")) and event.x is not None:
                self.zoom(event.x, 1 if (event.delta_y or 0.0) < 0 else -1)
            return
        if kind == "key_down":
            if event.text is not None:
                self.controller.set_draft(event.text)
            if event.key is not None:
                self.controller.key_down(event.key)
            return
        if kind == "blur":
            self.controller.blur()
            return
        self.surface.dispatch(event)

    def item_at(self, content_x: float, lane: int) -> TimelineItem | None:
        day = self.viewport.date_at_x(content_x)
        for assignment in self._lanes:
            if assignment.lane == lane and assignment.item.start <= day <= assignment.item.end:
                return assignment.item
        return None
