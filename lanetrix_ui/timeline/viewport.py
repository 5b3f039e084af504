from __future__ import annotations

import dataclasses
import datetime as dt
import math
from dataclasses import dataclass
from typing import Iterable, Iterator

from lanetrix_core.core.dates import add_days, coerce_date, days_between, format_date, parse_date
from lanetrix_core.core.items import ItemId, TimelineItem
from lanetrix_core.core.lanes import LaneAssignment

from .config import TICK_STEP_CANDIDATES, TimelineViewConfig


@dataclass(frozen=True)
class Tick:
    offset_days: int
    date: dt.date
    label: str
    offset_px: float
    x: float


@dataclass(frozen=True)
class BarGeometry:
    item_id: ItemId
    lane: int
    x: float
    width: float
    top: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class ZoomResult:
    pixels_per_day: float
    scroll_offset: float
    viewport: "ViewportModel"


@dataclass(frozen=True)
class ViewportModel:
    min_date: dt.date
    max_date: dt.date
    pixels_per_day: float = 70.0
    gutter_width: float = 180.0
    min_scale: float = 4.0
    max_scale: float = 400.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    tick_steps: tuple[int, ...] = TICK_STEP_CANDIDATES

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_date", coerce_date(self.min_date))
        object.__setattr__(self, "max_date", coerce_date(self.max_date))
        if self.max_date < self.min_date:
            raise ValueError("min_date must be <= max_date")
        if self.min_scale <= 0 or self.max_scale < self.min_scale:
            raise ValueError("scale bounds must satisfy 0 < min_scale <= max_scale")
        if self.gutter_width < 0:
            raise ValueError("gutter_width must be >= 0")
        if not self.tick_steps:
            raise ValueError("tick_steps must not be empty")
        object.__setattr__(self, "pixels_per_day", self.clamp_scale(float(self.pixels_per_day)))

    @classmethod
    def from_config(
        cls,
        min_date: dt.date | str,
        max_date: dt.date | str,
        config: TimelineViewConfig,
        *,
        pixels_per_day: float | None = None,
    ) -> "ViewportModel":
        return cls(
            min_date=coerce_date(min_date),
            max_date=coerce_date(max_date),
            pixels_per_day=config.pixels_per_day if pixels_per_day is None else pixels_per_day,
            gutter_width=config.gutter_width,
            min_scale=config.min_scale,
            max_scale=config.max_scale,
            zoom_in_factor=config.zoom_in_factor,
            zoom_out_factor=config.zoom_out_factor,
            tick_steps=config.tick_steps,
        )

    @property
    def total_days(self) -> int:
        return days_between(self.min_date, self.max_date) + 1

    @property
    def total_width(self) -> float:
        return self.gutter_width + self.total_days * self.pixels_per_day

    def clamp_scale(self, pixels_per_day: float) -> float:
        return max(self.min_scale, min(self.max_scale, pixels_per_day))

    def with_scale(self, pixels_per_day: float) -> "ViewportModel":
        return dataclasses.replace(self, pixels_per_day=pixels_per_day)

    def x_for_date(self, value: dt.date | str) -> float:
        return self.gutter_width + days_between(self.min_date, value) * self.pixels_per_day

    def width_for_span(self, start: dt.date | str, end: dt.date | str) -> float:
        return max(1.0, (days_between(start, end) + 1) * self.pixels_per_day)

    def days_at_x(self, content_x: float) -> float:
        return (content_x - self.gutter_width) / self.pixels_per_day

    def date_at_x(self, content_x: float) -> dt.date:
        return add_days(self.min_date, math.floor(self.days_at_x(content_x)))

    def bar_for(self, assignment: LaneAssignment, *, lane_height: float = 0.0) -> BarGeometry:
        item: TimelineItem = assignment.item
        return BarGeometry(
            item_id=item.item_id,
            lane=assignment.lane,
            x=self.x_for_date(item.start),
            width=self.width_for_span(item.start, item.end),
            top=assignment.lane * lane_height,
            height=lane_height,
        )

    def tick_step(self, min_label_px: float) -> int:
        for candidate in self.tick_steps:
            if candidate * self.pixels_per_day >= min_label_px:
                return candidate
        return self.tick_steps[-1]

    def ticks(self, min_label_px: float) -> "TickSequence":
        return TickSequence(self, self.tick_step(min_label_px))

    def today_marker_x(
        self,
        today: dt.date | str,
        *,
        scroll_offset: float = 0.0,
        visible_width: float | None = None,
    ) -> float | None:
        day = coerce_date(today)
        if day < self.min_date or day > self.max_date:
            return None
        x = self.x_for_date(day)
        # The gutter stays pinned over the left edge of the scrolled content.
        if visible_width is not None and not (scroll_offset + self.gutter_width <= x <= scroll_offset + visible_width):
            return None
        return x

    def zoom_at(self, cursor_screen_x: float, scroll_offset: float, direction: int) -> ZoomResult:
        """Rescale around the cursor so the date under it keeps its screen position.

        `direction > 0` zooms in, `direction < 0` zooms out. The returned scroll offset is not
        clamped to the scrollable range; the host's scroll container does that.
        """
        if direction == 0:
            raise ValueError("direction must be non-zero")
        cursor_days = max(0.0, scroll_offset + cursor_screen_x - self.gutter_width) / self.pixels_per_day
        factor = self.zoom_in_factor if direction > 0 else self.zoom_out_factor
        next_scale = self.clamp_scale(self.pixels_per_day * factor)
        next_scroll = self.gutter_width + cursor_days * next_scale - cursor_screen_x
        return ZoomResult(
            pixels_per_day=next_scale,
            scroll_offset=next_scroll,
            viewport=self.with_scale(next_scale),
        )


class TickSequence:
    """Finite, lazily generated axis ticks; iterating again restarts from `min_date`."""

    def __init__(self, viewport: ViewportModel, step: int) -> None:
        if step < 1:
            raise ValueError("step must be >= 1")
        self.viewport = viewport
        self.step = step

    def __len__(self) -> int:
        return math.ceil(self.viewport.total_days / self.step)

    def __iter__(self) -> Iterator[Tick]:
        vp = self.viewport
        for k in range(len(self)):
            offset = k * self.step
            day = add_days(vp.min_date, offset)
            offset_px = offset * vp.pixels_per_day
            yield Tick(
                offset_days=offset,
                date=day,
                label=format_date(day),
                offset_px=offset_px,
                x=vp.gutter_width + offset_px,
            )


def resolve_viewport_bounds(
    items: Iterable[TimelineItem],
    *,
    viewport_start: str | None = None,
    viewport_end: str | None = None,
    today: dt.date | None = None,
) -> tuple[dt.date, dt.date]:
    explicit_start = parse_date(viewport_start) if viewport_start is not None else None
    explicit_end = parse_date(viewport_end) if viewport_end is not None else None
    if explicit_start is not None and explicit_end is not None:
        return (explicit_start, explicit_end)

    dates = [day for item in items for day in (item.start, item.end)]
    fallback = today or dt.date.today()
    low = explicit_start or (min(dates) if dates else fallback)
    high = explicit_end or (max(dates) if dates else fallback)
    return (low, high)
