from __future__ import annotations

import dataclasses
import datetime as dt
from dataclasses import dataclass

from lanetrix_core.core.dates import days_between, format_date
from lanetrix_core.core.lanes import LaneAssignment, group_lanes

from .viewport import ViewportModel


@dataclass(frozen=True)
class LaneRenderConfig:
    day_column_width: int = 1
    min_label_columns: int = 11
    bar_fill: str = "#"
    today_marker: str = "|"
    show_item_index: bool = True

    def __post_init__(self) -> None:
        if self.day_column_width < 1:
            raise ValueError("day_column_width must be >= 1")
        if self.min_label_columns < 1:
            raise ValueError("min_label_columns must be >= 1")
        if len(self.bar_fill) != 1 or len(self.today_marker) != 1:
            raise ValueError("bar_fill and today_marker must be single characters")


def render_lanes_ascii(
    assignments: tuple[LaneAssignment, ...],
    viewport: ViewportModel,
    config: LaneRenderConfig | None = None,
    *,
    title: str = "Timeline",
    today: dt.date | None = None,
) -> str:
    cfg = config or LaneRenderConfig()
    total_days = viewport.total_days
    lanes = group_lanes(assignments)
    label_width = max([len(_lane_label(i)) for i in range(len(lanes))] + [len("Dates:")])

    lines: list[str] = []
    lines.append(title)
    lines.append(
        f"Range: {format_date(viewport.min_date)} .. {format_date(viewport.max_date)}"
        f" | days={total_days} | lanes={len(lanes)}"
    )
    lines.append(_build_date_header(viewport, cfg, label_width))

    legend: list[str] = []
    for lane_index, lane in enumerate(lanes):
        cells = [" " * cfg.day_column_width for _ in range(total_days)]
        if today is not None and viewport.min_date <= today <= viewport.max_date:
            cells[days_between(viewport.min_date, today)] = cfg.today_marker * cfg.day_column_width
        for item in lane:
            marker = _item_marker(len(legend)) if cfg.show_item_index else cfg.bar_fill
            legend.append(f"  {marker} {item.item_id}: {item.name} [{format_date(item.start)}..{format_date(item.end)}]")
            first = max(0, days_between(viewport.min_date, item.start))
            last = min(total_days - 1, days_between(viewport.min_date, item.end))
            for day in range(first, last + 1):
                cells[day] = marker * cfg.day_column_width
        lines.append(f"{_lane_label(lane_index).ljust(label_width)} |{''.join(cells)}|")

    if not lanes:
        lines.append("  (no lanes)")
    if legend:
        lines.append("")
        lines.append("Items:")
        lines.extend(legend)
    return "\n".join(lines) + "\n"


def _build_date_header(viewport: ViewportModel, cfg: LaneRenderConfig, label_width: int) -> str:
    # Reuse the pixel tick-step selection with one character column standing in for one pixel.
    columns = float(cfg.day_column_width)
    column_view = dataclasses.replace(
        viewport,
        pixels_per_day=columns,
        min_scale=min(columns, viewport.min_scale),
        max_scale=max(columns, viewport.max_scale),
    )
    step = column_view.tick_step(cfg.min_label_columns)
    width = viewport.total_days * cfg.day_column_width
    header = [" "] * width
    for tick in column_view.ticks(cfg.min_label_columns):
        start = tick.offset_days * cfg.day_column_width
        label = tick.label[:max(1, step * cfg.day_column_width - 1)]
        for offset, ch in enumerate(label):
            if start + offset < width:
                header[start + offset] = ch
    return f"{'Dates:'.ljust(label_width)} |{''.join(header)}|"


def _lane_label(index: int) -> str:
    return f"Lane {index + 1}"


def _item_marker(index: int) -> str:
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    return alphabet[index % len(alphabet)]
