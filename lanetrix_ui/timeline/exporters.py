from __future__ import annotations

import datetime as dt
import json
import dataclasses
import math
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from lanetrix_core.core.dates import format_date
from lanetrix_core.core.lanes import LaneAssignment, lane_count

from ..raster.canvas import RGBA, draw_hline, draw_vline, fill_rect, new_canvas
from .renderer import LaneRenderConfig, render_lanes_ascii
from .viewport import ViewportModel

HEADER_HEIGHT_PX = 24
BAR_INSET_PX = 8

_BG: RGBA = (17, 24, 39, 255)
_GUTTER: RGBA = (31, 41, 55, 255)
_GRID: RGBA = (75, 85, 99, 255)
_BAR: RGBA = (37, 99, 235, 255)
_TODAY: RGBA = (220, 38, 38, 255)
_TEXT = (226, 232, 240)


@dataclass(frozen=True)
class TimelineExportBundle:
    ascii_lanes: Path
    markdown_overview: Path
    lanes_json: Path
    png_overview: Path

    def as_dict(self) -> dict[str, str]:
        return {
            "ascii_lanes": str(self.ascii_lanes),
            "markdown_overview": str(self.markdown_overview),
            "lanes_json": str(self.lanes_json),
            "png_overview": str(self.png_overview),
        }


def export_timeline_bundle(
    assignments: tuple[LaneAssignment, ...],
    viewport: ViewportModel,
    *,
    out_dir: str | Path,
    prefix: str = "timeline",
    title: str = "Timeline",
    today: dt.date | None = None,
    lane_height_px: int = 50,
    min_label_px: float = 80.0,
    max_png_width_px: int = 4096,
) -> TimelineExportBundle:
    root = Path(out_dir)
    root.mkdir(parents=True, exist_ok=True)

    ascii_chart = render_lanes_ascii(assignments, viewport, LaneRenderConfig(), title=title, today=today)
    overview = _build_markdown_overview(title=title, assignments=assignments, ascii_chart=ascii_chart)

    path_ascii = root / f"{prefix}_lanes.txt"
    path_markdown = root / f"{prefix}_overview.md"
    path_json = root / f"{prefix}_lanes.json"
    path_png = root / f"{prefix}_overview.png"

    path_ascii.write_text(ascii_chart, encoding="utf-8")
    path_markdown.write_text(overview, encoding="utf-8")
    path_json.write_text(
        json.dumps([a.to_dict() for a in assignments], indent=2, default=str) + "\n",
        encoding="utf-8",
    )
    render_timeline_png(
        assignments,
        viewport,
        out_path=path_png,
        today=today,
        lane_height_px=lane_height_px,
        min_label_px=min_label_px,
        max_width_px=max_png_width_px,
    )

    return TimelineExportBundle(
        ascii_lanes=path_ascii,
        markdown_overview=path_markdown,
        lanes_json=path_json,
        png_overview=path_png,
    )


def render_timeline_png(
    assignments: tuple[LaneAssignment, ...],
    viewport: ViewportModel,
    *,
    out_path: Path,
    today: dt.date | None = None,
    lane_height_px: int = 50,
    min_label_px: float = 80.0,
    max_width_px: int = 4096,
) -> Path:
    vp = _fit_to_width(viewport, max_width_px)
    lanes = max(1, lane_count(assignments))
    width = min(int(math.ceil(vp.total_width)), max_width_px)
    height = HEADER_HEIGHT_PX + lanes * lane_height_px
    gutter = int(round(vp.gutter_width))

    canvas = new_canvas(width, height, _BG)
    fill_rect(canvas, 0, 0, gutter, height, _GUTTER)
    for lane in range(lanes + 1):
        draw_hline(canvas, 0, width - 1, HEADER_HEIGHT_PX + lane * lane_height_px - (1 if lane else 0), _GRID)
    ticks = vp.ticks(min_label_px)
    for tick in ticks:
        draw_vline(canvas, int(round(tick.x)), 0, height - 1, _GRID)
    for assignment in assignments:
        bar = vp.bar_for(assignment, lane_height=lane_height_px)
        fill_rect(
            canvas,
            int(round(bar.x)),
            HEADER_HEIGHT_PX + int(bar.top) + BAR_INSET_PX,
            max(1, int(round(bar.width)) - 1),
            max(1, lane_height_px - 2 * BAR_INSET_PX),
            _BAR,
        )
    if today is not None:
        today_x = vp.today_marker_x(today)
        if today_x is not None:
            draw_vline(canvas, int(round(today_x)), 0, height - 1, _TODAY)

    image = Image.fromarray(canvas)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    for tick in ticks:
        draw.text((int(round(tick.x)) + 3, 6), tick.label, fill=_TEXT, font=font)
    for lane in range(lanes):
        draw.text((8, HEADER_HEIGHT_PX + lane * lane_height_px + lane_height_px // 3), f"Lane {lane + 1}", fill=_TEXT, font=font)
    for assignment in assignments:
        bar = vp.bar_for(assignment, lane_height=lane_height_px)
        if bar.width < 16:
            continue
        draw.text(
            (int(round(bar.x)) + 4, HEADER_HEIGHT_PX + int(bar.top) + lane_height_px // 3),
            _clip_label(assignment.item.name, bar.width, draw, font),
            fill=_TEXT,
            font=font,
        )

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    image.convert("RGB").save(out)
    return out


def _fit_to_width(viewport: ViewportModel, max_width_px: int) -> ViewportModel:
    if max_width_px <= viewport.gutter_width:
        raise ValueError("max_width_px must exceed the gutter width")
    if viewport.total_width <= max_width_px:
        return viewport
    scale = (max_width_px - viewport.gutter_width) / viewport.total_days
    # Long ranges can need less than min_scale; widen the bound instead of clamping back up.
    return dataclasses.replace(viewport, pixels_per_day=scale, min_scale=min(scale, viewport.min_scale))


def _clip_label(text: str, width_px: float, draw: ImageDraw.ImageDraw, font: ImageFont.ImageFont) -> str:
    limit = width_px - 8
    if draw.textlength(text, font=font) <= limit:
        return text
    clipped = text
    while clipped and draw.textlength(clipped + "...", font=font) > limit:
        clipped = clipped[:-1]
    return clipped + "..." if clipped else ""


def _build_markdown_overview(*, title: str, assignments: tuple[LaneAssignment, ...], ascii_chart: str) -> str:
    rows = [
        f"| {a.lane + 1} | {a.item.item_id} | {a.item.name} | {format_date(a.item.start)} | {format_date(a.item.end)} |"
        for a in sorted(assignments, key=lambda a: (a.lane, a.item.start, a.item.end))
    ]
    table = "\n".join(["| Lane | Id | Name | Start | End |", "| --- | --- | --- | --- | --- |", *rows])
    return (
        f"# {title}\n\n"
        "## Lanes\n\n"
        "```text\n"
        f"{ascii_chart.rstrip()}\n"
        "```\n\n"
        "## Items\n\n"
        f"{table}\n"
    )
