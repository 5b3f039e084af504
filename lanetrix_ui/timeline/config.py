from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

TICK_STEP_CANDIDATES: tuple[int, ...] = (1, 2, 3, 5, 7, 10, 14, 21, 30)


@dataclass(frozen=True)
class TimelineViewConfig:
    pixels_per_day: float = 70.0
    gutter_width: float = 180.0
    min_scale: float = 4.0
    max_scale: float = 400.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    min_label_px: float = 80.0
    drag_threshold_px: float = 4.0
    lane_height_px: int = 50
    gap_days: int = 0
    min_span_days: int = 0
    tick_steps: tuple[int, ...] = TICK_STEP_CANDIDATES

    def __post_init__(self) -> None:
        if self.min_scale <= 0:
            raise ValueError("min_scale must be > 0")
        if self.max_scale < self.min_scale:
            raise ValueError("max_scale must be >= min_scale")
        if not (self.min_scale <= self.pixels_per_day <= self.max_scale):
            raise ValueError("pixels_per_day must lie within [min_scale, max_scale]")
        if self.gutter_width < 0:
            raise ValueError("gutter_width must be >= 0")
        if self.zoom_in_factor <= 1.0:
            raise ValueError("zoom_in_factor must be > 1")
        if not (0.0 < self.zoom_out_factor < 1.0):
            raise ValueError("zoom_out_factor must be in (0, 1)")
        if self.min_label_px <= 0:
            raise ValueError("min_label_px must be > 0")
        if self.drag_threshold_px < 0:
            raise ValueError("drag_threshold_px must be >= 0")
        if self.lane_height_px < 1:
            raise ValueError("lane_height_px must be >= 1")
        if self.gap_days < 0 or self.min_span_days < 0:
            raise ValueError("gap_days and min_span_days must be >= 0")
        steps = tuple(int(step) for step in self.tick_steps)
        if not steps or any(step < 1 for step in steps):
            raise ValueError("tick_steps must be a non-empty sequence of positive integers")
        if list(steps) != sorted(set(steps)):
            raise ValueError("tick_steps must be strictly increasing")
        object.__setattr__(self, "tick_steps", steps)


_CONFIG_FIELDS = frozenset(field.name for field in dataclasses.fields(TimelineViewConfig))


def view_config_from_dict(raw: Mapping[str, object]) -> TimelineViewConfig:
    unknown = sorted(set(raw) - _CONFIG_FIELDS)
    if unknown:
        raise ValueError(f"unknown timeline config keys: {', '.join(unknown)}")
    values: dict[str, object] = dict(raw)
    if "tick_steps" in values:
        steps = values["tick_steps"]
        if not isinstance(steps, (list, tuple)):
            raise TypeError("`tick_steps` must be a list of integers")
        values["tick_steps"] = tuple(int(step) for step in steps)
    return TimelineViewConfig(**values)  # type: ignore[arg-type]


def load_view_config(path: str | Path) -> TimelineViewConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"timeline config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("timeline", {})
    if not isinstance(table, Mapping):
        raise TypeError("`[timeline]` must be a table")
    return view_config_from_dict(table)
