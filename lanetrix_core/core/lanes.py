"""Greedy interval partitioning of timeline items into non-overlapping lanes.

The canonical result is a flat tuple of `LaneAssignment` records in placement order.
Collaborators that think in rows (one tuple of items per lane) go through the adapter
functions at the bottom of this module; nothing else converts between the two shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from .items import TimelineItem, coerce_item


@dataclass(frozen=True)
class LanePackingOptions:
    gap_days: int = 0
    min_span_days: int = 0

    def __post_init__(self) -> None:
        for name in ("gap_days", "min_span_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
            if value < 0:
                raise ValueError(f"{name} must be >= 0")


@dataclass(frozen=True)
class LaneAssignment:
    item: TimelineItem
    lane: int

    @property
    def item_id(self) -> object:
        return self.item.item_id

    def to_dict(self) -> dict[str, object]:
        out = self.item.to_dict()
        out["lane"] = self.lane
        return out


def adjusted_end_ordinal(item: TimelineItem, options: LanePackingOptions) -> int:
    """Exclusive end, in day ordinals, that the item reserves in its lane."""
    start = item.start.toordinal()
    end = item.end.toordinal()
    return max(end, start + options.min_span_days, start + 1)


def assign_lanes(
    items: Iterable[TimelineItem | Mapping[str, object]],
    options: LanePackingOptions | None = None,
) -> tuple[LaneAssignment, ...]:
    opts = options or LanePackingOptions()
    indexed = [(index, coerce_item(raw)) for index, raw in enumerate(items)]
    indexed.sort(key=lambda pair: (pair[1].start, pair[1].end, pair[0]))

    # O(n * lanes); a heap keyed by watermark gets this to O(n log n) if item counts grow.
    watermarks: list[int] = []
    out: list[LaneAssignment] = []
    for _, item in indexed:
        start = item.start.toordinal()
        lane = 0
        while lane < len(watermarks) and watermarks[lane] + opts.gap_days > start:
            lane += 1
        if lane == len(watermarks):
            watermarks.append(0)
        watermarks[lane] = adjusted_end_ordinal(item, opts)
        out.append(LaneAssignment(item=item, lane=lane))
    return tuple(out)


def assign_lanes_payload(
    items: Sequence[Mapping[str, object]],
    *,
    gap_days: int = 0,
    min_span_days: int = 0,
) -> list[dict[str, object]]:
    options = LanePackingOptions(gap_days=gap_days, min_span_days=min_span_days)
    return [assignment.to_dict() for assignment in assign_lanes(items, options)]


def lane_count(assignments: Iterable[LaneAssignment]) -> int:
    return max((a.lane for a in assignments), default=-1) + 1


def group_lanes(assignments: Iterable[LaneAssignment]) -> tuple[tuple[TimelineItem, ...], ...]:
    by_lane: dict[int, list[TimelineItem]] = {}
    for assignment in assignments:
        by_lane.setdefault(assignment.lane, []).append(assignment.item)
    return tuple(tuple(by_lane[lane]) for lane in sorted(by_lane))


def flatten_lanes(lanes: Iterable[Iterable[TimelineItem | Mapping[str, object]]]) -> tuple[LaneAssignment, ...]:
    out: list[LaneAssignment] = []
    for lane_index, lane in enumerate(lanes):
        for raw in lane:
            out.append(LaneAssignment(item=coerce_item(raw), lane=lane_index))
    return tuple(out)


def normalize_lane_result(result: object) -> tuple[LaneAssignment, ...]:
    """Accept either lane shape (flat with a lane field, or grouped rows) and return the flat form."""
    if result is None:
        return ()
    if not isinstance(result, (list, tuple)):
        raise TypeError("lane result must be a list or tuple")
    if not result:
        return ()
    first = result[0]
    if isinstance(first, (list, tuple)):
        return flatten_lanes(result)
    out: list[LaneAssignment] = []
    for entry in result:
        if isinstance(entry, LaneAssignment):
            out.append(entry)
            continue
        if isinstance(entry, Mapping):
            raw_lane = entry.get("lane", entry.get("_lane", 0))
            lane = int(raw_lane) if raw_lane is not None else 0
            out.append(LaneAssignment(item=coerce_item(entry), lane=lane))
            continue
        raise TypeError(f"Unsupported lane entry: {type(entry).__name__}")
    return tuple(out)
