from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from lanetrix_core.core.dates import format_date
from lanetrix_core.core.items import TimelineItem
from lanetrix_core.core.lanes import (
    LaneAssignment,
    LanePackingOptions,
    adjusted_end_ordinal,
    assign_lanes,
    group_lanes,
    lane_count,
)


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def max_concurrency(items: Sequence[TimelineItem], options: LanePackingOptions | None = None) -> int:
    """Largest number of adjusted intervals `[start, adjusted_end + gap)` active at one instant."""
    opts = options or LanePackingOptions()
    if not items:
        return 0
    starts = np.sort(np.asarray([item.start.toordinal() for item in items], dtype=np.int64))
    ends = np.sort(
        np.asarray([adjusted_end_ordinal(item, opts) + opts.gap_days for item in items], dtype=np.int64)
    )
    # At each start instant: intervals begun so far minus intervals already finished.
    begun = np.searchsorted(starts, starts, side="right")
    finished = np.searchsorted(ends, starts, side="right")
    return int(np.max(begun - finished))


def validate_lane_packing(
    assignments: Sequence[LaneAssignment], options: LanePackingOptions | None = None
) -> ValidationReport:
    opts = options or LanePackingOptions()
    errors: list[str] = []
    for lane_index, lane in enumerate(group_lanes(assignments)):
        ordered = sorted(lane, key=lambda item: (item.start, item.end))
        for prev, nxt in zip(ordered, ordered[1:]):
            if nxt.start.toordinal() < adjusted_end_ordinal(prev, opts) + opts.gap_days:
                errors.append(
                    f"Lane {lane_index}: `{nxt.item_id}` starts {format_date(nxt.start)} "
                    f"inside `{prev.item_id}` (ends {format_date(prev.end)}, gap_days={opts.gap_days})"
                )
    return ValidationReport(errors=tuple(errors))


def validate_lane_minimality(
    assignments: Sequence[LaneAssignment], options: LanePackingOptions | None = None
) -> ValidationReport:
    items = [a.item for a in assignments]
    expected = max_concurrency(items, options)
    actual = lane_count(assignments)
    if actual != expected:
        return ValidationReport(errors=(f"Lane count {actual} differs from maximum overlap {expected}",))
    return ValidationReport()


def validate_lane_determinism(
    items: Sequence[TimelineItem], options: LanePackingOptions | None = None
) -> ValidationReport:
    once = assign_lanes(items, options)
    twice = assign_lanes(items, options)
    if once != twice:
        return ValidationReport(errors=("Lane assignment is not deterministic across repeated calls",))
    return ValidationReport()


def validate_lane_suite(
    items: Sequence[TimelineItem], options: LanePackingOptions | None = None
) -> ValidationReport:
    assignments = assign_lanes(items, options)
    reports = (
        validate_lane_packing(assignments, options),
        validate_lane_minimality(assignments, options),
        validate_lane_determinism(items, options),
    )
    warnings: list[str] = []
    for item in items:
        if item.end < item.start:
            warnings.append(f"Item `{item.item_id}` ends before it starts")
    return ValidationReport(
        errors=tuple(error for report in reports for error in report.errors),
        warnings=tuple(warnings),
    )


def require_valid_lane_assignment(
    items: Sequence[TimelineItem], options: LanePackingOptions | None = None
) -> None:
    report = validate_lane_suite(items, options)
    if report.errors:
        joined = "; ".join(report.errors)
        raise ValueError(f"Lane validation failed: {joined}")
