from __future__ import annotations

import unittest

from lanetrix_core.core.items import TimelineItem
from lanetrix_core.core.lanes import LaneAssignment, LanePackingOptions, assign_lanes
from lanetrix_ui.timeline.validation import (
    max_concurrency,
    require_valid_lane_assignment,
    validate_lane_minimality,
    validate_lane_packing,
    validate_lane_suite,
)


def _items() -> list[TimelineItem]:
    return [
        TimelineItem(item_id="A", name="Alpha", start="2024-01-01", end="2024-01-03"),
        TimelineItem(item_id="B", name="Beta", start="2024-01-02", end="2024-01-04"),
        TimelineItem(item_id="C", name="Gamma", start="2024-01-05", end="2024-01-06"),
    ]


class LaneValidationTests(unittest.TestCase):
    def test_max_concurrency(self) -> None:
        self.assertEqual(max_concurrency(_items()), 2)
        self.assertEqual(max_concurrency([]), 0)
        self.assertEqual(max_concurrency(_items(), LanePackingOptions(gap_days=4)), 3)

    def test_greedy_result_passes_suite(self) -> None:
        report = validate_lane_suite(_items(), LanePackingOptions(gap_days=1, min_span_days=2))
        self.assertTrue(report.ok, report.errors)
        require_valid_lane_assignment(_items())

    def test_overlap_in_one_lane_is_reported(self) -> None:
        a, b, _c = _items()
        bad = (LaneAssignment(item=a, lane=0), LaneAssignment(item=b, lane=0))
        report = validate_lane_packing(bad)
        self.assertFalse(report.ok)
        self.assertIn("`B`", report.errors[0])

    def test_extra_lanes_are_reported(self) -> None:
        wasteful = tuple(LaneAssignment(item=item, lane=i) for i, item in enumerate(_items()))
        report = validate_lane_minimality(wasteful)
        self.assertFalse(report.ok)
        self.assertIn("differs", report.errors[0])
        self.assertTrue(validate_lane_minimality(assign_lanes(_items())).ok)

    def test_inverted_item_is_a_warning(self) -> None:
        items = _items() + [TimelineItem(item_id="D", name="Delta", start="2024-01-09", end="2024-01-07")]
        report = validate_lane_suite(items)
        self.assertTrue(report.ok)
        self.assertEqual(len(report.warnings), 1)


if __name__ == "__main__":
    unittest.main()
