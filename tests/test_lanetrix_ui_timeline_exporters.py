from __future__ import annotations

import datetime as dt
import json
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from lanetrix_core.core.lanes import assign_lanes
from lanetrix_ui.timeline.exporters import export_timeline_bundle, render_timeline_png
from lanetrix_ui.timeline.viewport import ViewportModel


def _items() -> list[dict[str, object]]:
    return [
        {"id": "A", "name": "Alpha", "start": "2024-01-01", "end": "2024-01-03"},
        {"id": "B", "name": "Beta with a rather long name", "start": "2024-01-02", "end": "2024-01-04"},
        {"id": "C", "name": "Gamma", "start": "2024-01-05", "end": "2024-01-06"},
    ]


class TimelineExportersTests(unittest.TestCase):
    def test_export_bundle_writes_ascii_markdown_json_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            viewport = ViewportModel(min_date="2024-01-01", max_date="2024-01-06")
            bundle = export_timeline_bundle(
                assign_lanes(_items()),
                viewport,
                out_dir=Path(tmp) / "out",
                prefix="unit",
                title="Unit Export",
                today=dt.date(2024, 1, 4),
            )

            for path in bundle.as_dict().values():
                self.assertTrue(Path(path).exists(), path)
            self.assertEqual(bundle.png_overview.name, "unit_overview.png")
            self.assertGreater(bundle.png_overview.stat().st_size, 0)

            lanes = json.loads(bundle.lanes_json.read_text(encoding="utf-8"))
            self.assertEqual({row["id"]: row["lane"] for row in lanes}, {"A": 0, "B": 1, "C": 0})

            overview = bundle.markdown_overview.read_text(encoding="utf-8")
            self.assertTrue(overview.startswith("# Unit Export"))
            self.assertIn("| Lane | Id | Name | Start | End |", overview)
            self.assertIn("| 2 | B | Beta with a rather long name | 2024-01-02 | 2024-01-04 |", overview)

            with Image.open(bundle.png_overview) as image:
                self.assertEqual(image.size, (180 + 6 * 70, 24 + 2 * 50))

    def test_png_is_scaled_down_to_max_width(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            viewport = ViewportModel(min_date="2024-01-01", max_date="2024-12-31")
            out = render_timeline_png(
                assign_lanes(_items()),
                viewport,
                out_path=Path(tmp) / "wide.png",
                max_width_px=2000,
            )
            with Image.open(out) as image:
                self.assertLessEqual(image.size[0], 2000)
                self.assertGreater(image.size[0], 1000)

    def test_multi_year_range_respects_max_width_below_min_scale(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            items = [{"id": "L", "name": "Long haul", "start": "2020-01-01", "end": "2024-12-31"}]
            viewport = ViewportModel(min_date="2020-01-01", max_date="2024-12-31")
            out = render_timeline_png(
                assign_lanes(items),
                viewport,
                out_path=Path(tmp) / "years.png",
                max_width_px=4096,
            )
            with Image.open(out) as image:
                self.assertLessEqual(image.size[0], 4096)
                self.assertGreater(image.size[0], 4000)

    def test_empty_timeline_still_renders_one_lane(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            viewport = ViewportModel(min_date="2024-01-01", max_date="2024-01-01")
            out = render_timeline_png((), viewport, out_path=Path(tmp) / "empty.png")
            with Image.open(out) as image:
                self.assertEqual(image.size, (180 + 70, 24 + 50))


if __name__ == "__main__":
    unittest.main()
