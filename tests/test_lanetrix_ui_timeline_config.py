from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from lanetrix_ui.timeline.config import TimelineViewConfig, load_view_config, view_config_from_dict


class TimelineViewConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = TimelineViewConfig()
        self.assertEqual(cfg.pixels_per_day, 70)
        self.assertEqual(cfg.gutter_width, 180)
        self.assertEqual((cfg.min_scale, cfg.max_scale), (4, 400))
        self.assertEqual((cfg.zoom_in_factor, cfg.zoom_out_factor), (1.1, 0.9))
        self.assertEqual(cfg.min_label_px, 80)
        self.assertEqual(cfg.drag_threshold_px, 4)
        self.assertEqual(cfg.tick_steps, (1, 2, 3, 5, 7, 10, 14, 21, 30))

    def test_invalid_values_are_rejected(self) -> None:
        for overrides in (
            {"min_scale": 0},
            {"max_scale": 2},
            {"pixels_per_day": 1000},
            {"zoom_in_factor": 1.0},
            {"zoom_out_factor": 1.2},
            {"drag_threshold_px": -1},
            {"lane_height_px": 0},
            {"gap_days": -1},
            {"tick_steps": ()},
            {"tick_steps": (1, 5, 3)},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError):
                    TimelineViewConfig(**overrides)  # type: ignore[arg-type]

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with self.assertRaises(ValueError):
            view_config_from_dict({"pixels_per_dya": 10})
        cfg = view_config_from_dict({"pixels_per_day": 20, "tick_steps": [1, 7, 30]})
        self.assertEqual(cfg.tick_steps, (1, 7, 30))

    def test_load_from_toml_timeline_table(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "lanetrix.toml"
            path.write_text(
                "[timeline]\n"
                "pixels_per_day = 35.0\n"
                "gap_days = 1\n"
                "min_label_px = 60.0\n"
                "\n"
                "[unrelated]\n"
                "value = 1\n",
                encoding="utf-8",
            )
            cfg = load_view_config(path)
            self.assertEqual(cfg.pixels_per_day, 35.0)
            self.assertEqual(cfg.gap_days, 1)
            self.assertEqual(cfg.min_label_px, 60.0)
            self.assertEqual(cfg.gutter_width, 180)

    def test_missing_table_uses_defaults_and_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "empty.toml"
            path.write_text("", encoding="utf-8")
            self.assertEqual(load_view_config(path), TimelineViewConfig())
            with self.assertRaises(FileNotFoundError):
                load_view_config(Path(td) / "missing.toml")


if __name__ == "__main__":
    unittest.main()
