from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest

from main import main


def _items() -> list[dict[str, object]]:
    return [
        {"id": "A", "name": "Alpha", "start": "2024-01-01", "end": "2024-01-03"},
        {"id": "B", "name": "Beta", "start": "2024-01-02", "end": "2024-01-04"},
        {"id": "C", "name": "Gamma", "start": "2024-01-05", "end": "2024-01-06"},
    ]


def _run(argv: list[str]) -> str:
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        main(argv)
    return out.getvalue()


class MainCliTests(unittest.TestCase):
    def test_assign_prints_lane_payload(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "items.json"
            path.write_text(json.dumps(_items()), encoding="utf-8")
            rows = json.loads(_run(["assign", str(path)]))
            self.assertEqual([row["lane"] for row in rows], [0, 1, 0])

            spaced = json.loads(_run(["assign", str(path), "--gap-days", "3"]))
            self.assertEqual({row["id"]: row["lane"] for row in spaced}, {"A": 0, "B": 1, "C": 2})

    def test_render_uses_payload_viewport(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "items.json"
            path.write_text(
                json.dumps({"items": _items(), "viewport_start": "2023-12-30", "viewport_end": "2024-01-08"}),
                encoding="utf-8",
            )
            text = _run(["render", str(path), "--title", "Demo"])
            self.assertTrue(text.startswith("Demo\n"))
            self.assertIn("Range: 2023-12-30 .. 2024-01-08 | days=10 | lanes=2", text)

    def test_export_prints_bundle_manifest(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "items.json"
            path.write_text(json.dumps(_items()), encoding="utf-8")
            manifest = json.loads(_run(["export", str(path), "--out-dir", str(Path(td) / "out"), "--prefix", "cli"]))
            self.assertEqual(set(manifest), {"ascii_lanes", "markdown_overview", "lanes_json", "png_overview"})
            self.assertTrue(Path(manifest["png_overview"]).exists())

    def test_replay_applies_move_and_rename(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            items_path = Path(td) / "items.json"
            items_path.write_text(json.dumps(_items()), encoding="utf-8")
            script_path = Path(td) / "script.json"
            script_path.write_text(
                json.dumps(
                    [
                        {"type": "pointer_down", "x": 100, "target": {"item_id": "A", "role": "body"}},
                        {"type": "pointer_move", "x": 170},
                        {"type": "pointer_move", "x": 240},
                        {"type": "pointer_up", "x": 240},
                        {"type": "double_click", "target": {"item_id": "C"}},
                        {"type": "key_down", "text": "Gamma 2", "key": "Enter"},
                    ]
                ),
                encoding="utf-8",
            )
            journal_path = Path(td) / "journal.jsonl"
            rows = json.loads(_run(["replay", str(items_path), str(script_path), "--journal", str(journal_path)]))
            by_id = {row["id"]: row for row in rows}
            self.assertEqual((by_id["A"]["start"], by_id["A"]["end"]), ("2024-01-03", "2024-01-05"))
            self.assertEqual(by_id["C"]["name"], "Gamma 2")

            kinds = [json.loads(line)["kind"] for line in journal_path.read_text(encoding="utf-8").splitlines()]
            self.assertEqual(kinds, ["move", "move", "rename"])

    def test_replay_rejects_bad_target_role(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            items_path = Path(td) / "items.json"
            items_path.write_text(json.dumps(_items()), encoding="utf-8")
            script_path = Path(td) / "script.json"
            script_path.write_text(
                json.dumps([{"type": "pointer_down", "x": 1, "target": {"item_id": "A", "role": "corner"}}]),
                encoding="utf-8",
            )
            with self.assertRaises(ValueError):
                _run(["replay", str(items_path), str(script_path)])


if __name__ == "__main__":
    unittest.main()
