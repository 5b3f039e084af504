from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
import tempfile
import unittest

from lanetrix_core.core.audit import JournalingMutationSink, JsonlMutationJournal
from lanetrix_core.core.items import InMemoryItemStore, TimelineItem


def _model() -> InMemoryItemStore:
    return InMemoryItemStore([{"id": "A", "name": "Alpha", "start": "2024-01-01", "end": "2024-01-03"}])


class MutationJournalTests(unittest.TestCase):
    def test_journal_persists_entry(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "journal.jsonl"
            journal = JsonlMutationJournal(path)
            journal.log({"ts_ns": 1, "kind": "move", "item_id": "A"})
            rows = path.read_text(encoding="utf-8").strip().splitlines()
            self.assertEqual(len(rows), 1)
            self.assertEqual(json.loads(rows[0])["kind"], "move")

    def test_journaling_sink_classifies_and_forwards(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = _model()
            journal = JsonlMutationJournal(Path(td) / "journal.jsonl")
            sink = JournalingMutationSink(store, journal, lookup=store)
            original = store.get("A")
            assert original is not None

            sink.change_item(original.with_changes(start=dt.date(2024, 1, 3), end=dt.date(2024, 1, 5)))
            sink.change_item(store.get("A").with_changes(name="Alpha 2"))  # type: ignore[union-attr]
            sink.change_item(store.get("A").with_changes(end=dt.date(2024, 1, 9)))  # type: ignore[union-attr]
            sink.change_item(store.get("A").with_changes(start=dt.date(2024, 1, 4)))  # type: ignore[union-attr]
            sink.change_item(store.get("A"))  # type: ignore[arg-type]

            self.assertEqual(store.get("A").name, "Alpha 2")  # type: ignore[union-attr]
            rows = journal.entries()
            self.assertEqual([row["kind"] for row in rows], ["move", "rename", "resize-end", "resize-start", "noop"])
            self.assertEqual(rows[0]["before"]["start"], "2024-01-01")
            self.assertEqual(rows[0]["after"]["start"], "2024-01-03")

            summary = journal.summarize()
            self.assertEqual(summary["total"], 5)
            self.assertEqual(summary["by_item"]["A"], 5)
            self.assertEqual(summary["by_kind"]["move"], 1)

    def test_without_lookup_every_entry_is_a_replace(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = _model()
            journal = JsonlMutationJournal(Path(td) / "journal.jsonl")
            sink = JournalingMutationSink(store, journal)
            sink.change_item(TimelineItem(item_id="A", name="Renamed", start="2024-01-01", end="2024-01-03"))
            rows = journal.entries()
            self.assertEqual(rows[0]["kind"], "replace")
            self.assertIsNone(rows[0]["before"])

    def test_malformed_lines_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "journal.jsonl"
            path.write_text('{"kind":"move","item_id":"A"}\nnot json\n\n', encoding="utf-8")
            journal = JsonlMutationJournal(path)
            with self.assertLogs("lanetrix_core.core.audit", level="WARNING"):
                rows = journal.entries()
            self.assertEqual(len(rows), 1)

    def test_missing_journal_reads_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            journal = JsonlMutationJournal(Path(td) / "sub" / "journal.jsonl")
            self.assertEqual(journal.entries(), [])
            self.assertEqual(journal.summarize()["total"], 0)


if __name__ == "__main__":
    unittest.main()
