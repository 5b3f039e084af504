from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from .items import ItemLookup, MutationSink, TimelineItem

LOGGER = logging.getLogger(__name__)


class JsonlMutationJournal:
    """Append-only JSONL record of item mutations delivered to the host."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: dict[str, Any]) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(entry, separators=(",", ":"), sort_keys=True, default=str))
            f.write("\n")

    def entries(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        rows: list[dict[str, Any]] = []
        with self.path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    rows.append(json.loads(line))
                except json.JSONDecodeError:
                    LOGGER.warning("skipping malformed journal line %d in %s", line_no, self.path)
        return rows

    def summarize(self) -> dict[str, Any]:
        kind_counts: dict[str, int] = {}
        item_counts: dict[str, int] = {}
        rows = self.entries()
        for row in rows:
            kind = str(row.get("kind", ""))
            item_id = str(row.get("item_id", ""))
            kind_counts[kind] = kind_counts.get(kind, 0) + 1
            item_counts[item_id] = item_counts.get(item_id, 0) + 1
        return {"total": len(rows), "by_kind": kind_counts, "by_item": item_counts}


class JournalingMutationSink:
    """Forwards mutations to `inner` and records each one in the journal.

    When `lookup` is given the pre-mutation record is read from it so the journal can
    classify the change.
    """

    def __init__(
        self,
        inner: MutationSink,
        journal: JsonlMutationJournal,
        *,
        lookup: ItemLookup | None = None,
    ) -> None:
        self._inner = inner
        self._journal = journal
        self._lookup = lookup

    def change_item(self, updated: TimelineItem) -> None:
        before = self._lookup.get(updated.item_id) if self._lookup is not None else None
        self._inner.change_item(updated)
        self._journal.log(
            {
                "ts_ns": time.time_ns(),
                "kind": _mutation_kind(before, updated),
                "item_id": updated.item_id,
                "before": None if before is None else before.to_dict(),
                "after": updated.to_dict(),
            }
        )


def _mutation_kind(before: TimelineItem | None, after: TimelineItem) -> str:
    if before is None:
        return "replace"
    changed = [
        field
        for field in ("name", "start", "end")
        if getattr(before, field) != getattr(after, field)
    ]
    if not changed:
        return "noop"
    if changed == ["name"]:
        return "rename"
    if changed == ["start"]:
        return "resize-start"
    if changed == ["end"]:
        return "resize-end"
    if set(changed) == {"start", "end"}:
        return "move"
    return "replace"
