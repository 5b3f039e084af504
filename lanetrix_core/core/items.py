from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Hashable, Iterable, Mapping, Protocol

from .dates import coerce_date, format_date

LOGGER = logging.getLogger(__name__)

ItemId = Hashable
StoreListener = Callable[[tuple["TimelineItem", ...]], None]


@dataclass(frozen=True)
class TimelineItem:
    item_id: ItemId
    name: str
    start: dt.date
    end: dt.date

    def __post_init__(self) -> None:
        if self.item_id is None:
            raise ValueError("TimelineItem.item_id must not be None")
        # Dates may arrive as wire strings; normalize once so geometry never sees text.
        object.__setattr__(self, "start", coerce_date(self.start))
        object.__setattr__(self, "end", coerce_date(self.end))
        object.__setattr__(self, "name", str(self.name))

    def with_changes(self, **changes: object) -> "TimelineItem":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.item_id,
            "name": self.name,
            "start": format_date(self.start),
            "end": format_date(self.end),
        }


@dataclass(frozen=True)
class TimelinePayload:
    items: tuple[TimelineItem, ...]
    viewport_start: str | None = None
    viewport_end: str | None = None


class ItemLookup(Protocol):
    def get(self, item_id: ItemId) -> TimelineItem | None:
        ...


class MutationSink(Protocol):
    def change_item(self, updated: TimelineItem) -> None:
        ...


class ItemStore(ItemLookup, MutationSink, Protocol):
    def items(self) -> tuple[TimelineItem, ...]:
        ...

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        ...


class NullMutationSink:
    """Explicit "no handler" sink: mutations are dropped and logged at debug level."""

    def change_item(self, updated: TimelineItem) -> None:
        LOGGER.debug("mutation for item %r dropped (no sink configured)", updated.item_id)


class InMemoryItemStore:
    """Keyed replace-by-id store with synchronous change notification."""

    def __init__(self, items: Iterable[TimelineItem | Mapping[str, object]] = ()) -> None:
        self._order: list[ItemId] = []
        self._items: dict[ItemId, TimelineItem] = {}
        self._listeners: list[StoreListener] = []
        for raw in items:
            item = coerce_item(raw)
            if item.item_id in self._items:
                raise ValueError(f"duplicate item id: {item.item_id!r}")
            self._order.append(item.item_id)
            self._items[item.item_id] = item

    def __len__(self) -> int:
        return len(self._order)

    def items(self) -> tuple[TimelineItem, ...]:
        return tuple(self._items[item_id] for item_id in self._order)

    def get(self, item_id: ItemId) -> TimelineItem | None:
        return self._items.get(item_id)

    def replace(self, updated: TimelineItem) -> bool:
        if updated.item_id not in self._items:
            LOGGER.debug("replace ignored for unknown item %r", updated.item_id)
            return False
        if self._items[updated.item_id] == updated:
            return True
        self._items[updated.item_id] = updated
        self._notify()
        return True

    def change_item(self, updated: TimelineItem) -> None:
        self.replace(updated)

    def remove(self, item_id: ItemId) -> bool:
        if item_id not in self._items:
            return False
        del self._items[item_id]
        self._order.remove(item_id)
        self._notify()
        return True

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.items()
        for listener in tuple(self._listeners):
            listener(snapshot)


def coerce_item(raw: TimelineItem | Mapping[str, object]) -> TimelineItem:
    if isinstance(raw, TimelineItem):
        return raw
    if isinstance(raw, Mapping):
        return item_from_dict(raw)
    raise TypeError(f"Expected TimelineItem or mapping, got {type(raw).__name__}")


def item_from_dict(raw: Mapping[str, object]) -> TimelineItem:
    try:
        item_id = raw["id"]
        start = raw["start"]
        end = raw["end"]
    except KeyError as exc:
        raise ValueError(f"item missing required field: {exc.args[0]}") from exc
    return TimelineItem(
        item_id=item_id,
        name=str(raw.get("name", "")),
        start=start,
        end=end,
    )


def items_from_payload(raw_items: object) -> tuple[TimelineItem, ...]:
    if not isinstance(raw_items, list):
        raise TypeError("`items` must be a list")
    out: list[TimelineItem] = []
    for raw in raw_items:
        if not isinstance(raw, Mapping):
            raise TypeError("Each item must be a mapping")
        out.append(item_from_dict(raw))
    return tuple(out)


def timeline_payload_from_json(payload: object) -> TimelinePayload:
    if isinstance(payload, list):
        return TimelinePayload(items=items_from_payload(payload))
    if not isinstance(payload, Mapping):
        raise TypeError("Timeline payload must be a JSON list or object")
    return TimelinePayload(
        items=items_from_payload(payload.get("items", [])),
        viewport_start=_coerce_optional_str(payload.get("viewport_start")),
        viewport_end=_coerce_optional_str(payload.get("viewport_end")),
    )


def load_timeline_payload(path: str | Path) -> TimelinePayload:
    source = Path(path)
    payload = json.loads(source.read_text(encoding="utf-8"))
    return timeline_payload_from_json(payload)


def dump_items(items: Iterable[TimelineItem], path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps([item.to_dict() for item in items], indent=2) + "\n",
        encoding="utf-8",
    )
    return target


def _coerce_optional_str(raw: object) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text if text else None
