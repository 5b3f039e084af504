from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Mapping, Sequence

from lanetrix_core.core import (
    InMemoryItemStore,
    JournalingMutationSink,
    JsonlMutationJournal,
    LanePackingOptions,
    MutationSink,
    assign_lanes,
    assign_lanes_payload,
    dump_items,
    input_event_from_dict,
    load_timeline_payload,
)
from lanetrix_ui.timeline import (
    HitTarget,
    TimelineView,
    TimelineViewConfig,
    ViewportModel,
    export_timeline_bundle,
    load_view_config,
    render_lanes_ascii,
    resolve_viewport_bounds,
)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="lanetrix")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    assign = sub.add_parser("assign", help="Attach lane indexes to the items of a JSON file.")
    assign.add_argument("items", type=Path)
    assign.add_argument("--gap-days", type=int, default=0)
    assign.add_argument("--min-span-days", type=int, default=0)
    assign.add_argument("--out", type=Path, default=None, help="Output path. Default: stdout.")

    render = sub.add_parser("render", help="Print an ASCII lane chart.")
    render.add_argument("items", type=Path)
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [timeline] table.")
    render.add_argument("--title", default="Timeline")

    export = sub.add_parser("export", help="Write ASCII/Markdown/JSON/PNG artifacts.")
    export.add_argument("items", type=Path)
    export.add_argument("--out-dir", type=Path, required=True)
    export.add_argument("--prefix", default="timeline")
    export.add_argument("--config", type=Path, default=None)
    export.add_argument("--title", default="Timeline")

    replay = sub.add_parser("replay", help="Feed a JSON input-event script through the timeline view.")
    replay.add_argument("items", type=Path)
    replay.add_argument("script", type=Path)
    replay.add_argument("--out", type=Path, default=None, help="Output path for updated items. Default: stdout.")
    replay.add_argument("--journal", type=Path, default=None, help="Append applied mutations to this JSONL file.")
    replay.add_argument("--config", type=Path, default=None)
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.command == "assign":
        payload = load_timeline_payload(args.items)
        out = assign_lanes_payload(
            [item.to_dict() for item in payload.items],
            gap_days=args.gap_days,
            min_span_days=args.min_span_days,
        )
        _write_text(json.dumps(out, indent=2) + "\n", args.out)
        return

    if args.command == "render":
        config = _load_config(args.config)
        payload = load_timeline_payload(args.items)
        assignments, viewport = _layout(payload, config)
        sys.stdout.write(render_lanes_ascii(assignments, viewport, title=args.title))
        return

    if args.command == "export":
        config = _load_config(args.config)
        payload = load_timeline_payload(args.items)
        assignments, viewport = _layout(payload, config)
        bundle = export_timeline_bundle(
            assignments,
            viewport,
            out_dir=args.out_dir,
            prefix=args.prefix,
            title=args.title,
            lane_height_px=config.lane_height_px,
            min_label_px=config.min_label_px,
        )
        print(json.dumps(bundle.as_dict(), indent=2, sort_keys=True))
        return

    if args.command == "replay":
        config = _load_config(args.config)
        payload = load_timeline_payload(args.items)
        store = InMemoryItemStore(payload.items)
        sink: MutationSink = store
        if args.journal is not None:
            sink = JournalingMutationSink(store, JsonlMutationJournal(args.journal), lookup=store)
        view = TimelineView(
            store,
            config=config,
            sink=sink,
            viewport_start=payload.viewport_start,
            viewport_end=payload.viewport_end,
        )
        try:
            for raw in _load_script(args.script):
                view.handle_event(input_event_from_dict(raw), _target_from_dict(raw.get("target")))
        finally:
            view.close()
        if args.out is not None:
            print(dump_items(store.items(), args.out))
        else:
            sys.stdout.write(json.dumps([item.to_dict() for item in store.items()], indent=2) + "\n")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _load_config(path: Path | None) -> TimelineViewConfig:
    if path is None:
        return TimelineViewConfig()
    return load_view_config(path)


def _layout(payload, config: TimelineViewConfig):
    options = LanePackingOptions(gap_days=config.gap_days, min_span_days=config.min_span_days)
    assignments = assign_lanes(payload.items, options)
    low, high = resolve_viewport_bounds(
        payload.items,
        viewport_start=payload.viewport_start,
        viewport_end=payload.viewport_end,
    )
    return assignments, ViewportModel.from_config(low, high, config)


def _load_script(path: Path) -> list[Mapping[str, object]]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list) or not all(isinstance(entry, Mapping) for entry in raw):
        raise TypeError("event script must be a JSON list of objects")
    return raw


def _target_from_dict(raw: object) -> HitTarget | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise TypeError("`target` must be an object")
    role = str(raw.get("role", "body"))
    if role not in ("resize-start", "resize-end", "body"):
        raise ValueError(f"unsupported hit role: {role}")
    return HitTarget(item_id=raw["item_id"], role=role)  # type: ignore[arg-type]


def _write_text(text: str, out: Path | None) -> None:
    if out is None:
        sys.stdout.write(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(out)


if __name__ == "__main__":
    main()
