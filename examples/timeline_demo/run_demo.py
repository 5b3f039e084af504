from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from lanetrix_core.core import InMemoryItemStore, input_event_from_dict, load_timeline_payload
from lanetrix_ui.timeline import (
    HitTarget,
    TimelineView,
    export_timeline_bundle,
    load_view_config,
    render_lanes_ascii,
)

DEMO_DIR = Path(__file__).resolve().parent


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a scripted drag/rename session and export the result.")
    parser.add_argument("--items", default=str(DEMO_DIR / "items.json"))
    parser.add_argument("--config", default=str(DEMO_DIR / "timeline.toml"))
    parser.add_argument("--script", default=str(DEMO_DIR / "script.json"))
    parser.add_argument("--export-dir", default=str(DEMO_DIR / "out"))
    return parser.parse_args()


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    config = load_view_config(args.config)
    payload = load_timeline_payload(args.items)
    store = InMemoryItemStore(payload.items)
    view = TimelineView(
        store,
        config=config,
        viewport_start=payload.viewport_start,
        viewport_end=payload.viewport_end,
    )
    try:
        print(render_lanes_ascii(view.lanes, view.viewport, title="Before"))
        for raw in json.loads(Path(args.script).read_text(encoding="utf-8")):
            target = raw.get("target")
            hit = HitTarget(item_id=target["item_id"], role=target.get("role", "body")) if target else None
            view.handle_event(input_event_from_dict(raw), hit)
        print(render_lanes_ascii(view.lanes, view.viewport, title="After"))
        layout = view.layout(visible_width=1280)
        print(f"pixels_per_day={view.pixels_per_day:.1f} scroll={view.scroll_offset:.1f} tick_step={layout.tick_step}")
        bundle = export_timeline_bundle(
            view.lanes,
            view.viewport,
            out_dir=args.export_dir,
            prefix="demo",
            title="Timeline demo",
            lane_height_px=config.lane_height_px,
            min_label_px=config.min_label_px,
        )
    finally:
        view.close()
    print(json.dumps(bundle.as_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
