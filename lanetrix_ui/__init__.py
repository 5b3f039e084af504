"""First-party UI view-models and renderers for Lanetrix."""

from .timeline import (
    DragController,
    HitTarget,
    TimelineLayout,
    TimelineView,
    TimelineViewConfig,
    ViewportModel,
    export_timeline_bundle,
    render_lanes_ascii,
)

__all__ = [
    "DragController",
    "HitTarget",
    "TimelineLayout",
    "TimelineView",
    "TimelineViewConfig",
    "ViewportModel",
    "export_timeline_bundle",
    "render_lanes_ascii",
]
