"""Interactive lane timeline: viewport geometry, drag/resize/rename controller, renderers."""

from .config import TICK_STEP_CANDIDATES, TimelineViewConfig, load_view_config, view_config_from_dict
from .drag import (
    ControllerState,
    DragController,
    DragKind,
    DragSession,
    EditingState,
    HitRole,
    HitTarget,
    InputSurface,
    apply_drag_delta,
)
from .exporters import TimelineExportBundle, export_timeline_bundle, render_timeline_png
from .renderer import LaneRenderConfig, render_lanes_ascii
from .validation import (
    ValidationReport,
    max_concurrency,
    require_valid_lane_assignment,
    validate_lane_determinism,
    validate_lane_minimality,
    validate_lane_packing,
    validate_lane_suite,
)
from .view import TimelineLayout, TimelineView
from .viewport import BarGeometry, Tick, TickSequence, ViewportModel, ZoomResult, resolve_viewport_bounds

__all__ = [
    "BarGeometry",
    "ControllerState",
    "DragController",
    "DragKind",
    "DragSession",
    "EditingState",
    "HitRole",
    "HitTarget",
    "InputSurface",
    "LaneRenderConfig",
    "TICK_STEP_CANDIDATES",
    "Tick",
    "TickSequence",
    "TimelineExportBundle",
    "TimelineLayout",
    "TimelineView",
    "TimelineViewConfig",
    "ValidationReport",
    "ViewportModel",
    "ZoomResult",
    "apply_drag_delta",
    "export_timeline_bundle",
    "load_view_config",
    "max_concurrency",
    "render_lanes_ascii",
    "render_timeline_png",
    "require_valid_lane_assignment",
    "resolve_viewport_bounds",
    "validate_lane_determinism",
    "validate_lane_minimality",
    "validate_lane_packing",
    "validate_lane_suite",
    "view_config_from_dict",
]
