from .audit import JournalingMutationSink, JsonlMutationJournal
from .dates import (
    DATE_FORMAT,
    DateParseError,
    add_days,
    coerce_date,
    days_between,
    format_date,
    parse_date,
    today,
)
from .events import EVENT_TYPES, EventType, InputEvent, InputEventBus, input_event_from_dict
from .items import (
    InMemoryItemStore,
    ItemId,
    ItemLookup,
    ItemStore,
    MutationSink,
    NullMutationSink,
    TimelineItem,
    TimelinePayload,
    coerce_item,
    dump_items,
    item_from_dict,
    items_from_payload,
    load_timeline_payload,
    timeline_payload_from_json,
)
from .lanes import (
    LaneAssignment,
    LanePackingOptions,
    adjusted_end_ordinal,
    assign_lanes,
    assign_lanes_payload,
    flatten_lanes,
    group_lanes,
    lane_count,
    normalize_lane_result,
)

__all__ = [
    "DATE_FORMAT",
    "DateParseError",
    "EVENT_TYPES",
    "EventType",
    "InMemoryItemStore",
    "InputEvent",
    "InputEventBus",
    "ItemId",
    "ItemLookup",
    "ItemStore",
    "JournalingMutationSink",
    "JsonlMutationJournal",
    "LaneAssignment",
    "LanePackingOptions",
    "MutationSink",
    "NullMutationSink",
    "TimelineItem",
    "TimelinePayload",
    "add_days",
    "adjusted_end_ordinal",
    "assign_lanes",
    "assign_lanes_payload",
    "coerce_date",
    "coerce_item",
    "days_between",
    "dump_items",
    "flatten_lanes",
    "format_date",
    "group_lanes",
    "input_event_from_dict",
    "item_from_dict",
    "items_from_payload",
    "lane_count",
    "load_timeline_payload",
    "normalize_lane_result",
    "parse_date",
    "timeline_payload_from_json",
    "today",
]
