"""
CONTRACT: inline
ROLE: Read navigation and paint events out of a saved Chrome trace.

INPUTS:
  - trace: {"traceEvents": [...]} or a bare event list
  - devtools_log: list of {"method", "params"} protocol messages
OUTPUTS:
  - main frame id, navigationStart event, first paint per DOM node

CONFIG KEYS:
  - n/a

PERF / TIMING:
  - single pass over the event list per query

FAILURE MODES:
  - malformed trace -> AuditError(INVALID_TRACE)

LOG EVENTS:
  - n/a

TESTS:
  - tests/test_computed_last_painted_hero.py
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from heroaudit.core.errors import INVALID_TRACE, AuditError


TraceEvent = Dict[str, Any]


def trace_events(trace: Any) -> List[TraceEvent]:
    """Events sorted by timestamp."""
    if isinstance(trace, dict):
        events = trace.get("traceEvents")
    else:
        events = trace
    if not isinstance(events, list):
        raise AuditError(INVALID_TRACE, "Trace has no traceEvents list.")
    valid = [e for e in events if isinstance(e, dict) and isinstance(e.get("ts"), (int, float))]
    valid.sort(key=lambda e: e["ts"])
    return valid


def _args_data(event: TraceEvent) -> Dict[str, Any]:
    args = event.get("args") or {}
    data = args.get("data") if isinstance(args, dict) else None
    return data if isinstance(data, dict) else {}


def find_main_frame_id(events: List[TraceEvent], devtools_log: Optional[List[Dict[str, Any]]] = None) -> Optional[str]:
    """Main frame from the trace, falling back to the devtools log."""
    for event in events:
        if event.get("name") == "TracingStartedInPage":
            page = _args_data(event).get("page")
            if page:
                return str(page)
    for message in devtools_log or []:
        if not isinstance(message, dict) or message.get("method") != "Page.frameNavigated":
            continue
        frame = (message.get("params") or {}).get("frame") or {}
        if frame.get("id") and not frame.get("parentId"):
            return str(frame["id"])
    return None


def find_navigation_start(events: List[TraceEvent], frame_id: Optional[str]) -> Optional[TraceEvent]:
    for event in events:
        if event.get("name") != "navigationStart":
            continue
        args = event.get("args") or {}
        if frame_id is not None and args.get("frame") not in (None, frame_id):
            continue
        return event
    return None


def parse_node_id(value: Any) -> Optional[int]:
    """DOM nodeId as an int, or None when the value is unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def first_paints_by_node(
    events: List[TraceEvent],
    since_ts: float,
    frame_id: Optional[str] = None,
) -> Dict[int, float]:
    """Earliest Paint timestamp (us) per DOM nodeId at or after `since_ts`."""
    paints: Dict[int, float] = {}
    for event in events:
        if event.get("name") != "Paint" or event["ts"] < since_ts:
            continue
        data = _args_data(event)
        node_id = parse_node_id(data.get("nodeId"))
        if node_id is None:
            continue
        if frame_id is not None and data.get("frame") not in (None, frame_id):
            continue
        if node_id not in paints:
            paints[node_id] = float(event["ts"])
    return paints
