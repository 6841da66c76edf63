"""
CONTRACT: inline
ROLE: Observed Last Painted Hero timing from a saved trace.

INPUTS:
  - hero_elements: [{"nodeId", "tagName", "kind", "boundingRect": {top, left, width, height}}]
  - viewport: {"innerWidth", "innerHeight"}
  - trace, devtools_log, settings
OUTPUTS:
  - {"timing": ms after navigationStart, "timestamp": trace us, "hero_node_id": int}

CONFIG KEYS:
  - settings.throttling_method: "simulate" is rejected

PERF / TIMING:
  - memoised per run via ComputedArtifact

FAILURE MODES:
  - no navigationStart -> AuditError(NO_NAVSTART)
  - no hero inside the viewport -> AuditError(NO_HERO_ELEMENTS)
  - visible hero never painted -> AuditError(HERO_NOT_PAINTED)

LOG EVENTS:
  - module=computed.last_painted_hero, event=metric_computed, payload keys=timing, heroes

TESTS:
  - tests/test_computed_last_painted_hero.py
"""

from __future__ import annotations

from typing import Any, Dict, List

from heroaudit.computed.computed_artifact import ComputedArtifact
from heroaudit.core import errors
from heroaudit.core.errors import AuditError
from heroaudit.lib import trace as trace_lib


def visible_heroes(hero_elements: List[Dict[str, Any]], viewport: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Hero elements whose bounding rect intersects the viewport."""
    width = float(viewport.get("innerWidth", 0) or 0)
    height = float(viewport.get("innerHeight", 0) or 0)
    visible = []
    for element in hero_elements or []:
        rect = element.get("boundingRect") or {}
        try:
            top = float(rect.get("top", 0))
            left = float(rect.get("left", 0))
            bottom = top + float(rect.get("height", 0))
            right = left + float(rect.get("width", 0))
        except (AttributeError, TypeError, ValueError):
            # Unmeasurable rects cannot be on screen.
            continue
        if bottom <= top or right <= left:
            continue
        if top < height and bottom > 0 and left < width and right > 0:
            visible.append(element)
    return visible


class ComputedLastPaintedHero(ComputedArtifact):
    name = "LastPaintedHero"

    @classmethod
    def compute(cls, data: Dict[str, Any], context: Any) -> Dict[str, Any]:
        settings = data.get("settings") or {}
        if settings.get("throttling_method") == "simulate":
            raise AuditError(errors.UNSUPPORTED_THROTTLING)

        events = trace_lib.trace_events(data.get("trace"))
        frame_id = trace_lib.find_main_frame_id(events, data.get("devtools_log"))
        navstart = trace_lib.find_navigation_start(events, frame_id)
        if navstart is None:
            raise AuditError(errors.NO_NAVSTART)

        heroes = visible_heroes(data.get("hero_elements") or [], data.get("viewport") or {})
        if not heroes:
            raise AuditError(errors.NO_HERO_ELEMENTS)

        paints = trace_lib.first_paints_by_node(events, navstart["ts"], frame_id)
        last_ts = None
        last_node = None
        for hero in heroes:
            node_id = trace_lib.parse_node_id(hero.get("nodeId"))
            paint_ts = paints.get(node_id) if node_id is not None else None
            if paint_ts is None:
                raise AuditError(
                    errors.HERO_NOT_PAINTED,
                    f"Hero element <{str(hero.get('tagName', '?')).lower()}> (node {node_id}) was never painted.",
                )
            if last_ts is None or paint_ts > last_ts:
                last_ts = paint_ts
                last_node = node_id

        timing = (last_ts - float(navstart["ts"])) / 1000.0
        if context.logger is not None:
            context.logger.emit(
                "debug",
                "computed.last_painted_hero",
                "metric_computed",
                {"timing": timing, "heroes": len(heroes)},
            )
        return {"timing": timing, "timestamp": last_ts, "hero_node_id": last_node}
