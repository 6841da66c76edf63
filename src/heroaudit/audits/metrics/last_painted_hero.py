"""
CONTRACT: inline
ROLE: Score the Last Painted Hero timing on a log-normal curve.

INPUTS:
  - Artifacts: traces, devtoolsLogs, HeroElements, ViewportDimensions
OUTPUTS:
  - score (0..1), raw_value (ms), display_value ("4.0 s")

CONFIG KEYS:
  - audits.last-painted-hero.options.score_podr: point of diminishing returns (ms)
  - audits.last-painted-hero.options.score_median: median (ms)

PERF / TIMING:
  - n/a

FAILURE MODES:
  - metric computation AuditError -> error result

LOG EVENTS:
  - module=audits.audit, event=audit_failed, payload keys=audit_id, code, error

TESTS:
  - tests/test_last_painted_hero_audit.py

CONTRACT DETAILS:
# Last Painted Hero

- A "hero" element is the largest header text or largest image element.
- Calibration: 75th and 95th percentiles of the HTTPArchive mobile corpus
  (2018-04-01) become the podr and median.
"""

from __future__ import annotations

from typing import Any, Dict

from heroaudit.audits.audit import Audit, AuditContext
from heroaudit.computed.metrics.last_painted_hero import ComputedLastPaintedHero
from heroaudit.lib import i18n


UI_STRINGS = {
    "title": "Last Painted Hero",
    "description": (
        'Last Painted Hero marks the time at which the last of the "hero" elements was '
        'painted. A "hero" element is the largest header text or largest image element. '
        "[Learn more](https://developers.google.com/web/tools/lighthouse/audits/first-contentful-paint)."
    ),
}


class LastPaintedHero(Audit):
    @classmethod
    def meta(cls) -> Dict[str, Any]:
        return {
            "id": "last-painted-hero",
            "title": UI_STRINGS["title"],
            "description": UI_STRINGS["description"],
            "score_display_mode": Audit.SCORING_MODES.NUMERIC,
            "required_artifacts": ["traces", "devtoolsLogs", "HeroElements", "ViewportDimensions"],
        }

    @classmethod
    def default_options(cls) -> Dict[str, Any]:
        return {
            "score_podr": 2000,
            "score_median": 4000,
        }

    @classmethod
    def audit(cls, artifacts: Dict[str, Any], context: AuditContext) -> Dict[str, Any]:
        trace = artifacts["traces"][Audit.DEFAULT_PASS]
        devtools_log = artifacts["devtoolsLogs"][Audit.DEFAULT_PASS]
        metric_data = {
            "hero_elements": artifacts["HeroElements"],
            "viewport": artifacts["ViewportDimensions"],
            "trace": trace,
            "devtools_log": devtools_log,
            "settings": context.settings,
        }
        metric_result = ComputedLastPaintedHero.request(metric_data, context)
        timing = metric_result["timing"]

        return {
            "score": Audit.compute_log_normal_score(
                timing,
                context.options["score_podr"],
                context.options["score_median"],
            ),
            "raw_value": timing,
            "display_value": i18n.format_message("seconds", {"time_in_ms": timing}),
        }
