"""
CONTRACT: inline
ROLE: Base class for audits: metadata, scoring helpers and result assembly.

INPUTS:
  - artifacts dict, AuditContext
OUTPUTS:
  - audit result dict (id, title, description, score, score_display_mode,
    raw_value, display_value, details, error_message, warnings)

CONFIG KEYS:
  - audits.<id>.options: merged over default_options()

PERF / TIMING:
  - n/a

FAILURE MODES:
  - required artifact missing or errored -> error result
  - AuditError from audit() -> error result -> log audit_failed

LOG EVENTS:
  - module=audits.audit, event=audit_failed, payload keys=audit_id, error

TESTS:
  - tests/test_last_painted_hero_audit.py

CONTRACT DETAILS:
# Audit contract

- An audit declares meta() with id, title, description, score display mode
  and required artifacts.
- audit() returns a product dict with score, raw_value and display_value.
- Numeric scores are clamped to [0, 1] and rounded to two decimals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from heroaudit.core.errors import AuditError
from heroaudit.lib import statistics


DEFAULT_PASS = "defaultPass"
# Artifacts keyed by pass name; audits read the DEFAULT_PASS entry.
PER_PASS_ARTIFACTS = ("traces", "devtoolsLogs")


class ScoringModes:
    NUMERIC = "numeric"
    BINARY = "binary"
    MANUAL = "manual"
    INFORMATIVE = "informative"
    NOT_APPLICABLE = "not-applicable"
    ERROR = "error"


@dataclass
class AuditContext:
    """Per-audit inputs besides the artifacts."""

    options: Dict[str, Any] = field(default_factory=dict)
    settings: Dict[str, Any] = field(default_factory=dict)
    computed_cache: Dict[Any, Any] = field(default_factory=dict)
    logger: Optional[Any] = None


class Audit:
    DEFAULT_PASS = DEFAULT_PASS
    SCORING_MODES = ScoringModes

    @classmethod
    def meta(cls) -> Dict[str, Any]:
        raise NotImplementedError(f"{cls.__name__} must define meta()")

    @classmethod
    def default_options(cls) -> Dict[str, Any]:
        return {}

    @classmethod
    def audit(cls, artifacts: Dict[str, Any], context: AuditContext) -> Dict[str, Any]:
        raise NotImplementedError(f"{cls.__name__} must define audit()")

    @staticmethod
    def compute_log_normal_score(measured_value: float, diminishing_returns_value: float, median_value: float) -> float:
        distribution = statistics.get_log_normal_distribution(median_value, diminishing_returns_value)
        score = distribution.compute_complementary_percentile(measured_value)
        score = min(1.0, max(0.0, score))
        return statistics.clamp_to_2_decimals(score)

    @classmethod
    def run(cls, artifacts: Dict[str, Any], context: AuditContext) -> Dict[str, Any]:
        """Check required artifacts, run audit() and build the result."""
        meta = cls.meta()
        logger = context.logger
        for name in meta.get("required_artifacts", []):
            message = _artifact_problem(artifacts, name)
            if message is not None:
                if logger is not None:
                    logger.emit("warning", "audits.audit", "audit_failed", {"audit_id": meta["id"], "error": message})
                return generate_error_result(cls, message)

        try:
            product = cls.audit(artifacts, context)
        except AuditError as exc:
            if logger is not None:
                logger.emit(
                    "warning",
                    "audits.audit",
                    "audit_failed",
                    {"audit_id": meta["id"], "code": exc.code, "error": exc.friendly_message},
                )
            return generate_error_result(cls, f"Audit error: {exc.friendly_message}")
        return generate_audit_result(cls, product)


def _artifact_problem(artifacts: Dict[str, Any], name: str) -> Optional[str]:
    if name not in artifacts or artifacts[name] is None:
        return f"Required {name} gatherer did not run."
    value = artifacts[name]
    if isinstance(value, Exception):
        return f"Required {name} gatherer encountered an error: {value}"
    if name in PER_PASS_ARTIFACTS:
        if not isinstance(value, dict) or value.get(DEFAULT_PASS) is None:
            return f"Required {name} gatherer did not run."
        if isinstance(value[DEFAULT_PASS], Exception):
            return f"Required {name} gatherer encountered an error: {value[DEFAULT_PASS]}"
        return None
    if isinstance(value, dict):
        # Per-pass artifacts can fail for a single pass.
        for item in value.values():
            if isinstance(item, Exception):
                return f"Required {name} gatherer encountered an error: {item}"
    return None


def generate_error_result(audit_cls: Any, message: str) -> Dict[str, Any]:
    meta = audit_cls.meta()
    return {
        "id": meta["id"],
        "title": meta["title"],
        "description": meta["description"],
        "score": None,
        "score_display_mode": ScoringModes.ERROR,
        "raw_value": None,
        "display_value": "",
        "details": None,
        "error_message": message,
        "warnings": [],
    }


def generate_audit_result(audit_cls: Any, product: Dict[str, Any]) -> Dict[str, Any]:
    """Merge audit metadata with the product returned by audit()."""
    meta = audit_cls.meta()
    score_display_mode = meta.get("score_display_mode", ScoringModes.BINARY)
    score = product.get("score")

    if score_display_mode in (ScoringModes.NUMERIC, ScoringModes.BINARY):
        if score is None:
            return generate_error_result(audit_cls, product.get("error_message") or "Audit returned no score.")
        if isinstance(score, bool):
            score = 1.0 if score else 0.0
        score = statistics.clamp_to_2_decimals(min(1.0, max(0.0, float(score))))
    elif score_display_mode in (ScoringModes.MANUAL, ScoringModes.INFORMATIVE, ScoringModes.NOT_APPLICABLE):
        score = None

    if product.get("not_applicable"):
        score_display_mode = ScoringModes.NOT_APPLICABLE
        score = None

    return {
        "id": meta["id"],
        "title": meta["title"],
        "description": meta["description"],
        "score": score,
        "score_display_mode": score_display_mode,
        "raw_value": product.get("raw_value"),
        "display_value": product.get("display_value", ""),
        "details": product.get("details"),
        "error_message": product.get("error_message"),
        "warnings": list(product.get("warnings", [])),
    }
