"""
CONTRACT: inline
ROLE: Exception types shared by audits, computed artifacts and the runner.

INPUTS:
  - n/a
OUTPUTS:
  - n/a

CONFIG KEYS:
  - n/a

PERF / TIMING:
  - n/a

FAILURE MODES:
  - AuditError -> error result for the audit, run continues
  - ArtifactError -> error result for every audit requiring the artifact

LOG EVENTS:
  - module=audits.audit, event=audit_failed, payload keys=audit_id, code, error

TESTS:
  - tests/test_last_painted_hero_audit.py
"""

from __future__ import annotations

from typing import Optional


# Codes raised by the observed metric computation.
NO_NAVSTART = "NO_NAVSTART"
NO_HERO_ELEMENTS = "NO_HERO_ELEMENTS"
HERO_NOT_PAINTED = "HERO_NOT_PAINTED"
UNSUPPORTED_THROTTLING = "UNSUPPORTED_THROTTLING"
INVALID_TRACE = "INVALID_TRACE"

_DEFAULT_MESSAGES = {
    NO_NAVSTART: "No navigationStart event found in the trace.",
    NO_HERO_ELEMENTS: "No hero elements were found within the viewport.",
    HERO_NOT_PAINTED: "A hero element was never painted during the trace.",
    UNSUPPORTED_THROTTLING: "Simulated throttling is not supported for this metric.",
    INVALID_TRACE: "The trace could not be read.",
}


class AuditError(Exception):
    """Expected audit failure; reported as an error result instead of crashing the run."""

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        self.code = code
        self.friendly_message = message or _DEFAULT_MESSAGES.get(code, code)
        super().__init__(f"{code}: {self.friendly_message}")


class ArtifactError(Exception):
    """Placeholder for an artifact whose gatherer failed."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)
