"""
CONTRACT: inline
ROLE: Audit id -> audit class lookup.

CONFIG KEYS:
  - audits.<id>: must name a registered audit

TESTS:
  - tests/test_runner.py
"""

from __future__ import annotations

from typing import Dict, Type

from heroaudit.audits.audit import Audit
from heroaudit.audits.metrics.last_painted_hero import LastPaintedHero


AUDITS: Dict[str, Type[Audit]] = {
    LastPaintedHero.meta()["id"]: LastPaintedHero,
}
