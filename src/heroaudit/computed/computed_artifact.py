"""
CONTRACT: inline
ROLE: Memoised derived artifacts shared across audits in one run.

INPUTS:
  - data dict, AuditContext (computed_cache)
OUTPUTS:
  - computed value

CONFIG KEYS:
  - n/a

PERF / TIMING:
  - one compute per distinct input per run

FAILURE MODES:
  - compute() raising -> propagates, nothing cached

LOG EVENTS:
  - module=computed, event=cache_hit, payload keys=artifact

TESTS:
  - tests/test_computed_last_painted_hero.py
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict


def data_digest(data: Dict[str, Any]) -> str:
    """Stable digest of JSON-like input data."""
    encoded = json.dumps(data, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha1(encoded.encode("utf-8")).hexdigest()


class ComputedArtifact:
    name = "ComputedArtifact"

    @classmethod
    def compute(cls, data: Dict[str, Any], context: Any) -> Any:
        raise NotImplementedError(f"{cls.__name__} must define compute()")

    @classmethod
    def request(cls, data: Dict[str, Any], context: Any) -> Any:
        key = (cls.name, data_digest(data))
        cache = context.computed_cache
        if key in cache:
            if context.logger is not None:
                context.logger.emit("debug", "computed", "cache_hit", {"artifact": cls.name})
            return cache[key]
        value = cls.compute(data, context)
        cache[key] = value
        return value
