"""
CONTRACT: inline
ROLE: Monotonic timestamps for log records.

INPUTS:
  - n/a
OUTPUTS:
  - n/a

CONFIG KEYS:
  - n/a

PERF / TIMING:
  - monotonic now_ns() for all modules

FAILURE MODES:
  - n/a

LOG EVENTS:
  - n/a

TESTS:
  - tests/test_config_and_artifacts.py covers log record timestamps
"""

from __future__ import annotations

import time


def now_ns() -> int:
    """Monotonic clock in nanoseconds."""
    return time.monotonic_ns()


def elapsed_ms(start_ns: int) -> float:
    return (now_ns() - start_ns) / 1_000_000.0
