"""
CONTRACT: inline
ROLE: en-US rendering of shared UI strings (display values).

INPUTS:
  - message key + values
OUTPUTS:
  - formatted string

CONFIG KEYS:
  - n/a

PERF / TIMING:
  - n/a

FAILURE MODES:
  - unknown key -> KeyError
  - missing value -> KeyError

LOG EVENTS:
  - n/a

TESTS:
  - tests/test_statistics.py
"""

from __future__ import annotations

import math
from typing import Any, Dict

NBSP = "\u00a0"

UI_STRINGS: Dict[str, str] = {
    # Time in seconds, one decimal place, e.g. "5.1 s".
    "seconds": "{time_in_ms}" + NBSP + "s",
    # Time in milliseconds, rounded to 10ms, e.g. "430 ms".
    "ms": "{time_in_ms}" + NBSP + "ms",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_seconds(time_in_ms: float) -> str:
    tenths = _round_half_up(float(time_in_ms) / 100.0)
    return f"{tenths / 10:,.1f}"


def _format_ms(time_in_ms: float) -> str:
    return f"{_round_half_up(float(time_in_ms) / 10.0) * 10:,d}"


_FORMATTERS = {
    "seconds": _format_seconds,
    "ms": _format_ms,
}


def format_message(key: str, values: Dict[str, Any]) -> str:
    template = UI_STRINGS[key]
    formatter = _FORMATTERS[key]
    return template.format(time_in_ms=formatter(values["time_in_ms"]))
