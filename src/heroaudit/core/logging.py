"""
CONTRACT: inline
ROLE: Structured logging to JSONL + console.

INPUTS:
  - emit(level, module, event, payload)
OUTPUTS:
  - stderr JSON lines (>= logging.level)
  - artifacts/<run_id>/logs/events.jsonl (all levels)

CONFIG KEYS:
  - logging.level: minimum console level
  - logging.file.enabled: write events.jsonl in the run dir

PERF / TIMING:
  - synchronous; files are flushed per record

FAILURE MODES:
  - log write failure -> stderr fallback -> log log_write_failed

LOG EVENTS:
  - module=core.logging, event=log_write_failed, payload keys=path, error

TESTS:
  - tests/test_config_and_artifacts.py

CONTRACT DETAILS:
# Logging contract

- Structured LogEvent with module, severity, and context.
- stdout is reserved for audit results, so console output goes to stderr.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from heroaudit.core.clock import now_ns


LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


class LogEmitter:
    """Emit structured LogEvents to stderr and an optional JSONL file."""

    def __init__(self, min_level: str = "info", run_id: str = "", path: Optional[Path] = None) -> None:
        self._min_level = LEVELS.get(min_level, 20)
        self._run_id = run_id
        self._path: Optional[Path] = None
        self._handle = None
        self.records: List[Dict[str, Any]] = []
        if path is not None:
            self.attach_file(path)

    def attach_file(self, path: Path) -> None:
        self.close()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._handle = open(path, "a", encoding="utf-8")

    def set_run_id(self, run_id: str) -> None:
        self._run_id = run_id

    def emit(self, level: str, module: str, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        record = {
            "t_ns": now_ns(),
            "level": level,
            "run_id": self._run_id,
            "message": event,
            "context": {
                "module": module,
                "event": event,
                "details": payload or {},
            },
        }
        self.records.append(record)
        line = json.dumps(record, sort_keys=True, default=str)
        if self._handle is not None:
            try:
                self._handle.write(line + "\n")
                self._handle.flush()
            except OSError as exc:
                failed_path = str(self._path)
                self._handle = None
                self.emit("warning", "core.logging", "log_write_failed", {"path": failed_path, "error": str(exc)})
        if LEVELS.get(level, 0) >= self._min_level:
            print(line, file=sys.stderr)

    def close(self) -> None:
        if self._handle is not None:
            try:
                self._handle.close()
            finally:
                self._handle = None
