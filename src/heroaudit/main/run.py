"""
CONTRACT: inline
ROLE: Orchestration entrypoint: load config and artifacts, run audits, write results.

INPUTS:
  - --artifacts: artifacts bundle JSON
  - --config: YAML config (optional)
OUTPUTS:
  - stdout: {"audits": {<id>: result}} JSON
  - artifacts/<run_id>/results.json, run_meta.json, config_effective.yaml, logs/events.jsonl

CONFIG KEYS:
  - runtime.run_id / runtime.artifacts.dir / runtime.artifacts.retention.max_runs
  - audits.<id>.enabled / audits.<id>.options
  - settings: passed to every audit context
  - logging.level / logging.file.enabled

PERF / TIMING:
  - audits run sequentially and share one computed-artifact cache

FAILURE MODES:
  - config or artifact load failure -> exit 2 -> log validation_failed / artifacts_failed
  - any error result -> exit 1

LOG EVENTS:
  - module=main.run, event=audit_started, payload keys=audit_id
  - module=main.run, event=audit_completed, payload keys=audit_id, score, score_display_mode, elapsed_ms
  - module=main.run, event=artifacts_loaded, payload keys=path, artifacts
  - module=core.config, event=validation_failed, payload keys=path, errors

TESTS:
  - tests/test_runner.py
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from heroaudit.audits.audit import AuditContext, ScoringModes
from heroaudit.audits.registry import AUDITS
from heroaudit.core.artifacts import create_run_dir, load_artifacts, write_run_results
from heroaudit.core.clock import elapsed_ms, now_ns
from heroaudit.core.config import audit_enabled, audit_options, get_path, load_config
from heroaudit.core.logging import LogEmitter


def run_audits(
    artifacts: Dict[str, Any],
    config: Dict[str, Any],
    logger: Optional[LogEmitter] = None,
    audit_ids: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """Run the selected (or every enabled) audit and return their results in order."""
    if audit_ids:
        unknown = [a for a in audit_ids if a not in AUDITS]
        if unknown:
            raise ValueError(f"unknown audit id(s): {', '.join(unknown)}")
        selected = list(audit_ids)
    else:
        selected = [a for a in AUDITS if audit_enabled(config, a)]

    settings = dict(config.get("settings", {}) or {})
    computed_cache: Dict[Any, Any] = {}
    results: List[Dict[str, Any]] = []
    for audit_id in selected:
        audit_cls = AUDITS[audit_id]
        options = {**audit_cls.default_options(), **audit_options(config, audit_id)}
        context = AuditContext(options=options, settings=settings, computed_cache=computed_cache, logger=logger)
        t0 = now_ns()
        if logger is not None:
            logger.emit("info", "main.run", "audit_started", {"audit_id": audit_id})
        result = audit_cls.run(artifacts, context)
        if logger is not None:
            logger.emit(
                "info",
                "main.run",
                "audit_completed",
                {
                    "audit_id": audit_id,
                    "score": result["score"],
                    "score_display_mode": result["score_display_mode"],
                    "elapsed_ms": round(elapsed_ms(t0), 3),
                },
            )
        results.append(result)
    return results


def _ensure_run_dir(config: Dict[str, Any], output_dir: Optional[str]) -> Path:
    runtime = config.setdefault("runtime", {})
    artifacts_cfg = runtime.setdefault("artifacts", {})
    if output_dir:
        artifacts_cfg["dir"] = output_dir
    base_dir = str(artifacts_cfg.get("dir", "artifacts"))
    retention = artifacts_cfg.get("retention", {})
    if not isinstance(retention, dict):
        retention = {}
    max_runs = int(retention.get("max_runs", 10))
    run_id = str(runtime.get("run_id", "") or "")
    run_dir = create_run_dir(base_dir, run_id=run_id, max_runs=max_runs)
    runtime["run_id"] = run_dir.name
    artifacts_cfg["dir_run"] = str(run_dir)
    return run_dir


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="heroaudit: Last Painted Hero audit runner")
    parser.add_argument("--artifacts", required=True, help="Path to artifacts bundle JSON")
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument("--output-dir", default=None, help="Override runtime.artifacts.dir")
    parser.add_argument("--run-id", default=None, help="Override runtime.run_id")
    parser.add_argument("--audit", action="append", default=None, help="Run only this audit id (repeatable)")
    parser.add_argument("--no-artifacts-dir", action="store_true", help="Only print results, write nothing")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        LogEmitter().emit("error", "core.config", "validation_failed", {"path": args.config, "errors": str(exc)})
        return 2

    if args.run_id:
        config.setdefault("runtime", {})["run_id"] = args.run_id
    logger = LogEmitter(
        min_level=str(get_path(config, "logging.level", "info")),
        run_id=str(get_path(config, "runtime.run_id", "") or ""),
    )

    run_dir: Optional[Path] = None
    if not args.no_artifacts_dir:
        run_dir = _ensure_artifacts_dir_logged(config, args.output_dir, logger)

    try:
        try:
            artifacts = load_artifacts(args.artifacts)
        except ValueError as exc:
            logger.emit("error", "main.run", "artifacts_failed", {"path": args.artifacts, "error": str(exc)})
            return 2
        logger.emit("info", "main.run", "artifacts_loaded", {"path": args.artifacts, "artifacts": sorted(artifacts)})

        try:
            results = run_audits(artifacts, config, logger, audit_ids=args.audit)
        except ValueError as exc:
            logger.emit("error", "main.run", "invalid_audit", {"error": str(exc)})
            return 2

        print(json.dumps({"audits": {r["id"]: r for r in results}}, indent=2))
        if run_dir is not None:
            write_run_results(run_dir, results, config)

        failed = [r["id"] for r in results if r["score_display_mode"] == ScoringModes.ERROR]
        return 1 if failed else 0
    finally:
        logger.close()


def _ensure_artifacts_dir_logged(config: Dict[str, Any], output_dir: Optional[str], logger: LogEmitter) -> Path:
    run_dir = _ensure_run_dir(config, output_dir)
    logger.set_run_id(run_dir.name)
    if bool(get_path(config, "logging.file.enabled", True)):
        logger.attach_file(run_dir / "logs" / "events.jsonl")
    return run_dir


if __name__ == "__main__":
    sys.exit(main())
