"""heroaudit.core.artifacts

CONTRACT: inline
ROLE: Load gathered artifacts, create per-run output directories and write results.

INPUTS:
  - artifacts bundle JSON (traces, devtoolsLogs, HeroElements, ViewportDimensions)
OUTPUTS:
  - artifacts/<run_id>/... folders
  - results.json
  - run_meta.json
  - config_effective.yaml

CONFIG KEYS:
  - runtime.run_id: optional explicit run id
  - runtime.artifacts.dir: base artifacts directory
  - runtime.artifacts.retention.max_runs: keep last N runs

FAILURE MODES:
  - unreadable bundle -> ValueError
  - {"__error__": msg} entries -> ArtifactError placeholders
"""

from __future__ import annotations

import json
import platform
import shutil
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from heroaudit.core.errors import ArtifactError


ERROR_KEY = "__error__"
# Per-pass artifacts; each value maps pass name -> payload or relative path.
PASS_ARTIFACTS = ("traces", "devtoolsLogs")


def load_artifacts(path: str) -> Dict[str, Any]:
    """Load an artifacts bundle from JSON.

    `traces` and `devtoolsLogs` map a pass name to either the inline payload or
    a path (relative to the bundle) of a JSON file holding it.
    """
    bundle_path = Path(path)
    try:
        with open(bundle_path, "r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"could not read artifacts bundle {bundle_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"artifacts bundle {bundle_path} must be a JSON object")

    artifacts: Dict[str, Any] = {}
    for name, value in raw.items():
        if _is_error(value):
            artifacts[name] = ArtifactError(name, str(value[ERROR_KEY]))
            continue
        if name in PASS_ARTIFACTS and isinstance(value, dict):
            artifacts[name] = {
                pass_name: _resolve_pass_payload(bundle_path.parent, name, pass_name, payload)
                for pass_name, payload in value.items()
            }
            continue
        artifacts[name] = value
    return artifacts


def _is_error(value: Any) -> bool:
    return isinstance(value, dict) and ERROR_KEY in value


def _resolve_pass_payload(base_dir: Path, name: str, pass_name: str, payload: Any) -> Any:
    if _is_error(payload):
        return ArtifactError(name, str(payload[ERROR_KEY]))
    if not isinstance(payload, str):
        return payload
    payload_path = base_dir / payload
    try:
        with open(payload_path, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"could not read {name}.{pass_name} from {payload_path}: {exc}") from exc


def create_run_dir(base_dir: str, run_id: Optional[str] = None, max_runs: int = 10) -> Path:
    """Create and return the run output directory.

    Only `logs/` is created up front; results and metadata are written flat in
    the run dir. An existing run id gets a `_02`, `_03`... suffix.
    """

    base_path = Path(base_dir)
    base_path.mkdir(parents=True, exist_ok=True)
    run_id_final = (run_id or "").strip() or _default_run_id()
    run_path = base_path / run_id_final
    if run_path.exists():
        suffix = 2
        while (base_path / f"{run_id_final}_{suffix:02d}").exists():
            suffix += 1
        run_path = base_path / f"{run_id_final}_{suffix:02d}"

    (run_path / "logs").mkdir(parents=True, exist_ok=True)

    apply_retention(base_path, max_runs=max_runs, keep_dir=run_path)
    return run_path


def apply_retention(base_dir: Path, max_runs: int, keep_dir: Optional[Path] = None) -> None:
    """Delete all but the `max_runs` newest run dirs (by mtime).

    The `LATEST` pointer is a plain file beside the runs, so it is never pruned.
    """
    if max_runs <= 0:
        return
    keep_resolved = keep_dir.resolve() if keep_dir is not None else None
    run_dirs = [p for p in base_dir.iterdir() if p.is_dir()]
    run_dirs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    for old in run_dirs[max_runs:]:
        if keep_resolved is not None and old.resolve() == keep_resolved:
            continue
        shutil.rmtree(old, ignore_errors=True)


def write_run_results(run_dir: Path, results: List[Dict[str, Any]], config: Dict[str, Any]) -> None:
    """Write results.json, run_meta.json and config_effective.yaml."""

    with open(run_dir / "results.json", "w", encoding="utf-8") as handle:
        json.dump({"audits": {r["id"]: r for r in results}}, handle, indent=2)

    meta = {
        "t_written": time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        "platform": {
            "python": sys.version,
            "machine": platform.machine(),
            "system": platform.system(),
            "release": platform.release(),
        },
        "versions": _versions(),
    }
    with open(run_dir / "run_meta.json", "w", encoding="utf-8") as handle:
        json.dump(meta, handle, indent=2)

    with open(run_dir / "config_effective.yaml", "w", encoding="utf-8") as handle:
        yaml.safe_dump(config, handle, sort_keys=False)

    # Small pointer file for tooling.
    (run_dir.parent / "LATEST").write_text(str(run_dir.name), encoding="utf-8")


def _default_run_id() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


def _versions() -> Dict[str, Optional[str]]:
    import numpy

    from heroaudit.version import __version__

    return {
        "heroaudit": str(__version__),
        "numpy": str(numpy.__version__),
        "pyyaml": str(getattr(yaml, "__version__", None)),
    }
