"""
CONTRACT: inline
ROLE: Load YAML config, validate, and expose typed accessors.

INPUTS:
  - config_path: path to YAML file (optional)
OUTPUTS:
  - merged config dict

CONFIG KEYS:
  - runtime.enable_validation: enable validation (bool)
  - audits.<id>.enabled / audits.<id>.options: per-audit switches and option overrides
  - settings.throttling_method: provided | devtools | simulate

PERF / TIMING:
  - load once at startup

FAILURE MODES:
  - missing/invalid key -> raise error -> log validation_failed

LOG EVENTS:
  - module=core.config, event=validation_failed, payload keys=path, errors

TESTS:
  - tests/test_config_and_artifacts.py

CONTRACT DETAILS:
# Config contract

- Config files define audit options, runtime output and logging.
- Validation must reject missing or inconsistent calibration points.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import yaml


THROTTLING_METHODS = ("provided", "devtools", "simulate")
LOG_LEVELS = ("debug", "info", "warning", "error")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load YAML config and apply defaults."""
    data: Dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Config validation failed for {path}:\n- invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Config validation failed for {path}:\n- top level must be a mapping")
    merged = _merge_dicts(_default_config(), data)
    if bool(get_path(merged, "runtime.enable_validation", False)):
        errors = validate_config(merged)
        if errors:
            joined = "\n".join(f"- {e}" for e in errors)
            raise ValueError(f"Config validation failed for {path or '<defaults>'}:\n{joined}")
    return merged


def get_path(config: Dict[str, Any], dotted_path: str, default: Any = None) -> Any:
    """Get a nested config value by dotted path."""
    node: Any = config
    for key in dotted_path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def audit_options(config: Dict[str, Any], audit_id: str) -> Dict[str, Any]:
    """Option overrides configured for one audit (empty when none)."""
    audits_cfg = config.get("audits", {})
    if not isinstance(audits_cfg, dict):
        return {}
    entry = audits_cfg.get(audit_id, {})
    if not isinstance(entry, dict):
        return {}
    options = entry.get("options", {})
    return dict(options) if isinstance(options, dict) else {}


def audit_enabled(config: Dict[str, Any], audit_id: str) -> bool:
    entry = get_path(config, f"audits.{audit_id}", {})
    if not isinstance(entry, dict):
        return True
    return bool(entry.get("enabled", True))


def _default_config() -> Dict[str, Any]:
    return {
        "runtime": {
            "run_id": "",
            "enable_validation": True,
            "artifacts": {
                "dir": "artifacts",
                "retention": {
                    "max_runs": 10,
                },
            },
        },
        "settings": {
            "throttling_method": "provided",
        },
        "audits": {
            "last-painted-hero": {
                "enabled": True,
                "options": {},
            },
        },
        "logging": {
            "level": "info",
            "file": {
                "enabled": True,
            },
        },
    }


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def validate_config(config: Dict[str, Any]) -> List[str]:
    """Return a list of validation errors for the merged config.

    Audit ids are checked against the registry, so a typo in a YAML key is
    reported instead of silently ignored.
    """
    # Imported here: the registry pulls in every audit module.
    from heroaudit.audits.registry import AUDITS

    errors: List[str] = []

    settings_cfg = config.get("settings", {})
    if not isinstance(settings_cfg, dict):
        errors.append("settings must be a mapping")
        settings_cfg = {}
    method = str(settings_cfg.get("throttling_method", "provided") or "")
    if method not in THROTTLING_METHODS:
        errors.append(
            f"settings.throttling_method '{method}' must be one of {', '.join(THROTTLING_METHODS)}"
        )

    audits_cfg = config.get("audits", {})
    if not isinstance(audits_cfg, dict):
        errors.append("audits must be a mapping")
        audits_cfg = {}
    for audit_id, entry in audits_cfg.items():
        if audit_id not in AUDITS:
            errors.append(f"audits.{audit_id} is not a known audit")
            continue
        if not isinstance(entry, dict):
            errors.append(f"audits.{audit_id} must be a mapping")
            continue
        options = entry.get("options", {})
        if not isinstance(options, dict):
            errors.append(f"audits.{audit_id}.options must be a mapping")
            continue
        errors.extend(_validate_score_options(audit_id, {**AUDITS[audit_id].default_options(), **options}))

    level = str(get_path(config, "logging.level", "info") or "")
    if level not in LOG_LEVELS:
        errors.append(f"logging.level '{level}' must be one of {', '.join(LOG_LEVELS)}")

    max_runs = get_path(config, "runtime.artifacts.retention.max_runs", 10)
    try:
        if int(max_runs) < 0:
            errors.append("runtime.artifacts.retention.max_runs must be >= 0")
    except (TypeError, ValueError):
        errors.append("runtime.artifacts.retention.max_runs must be an integer")

    return errors


def _validate_score_options(audit_id: str, options: Dict[str, Any]) -> List[str]:
    if "score_podr" not in options and "score_median" not in options:
        return []
    errors: List[str] = []
    prefix = f"audits.{audit_id}.options"
    try:
        podr = float(options.get("score_podr"))
        median = float(options.get("score_median"))
    except (TypeError, ValueError):
        return [f"{prefix}.score_podr and score_median must be numbers"]
    if podr <= 0:
        errors.append(f"{prefix}.score_podr must be > 0")
    if median <= 0:
        errors.append(f"{prefix}.score_median must be > 0")
    if podr > 0 and median > 0 and podr >= median:
        errors.append(f"{prefix}.score_podr={podr:g} must be below score_median={median:g}")
    return errors
