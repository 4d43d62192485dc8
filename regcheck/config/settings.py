"""
Engine settings resolved from environment variables.

Recognised variables:
    REGCHECK_ENABLED_MODULES  Comma-separated module names (default: all built-ins).
    REGCHECK_MAX_WORKERS      Thread pool size for module evaluation (default: 1).
    REGCHECK_MODULE_CONFIG    Path to a JSON object of per-module options.
    REGCHECK_AUDIT_LOG        Optional JSONL file receiving every report.
    REGCHECK_LOG_LEVEL        Logging level for entry points (default: INFO).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


@dataclass(slots=True)
class EngineSettings:
    """Configuration for building a default orchestrator."""

    enabled_modules: Optional[List[str]] = None
    max_workers: int = 1
    module_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    audit_log: Optional[Path] = None
    log_level: str = "INFO"


def parse_module_list(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated list; None or blank means "not set"."""
    if value is None or not value.strip():
        return None
    return [token.strip() for token in value.split(",") if token.strip()]


def load_module_options(path: Path) -> Dict[str, Dict[str, Any]]:
    """Read per-module options from a JSON object of ``{module: {option: value}}``."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Module config {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict) or not all(isinstance(value, dict) for value in payload.values()):
        raise ValueError(f"Module config {path} must map module names to option objects.")
    return payload


def load_settings(env: Optional[Mapping[str, str]] = None) -> EngineSettings:
    """Resolve `EngineSettings` from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env

    workers_raw = env.get("REGCHECK_MAX_WORKERS", "1")
    try:
        max_workers = int(workers_raw)
    except ValueError as exc:
        raise ValueError(f"REGCHECK_MAX_WORKERS must be an integer, got {workers_raw!r}") from exc
    if max_workers < 1:
        raise ValueError("REGCHECK_MAX_WORKERS must be at least 1.")

    module_options: Dict[str, Dict[str, Any]] = {}
    config_path = env.get("REGCHECK_MODULE_CONFIG")
    if config_path:
        module_options = load_module_options(Path(config_path))

    audit_log = env.get("REGCHECK_AUDIT_LOG")
    return EngineSettings(
        enabled_modules=parse_module_list(env.get("REGCHECK_ENABLED_MODULES")),
        max_workers=max_workers,
        module_options=module_options,
        audit_log=Path(audit_log) if audit_log else None,
        log_level=env.get("REGCHECK_LOG_LEVEL", "INFO").upper(),
    )


__all__ = ["EngineSettings", "load_module_options", "load_settings", "parse_module_list"]
