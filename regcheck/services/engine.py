"""
Factory for an orchestrator preloaded with the built-in policy modules.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from regcheck.config.modules import MODULE_CATALOGUE
from regcheck.config.settings import EngineSettings
from regcheck.services.orchestrator import ComplianceOrchestrator

logger = logging.getLogger("regcheck.services.engine")


def create_orchestrator(
    options: Optional[Mapping[str, Mapping[str, Any]]] = None,
    *,
    enabled_modules: Optional[Iterable[str]] = None,
    max_workers: int = 1,
) -> ComplianceOrchestrator:
    """Register every built-in module, configured from ``options[name]``.

    Args:
        options: Per-module option mappings; missing entries use defaults.
        enabled_modules: Names to enable; all modules when None. Unknown
            names are ignored.
        max_workers: Thread pool size for evaluation rounds.
    """
    options = options or {}
    enabled = set(MODULE_CATALOGUE) if enabled_modules is None else set(enabled_modules)
    unknown = sorted(enabled - set(MODULE_CATALOGUE))
    if unknown:
        logger.warning("Ignoring unknown compliance modules", extra={"unknown_modules": unknown})

    orchestrator = ComplianceOrchestrator(catalogue=MODULE_CATALOGUE, max_workers=max_workers)
    for name in MODULE_CATALOGUE:
        orchestrator.register_module(name, options.get(name), enabled=name in enabled)
    return orchestrator


def orchestrator_from_settings(settings: EngineSettings) -> ComplianceOrchestrator:
    return create_orchestrator(
        settings.module_options,
        enabled_modules=settings.enabled_modules,
        max_workers=settings.max_workers,
    )


__all__ = ["create_orchestrator", "orchestrator_from_settings"]
