"""
Service layer: the module registry, the orchestrator and result aggregation.

This package exposes the primary classes via lazy imports to avoid circular
dependencies during test collection (e.g., policy modules importing
`regcheck.services.types`).
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict

__all__ = [
    "ComplianceOrchestrator",
    "ModuleRegistry",
    "RegistryEntry",
    "RegistryError",
    "UnknownModuleError",
    "DuplicateNameError",
    "aggregate",
    "build_report",
    "create_orchestrator",
    "orchestrator_from_settings",
    "Severity",
    "Violation",
    "ModuleResult",
    "Summary",
    "ComplianceReport",
    "Requirements",
]

_MODULE_ATTRS: Dict[str, str] = {
    "ComplianceOrchestrator": "regcheck.services.orchestrator",
    "ModuleRegistry": "regcheck.services.registry",
    "RegistryEntry": "regcheck.services.registry",
    "RegistryError": "regcheck.services.registry",
    "UnknownModuleError": "regcheck.services.registry",
    "DuplicateNameError": "regcheck.services.registry",
    "aggregate": "regcheck.services.aggregator",
    "build_report": "regcheck.services.aggregator",
    "create_orchestrator": "regcheck.services.engine",
    "orchestrator_from_settings": "regcheck.services.engine",
    "Severity": "regcheck.services.types",
    "Violation": "regcheck.services.types",
    "ModuleResult": "regcheck.services.types",
    "Summary": "regcheck.services.types",
    "ComplianceReport": "regcheck.services.types",
    "Requirements": "regcheck.services.types",
}


def __getattr__(name: str) -> Any:
    module_path = _MODULE_ATTRS.get(name)
    if not module_path:
        raise AttributeError(f"module 'regcheck.services' has no attribute '{name}'")  # pragma: no cover
    module = import_module(module_path)
    return getattr(module, name)


def __dir__() -> list[str]:  # pragma: no cover - convenience helper
    return sorted(__all__)
