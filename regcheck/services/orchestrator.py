"""
Compliance orchestrator running policy modules and assembling reports.
"""

from __future__ import annotations

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from regcheck.compliance.base import PolicyModule
from regcheck.services.aggregator import build_report
from regcheck.services.registry import DuplicateNameError, ModuleRegistry, UnknownModuleError
from regcheck.services.types import (
    MODULE_ERROR,
    ComplianceReport,
    ModuleResult,
    Requirements,
    Severity,
    Violation,
)

logger = logging.getLogger("regcheck.services.orchestrator")

ModuleFactory = Callable[[Mapping[str, Any]], PolicyModule]


class ComplianceOrchestrator:
    """Runs enabled policy modules over content and merges their findings.

    Evaluation never raises for reasons internal to a policy module: a module
    that raises, or returns something other than a valid `ModuleResult`, is
    reported as a single ``MODULE_ERROR`` violation in its own slot. Only
    configuration operations raise (`UnknownModuleError`,
    `DuplicateNameError`).

    Args:
        registry: Registry to drive; a fresh empty one by default.
        catalogue: Module variants by name, used by `register_module`.
        max_workers: Values above 1 evaluate modules on a thread pool.
    """

    def __init__(
        self,
        registry: Optional[ModuleRegistry] = None,
        *,
        catalogue: Optional[Mapping[str, ModuleFactory]] = None,
        max_workers: int = 1,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        self.registry = registry if registry is not None else ModuleRegistry()
        self.catalogue: Dict[str, ModuleFactory] = dict(catalogue or {})
        self.max_workers = max_workers

    def check_compliance(self, content: str, context: Optional[Mapping[str, Any]] = None) -> ComplianceReport:
        """Evaluate ``content`` against every enabled module and aggregate the results."""
        snapshot = self.registry.snapshot()
        content = "" if content is None else str(content)
        context = dict(context or {})
        logger.debug(
            "Starting compliance round",
            extra={"modules": [name for name, _ in snapshot], "content_length": len(content)},
        )

        if self.max_workers > 1 and len(snapshot) > 1:
            results = self._evaluate_concurrently(snapshot, content, context)
        else:
            results = [self._evaluate_module(name, module, content, context) for name, module in snapshot]

        module_results = {name: result for (name, _), result in zip(snapshot, results)}
        report = build_report(module_results)
        logger.debug(
            "Compliance round finished",
            extra={
                "overall_compliant": report.overall_compliant,
                "total_violations": report.summary.total_violations,
            },
        )
        return report

    def _evaluate_concurrently(
        self,
        snapshot: Tuple[Tuple[str, PolicyModule], ...],
        content: str,
        context: Dict[str, Any],
    ) -> List[ModuleResult]:
        workers = min(self.max_workers, len(snapshot))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="regcheck") as pool:
            futures = [
                pool.submit(self._evaluate_module, name, module, content, context) for name, module in snapshot
            ]
            # collected in snapshot order, independent of completion order
            return [future.result() for future in futures]

    @staticmethod
    def _evaluate_module(
        name: str,
        module: PolicyModule,
        content: str,
        context: Dict[str, Any],
    ) -> ModuleResult:
        try:
            result = _normalize_result(module.evaluate(content, copy.deepcopy(context)))
        except Exception as exc:
            logger.exception("Compliance module failed", extra={"policy_module": name})
            return ModuleResult.failure(
                MODULE_ERROR,
                f"Compliance module {name} failed: {exc}",
                Severity.HIGH,
            )
        return result

    def get_requirements(self) -> Dict[str, Requirements]:
        """Describe every enabled module; failures become error placeholders."""
        requirements: Dict[str, Requirements] = {}
        for name, module in self.registry.snapshot():
            try:
                described = module.describe()
                if not isinstance(described, Requirements):
                    raise TypeError(f"describe() returned {type(described).__name__}, expected Requirements")
            except Exception as exc:
                logger.exception("Compliance module failed to describe itself", extra={"policy_module": name})
                described = Requirements(
                    standard=MODULE_ERROR,
                    description=f"Compliance module {name} failed to describe its requirements",
                    error=str(exc),
                )
            requirements[name] = described
        return requirements

    def set_module_enabled(self, name: str, enabled: bool) -> None:
        self.registry.set_enabled(name, enabled)

    def register_module(
        self,
        name: str,
        config: Optional[Mapping[str, Any]] = None,
        *,
        factory: Optional[ModuleFactory] = None,
        overwrite: bool = True,
        enabled: Optional[bool] = None,
    ) -> None:
        """Build a module from ``config`` and register it under ``name``.

        The variant is ``factory`` when given, else the catalogue entry for
        ``name``.

        Raises:
            UnknownModuleError: No variant is known for ``name``.
            DuplicateNameError: ``name`` is taken and ``overwrite`` is False.
        """
        builder = factory or self.catalogue.get(name)
        if builder is None:
            raise UnknownModuleError(name)
        if not overwrite and name in self.registry:
            raise DuplicateNameError(name)
        self.registry.register(name, builder(dict(config or {})), overwrite=overwrite, enabled=enabled)

    def add_module(
        self,
        name: str,
        instance: PolicyModule,
        *,
        overwrite: bool = True,
        enabled: Optional[bool] = None,
    ) -> None:
        """Register a ready-made module instance."""
        self.registry.register(name, instance, overwrite=overwrite, enabled=enabled)

    def reconfigure_module(self, name: str, config: Optional[Mapping[str, Any]]) -> None:
        self.registry.reconfigure(name, config)

    def list_available_modules(self) -> List[str]:
        return list(self.registry.available_names())

    def list_enabled_modules(self) -> List[str]:
        return list(self.registry.enabled_names())


def _as_tuple(value: Any, field_name: str) -> Tuple[Any, ...]:
    if isinstance(value, (str, bytes, Mapping)) or not hasattr(value, "__iter__"):
        raise TypeError(f"ModuleResult.{field_name} must be a sequence, got {type(value).__name__}")
    return tuple(value)


def _normalize_result(result: Any) -> ModuleResult:
    """Check a module's return value and freeze its sequences into tuples."""
    if not isinstance(result, ModuleResult):
        raise TypeError(f"evaluate() returned {type(result).__name__}, expected ModuleResult")
    violations = _as_tuple(result.violations, "violations")
    for violation in violations:
        if not isinstance(violation, Violation):
            raise TypeError(f"violations must hold Violation objects, got {type(violation).__name__}")
        Severity.parse(violation.severity)
    recommendations = _as_tuple(result.recommendations, "recommendations")
    for recommendation in recommendations:
        if not isinstance(recommendation, str):
            raise TypeError(f"recommendations must be strings, got {type(recommendation).__name__}")
    return ModuleResult(
        compliant=bool(result.compliant),
        violations=violations,
        recommendations=recommendations,
        metadata=dict(result.metadata or {}),
    )


__all__ = ["ComplianceOrchestrator", "ModuleFactory"]
