from typing import Any, Mapping, Optional

import pytest

from regcheck.services.orchestrator import ComplianceOrchestrator
from regcheck.services.types import ModuleResult, Requirements, Severity, Violation


class StaticModule:
    """Returns a fixed result built from its config.

    Config keys: ``severity`` (one violation when set), ``violation_type``,
    ``recommendations`` and ``tag`` (echoed into metadata).
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config = dict(config or {})
        self.calls = 0
        self.last_content = None

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        self.calls += 1
        self.last_content = content
        violations = ()
        severity = self.config.get("severity")
        if severity:
            violations = (
                Violation(
                    type=self.config.get("violation_type", "STUB_VIOLATION"),
                    message="stub violation",
                    severity=Severity.parse(severity),
                ),
            )
        return ModuleResult(
            compliant=not violations,
            violations=violations,
            recommendations=tuple(self.config.get("recommendations", ())),
            metadata={"tag": self.config.get("tag")},
        )

    def describe(self) -> Requirements:
        return Requirements(standard="STUB", description="Stub module", parameters=dict(self.config))


class ThrowingModule:
    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config = dict(config or {})

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        raise RuntimeError("boom")

    def describe(self) -> Requirements:
        raise RuntimeError("cannot describe")


class MalformedModule:
    """Returns values that do not honour the module contract."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config = dict(config or {})

    def evaluate(self, content: str, context: Mapping[str, Any]):
        return {"compliant": True}

    def describe(self):
        return "not requirements"


@pytest.fixture
def ab_orchestrator() -> ComplianceOrchestrator:
    """Module A is compliant, module B reports one CRITICAL violation."""
    orchestrator = ComplianceOrchestrator()
    orchestrator.add_module("A", StaticModule({"tag": "a"}))
    orchestrator.add_module("B", StaticModule({"severity": "CRITICAL", "tag": "b"}))
    return orchestrator
