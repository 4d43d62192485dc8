import threading
from typing import Any, Mapping

import pytest

from conftest import MalformedModule, StaticModule, ThrowingModule

from regcheck.services.orchestrator import ComplianceOrchestrator
from regcheck.services.registry import DuplicateNameError, UnknownModuleError
from regcheck.services.types import MODULE_ERROR, ComplianceReport, ModuleResult, Requirements, Severity, Violation


class BarrierModule:
    """Only completes when every module sharing the barrier runs at once."""

    def __init__(self, barrier: threading.Barrier):
        self.barrier = barrier

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        self.barrier.wait(timeout=5)
        return ModuleResult(compliant=True)

    def describe(self) -> Requirements:
        return Requirements(standard="BARRIER", description="Barrier module")


class ContextMutatingModule:
    def __init__(self, config=None):
        pass

    def evaluate(self, content, context):
        context["tampered"] = True
        context.setdefault("participants", []).append("intruder")
        context.setdefault("nested", {})["seen"] = True
        return ModuleResult(compliant=True, metadata={"saw": dict(context)})

    def describe(self):
        return Requirements(standard="MUTATOR", description="Mutates context")


def test_mixed_modules_report(ab_orchestrator):
    report = ab_orchestrator.check_compliance("some content", {})

    assert isinstance(report, ComplianceReport)
    assert report.overall_compliant is False
    assert report.summary.total_violations == 1
    assert report.summary.violations_by_severity[Severity.CRITICAL] == 1
    assert list(report.module_results) == ["A", "B"]


def test_disabling_module_removes_it_from_next_round(ab_orchestrator):
    ab_orchestrator.set_module_enabled("B", False)
    report = ab_orchestrator.check_compliance("some content", {})

    assert list(report.module_results) == ["A"]
    assert report.overall_compliant is True
    assert report.summary.total_violations == 0


def test_reenabling_restores_evaluation_without_registration(ab_orchestrator):
    instance = ab_orchestrator.registry.get("B").instance
    ab_orchestrator.set_module_enabled("B", False)
    ab_orchestrator.check_compliance("x", {})
    ab_orchestrator.set_module_enabled("B", True)

    report = ab_orchestrator.check_compliance("x", {})

    assert list(report.module_results) == ["A", "B"]
    assert ab_orchestrator.registry.get("B").instance is instance
    assert instance.calls == 1


def test_reconfigure_only_changes_target_module(ab_orchestrator):
    before = ab_orchestrator.check_compliance("same input", {"k": "v"})
    ab_orchestrator.reconfigure_module("A", {"severity": "LOW", "tag": "a2"})
    after = ab_orchestrator.check_compliance("same input", {"k": "v"})

    assert before.module_results["B"] == after.module_results["B"]
    assert before.module_results["A"].compliant is True
    assert after.module_results["A"].compliant is False
    assert after.module_results["A"].metadata["tag"] == "a2"


def test_reconfigure_unknown_module_raises(ab_orchestrator):
    with pytest.raises(UnknownModuleError):
        ab_orchestrator.reconfigure_module("missing", {})


def test_throwing_module_is_isolated(ab_orchestrator):
    ab_orchestrator.add_module("broken", ThrowingModule())
    report = ab_orchestrator.check_compliance("content", {})

    broken = report.module_results["broken"]
    assert broken.compliant is False
    assert [v.type for v in broken.violations] == [MODULE_ERROR]
    assert broken.violations[0].severity is Severity.HIGH
    assert "broken" in broken.violations[0].message
    assert "boom" in broken.violations[0].message

    assert report.module_results["A"].compliant is True
    assert [v.severity for v in report.module_results["B"].violations] == [Severity.CRITICAL]
    assert report.summary.total_violations == 2


def test_contract_breaking_result_becomes_module_error():
    orchestrator = ComplianceOrchestrator()
    orchestrator.add_module("odd", MalformedModule())
    report = orchestrator.check_compliance("content")

    assert report.overall_compliant is False
    assert report.module_results["odd"].violations[0].type == MODULE_ERROR


def test_check_never_raises_for_odd_inputs(ab_orchestrator):
    ab_orchestrator.add_module("broken", ThrowingModule())
    for content, context in ((None, None), ("", {}), ("\x00" * 10, {"nested": {"a": [1, 2]}})):
        report = ab_orchestrator.check_compliance(content, context)
        assert isinstance(report, ComplianceReport)
    ab_orchestrator.check_compliance(None)
    assert ab_orchestrator.registry.get("A").instance.last_content == ""


def test_empty_engine_is_compliant():
    report = ComplianceOrchestrator().check_compliance("anything")
    assert report.overall_compliant is True
    assert report.module_results == {}
    assert report.summary.total_violations == 0


def test_modules_receive_independent_context_copies():
    orchestrator = ComplianceOrchestrator()
    orchestrator.add_module("first", ContextMutatingModule())
    orchestrator.add_module("second", ContextMutatingModule())
    context = {"user": "u1", "participants": ["attorney"], "nested": {}}

    report = orchestrator.check_compliance("content", context)

    assert context == {"user": "u1", "participants": ["attorney"], "nested": {}}
    assert report.module_results["second"].metadata["saw"] == {
        "user": "u1",
        "participants": ["attorney", "intruder"],
        "nested": {"seen": True},
        "tampered": True,
    }


def test_nested_context_isolated_on_thread_pool():
    orchestrator = ComplianceOrchestrator(max_workers=2)
    orchestrator.add_module("first", ContextMutatingModule())
    orchestrator.add_module("second", ContextMutatingModule())
    context = {"participants": ["attorney"]}

    report = orchestrator.check_compliance("content", context)

    assert context == {"participants": ["attorney"]}
    for name in ("first", "second"):
        assert report.module_results[name].metadata["saw"]["participants"] == ["attorney", "intruder"]


def test_thread_pool_runs_modules_concurrently_in_registration_order():
    barrier = threading.Barrier(3)
    orchestrator = ComplianceOrchestrator(max_workers=3)
    for name in ("z", "m", "a"):
        orchestrator.add_module(name, BarrierModule(barrier))

    report = orchestrator.check_compliance("content")

    assert list(report.module_results) == ["z", "m", "a"]
    assert report.overall_compliant is True


def test_parallel_and_sequential_rounds_agree(ab_orchestrator):
    ab_orchestrator.add_module("broken", ThrowingModule())
    parallel = ComplianceOrchestrator(ab_orchestrator.registry, max_workers=4)

    sequential_report = ab_orchestrator.check_compliance("content", {"k": 1})
    parallel_report = parallel.check_compliance("content", {"k": 1})

    assert sequential_report == parallel_report


def test_max_workers_must_be_positive():
    with pytest.raises(ValueError):
        ComplianceOrchestrator(max_workers=0)


def test_register_module_uses_catalogue_and_factory():
    orchestrator = ComplianceOrchestrator(catalogue={"stub": StaticModule})
    orchestrator.register_module("stub", {"tag": "from-catalogue"})
    orchestrator.register_module("custom", {"severity": "HIGH"}, factory=StaticModule, enabled=False)

    assert orchestrator.list_available_modules() == ["stub", "custom"]
    assert orchestrator.list_enabled_modules() == ["stub"]
    assert orchestrator.registry.get("stub").instance.config == {"tag": "from-catalogue"}


def test_register_module_errors():
    orchestrator = ComplianceOrchestrator(catalogue={"stub": StaticModule})
    with pytest.raises(UnknownModuleError):
        orchestrator.register_module("unknown")

    orchestrator.register_module("stub")
    with pytest.raises(DuplicateNameError):
        orchestrator.register_module("stub", overwrite=False)


def test_requirements_cover_enabled_modules_with_placeholders(ab_orchestrator):
    ab_orchestrator.add_module("broken", ThrowingModule())
    ab_orchestrator.add_module("odd", MalformedModule())
    ab_orchestrator.set_module_enabled("A", False)

    requirements = ab_orchestrator.get_requirements()

    assert list(requirements) == ["B", "broken", "odd"]
    assert requirements["B"].standard == "STUB"
    assert requirements["broken"].standard == MODULE_ERROR
    assert requirements["broken"].error == "cannot describe"
    assert requirements["odd"].standard == MODULE_ERROR


class ReturningModule:
    """Returns whatever result it was built with."""

    def __init__(self, result):
        self.result = result

    def evaluate(self, content, context):
        return self.result

    def describe(self):
        return Requirements(standard="RETURNING", description="Returns a canned result")


@pytest.mark.parametrize(
    "result",
    [
        ModuleResult(compliant=True, recommendations=None),
        ModuleResult(compliant=True, recommendations=(["a"],)),
        ModuleResult(compliant=True, recommendations="encrypt data"),
        ModuleResult(compliant=False, violations=None),
        ModuleResult(compliant=False, violations=("not a violation",)),
        ModuleResult(compliant=False, violations="CRITICAL"),
    ],
)
def test_malformed_result_sequences_become_module_error(ab_orchestrator, result):
    ab_orchestrator.add_module("odd", ReturningModule(result))

    report = ab_orchestrator.check_compliance("content", {})

    odd = report.module_results["odd"]
    assert odd.compliant is False
    assert [v.type for v in odd.violations] == [MODULE_ERROR]
    assert odd.violations[0].severity is Severity.HIGH
    assert report.module_results["A"].compliant is True
    assert report.summary.total_violations == 2


def test_result_sequences_are_frozen_to_tuples():
    orchestrator = ComplianceOrchestrator()
    orchestrator.add_module(
        "lists",
        ReturningModule(
            ModuleResult(
                compliant=False,
                violations=[Violation(type="X", message="m", severity="low")],
                recommendations=["encrypt data", "encrypt data"],
            )
        ),
    )

    report = orchestrator.check_compliance("content")

    result = report.module_results["lists"]
    assert isinstance(result.violations, tuple)
    assert result.recommendations == ("encrypt data", "encrypt data")
    assert report.summary.recommendations == ("encrypt data",)
    assert report.summary.violations_by_severity[Severity.LOW] == 1


class ReconfiguringModule:
    """Reconfigures and disables sibling modules while a round is running."""

    def __init__(self, registry):
        self.registry = registry

    def evaluate(self, content, context):
        self.registry.reconfigure("B", {"tag": "new"})
        self.registry.set_enabled("C", False)
        return ModuleResult(compliant=True)

    def describe(self):
        return Requirements(standard="RECONFIGURING", description="Mutates the registry")


def test_reconfiguration_during_round_applies_to_next_round():
    orchestrator = ComplianceOrchestrator()
    orchestrator.add_module("A", ReconfiguringModule(orchestrator.registry))
    orchestrator.add_module("B", StaticModule({"tag": "old"}))
    orchestrator.add_module("C", StaticModule({"tag": "c"}))
    original_b = orchestrator.registry.get("B").instance

    current = orchestrator.check_compliance("content")

    assert list(current.module_results) == ["A", "B", "C"]
    assert current.module_results["B"].metadata["tag"] == "old"
    assert original_b.calls == 1

    following = orchestrator.check_compliance("content")
    assert list(following.module_results) == ["A", "B"]
    assert following.module_results["B"].metadata["tag"] == "new"
