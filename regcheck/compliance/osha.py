"""
OSHA-inspired workplace safety heuristics expressed as code quality signals.

Complexity, function length, line length, repetition and technical-debt
markers stand in for cognitive load, eye strain, RSI and burnout risks.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from regcheck.compliance.base import analysis_error, build_result, compile_pattern, option, severity_name
from regcheck.services.types import ModuleResult, Requirements, Severity, Violation

DEFAULT_QUALITY_THRESHOLDS: Dict[str, int] = {
    "max_complexity": 10,
    "max_lines_per_function": 50,
    "min_test_coverage": 80,
}

FUNCTION_BOUNDARY = re.compile(r"\bfunction\b|=>|\bclass\b|\bdef\b")
BRANCH_PATTERN = re.compile(r"\b(?:if|else|elif|for|while|switch|catch|except)\b|&&|\|\|")
TODO_PATTERN = re.compile(r"//\s*TODO|/\*\s*TODO|#\s*TODO|\bFIXME\b", re.IGNORECASE)
TEST_INDICATORS = re.compile(r"describe\(|\bit\(|\btest\(|\bdef test_")

DEFAULT_REPETITIVE_PATTERNS = (
    r"(\w+)\s*\.\s*\1",
    r"console\.log",
    r"\bprint\(",
)

MAX_REPETITIONS = 10
LONG_LINE_RATIO = 0.1
UNTESTED_CONTENT_CHARS = 1000

SAFETY_RECOMMENDATIONS = (
    "Maintain code complexity below cognitive load limits",
    "Implement regular breaks during development",
    "Use ergonomic development practices",
)


class OshaPolicy:
    """Flags code likely to strain the people who maintain it."""

    label = "OSHA compliance"

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.ergonomics_check = option(config, "ergonomics_check", True)
        self.mental_health_monitoring = option(config, "mental_health_monitoring", True)
        self.threshold_overrides = option(config, "code_quality_thresholds", {})
        self.max_line_length = option(config, "max_line_length", 120)
        self.max_todo_markers = option(config, "max_todo_markers", 5)
        self.max_developer_hours = option(config, "max_developer_hours", 8)
        self.repetitive_patterns = option(config, "repetitive_patterns", DEFAULT_REPETITIVE_PATTERNS)
        self.blocking_severity = option(config, "blocking_severity", Severity.HIGH)

    @property
    def code_quality_thresholds(self) -> Dict[str, Any]:
        thresholds: Dict[str, Any] = dict(DEFAULT_QUALITY_THRESHOLDS)
        thresholds.update(self.threshold_overrides)
        return thresholds

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        try:
            return self._evaluate(content, context)
        except Exception as exc:
            return analysis_error(self.label, exc)

    def _evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        violations: List[Violation] = []
        thresholds = self.code_quality_thresholds
        metrics = self._analyze_code_quality(content)

        if metrics["complexity"] > thresholds["max_complexity"]:
            violations.append(
                Violation(
                    type="CODE_COMPLEXITY",
                    message=(
                        f"Code complexity {metrics['complexity']} exceeds safe threshold "
                        f"{thresholds['max_complexity']}"
                    ),
                    severity=Severity.HIGH,
                )
            )
        if metrics["max_function_length"] > thresholds["max_lines_per_function"]:
            violations.append(
                Violation(
                    type="FUNCTION_LENGTH",
                    message=(
                        f"Function length {metrics['max_function_length']} lines exceeds safe limit "
                        f"{thresholds['max_lines_per_function']}"
                    ),
                    severity=Severity.MEDIUM,
                )
            )

        if self.ergonomics_check:
            violations.extend(self._check_ergonomic_issues(content))
        if self.mental_health_monitoring:
            violations.extend(self._check_mental_health_indicators(content, context))

        recommendations = list(SAFETY_RECOMMENDATIONS)
        if metrics["complexity"] > 5:
            recommendations.append("Consider refactoring complex code sections")

        return build_result(violations, recommendations, {"safety_metrics": metrics}, self.blocking_severity)

    @staticmethod
    def _analyze_code_quality(content: str) -> Dict[str, int]:
        lines = content.split("\n")
        complexity = 0
        functions = 0
        max_function_length = 0
        current_length = 0
        in_function = False

        for line in lines:
            stripped = line.strip()
            if FUNCTION_BOUNDARY.search(stripped):
                if in_function:
                    max_function_length = max(max_function_length, current_length)
                in_function = True
                current_length = 0
                functions += 1
            if in_function:
                current_length += 1
            if BRANCH_PATTERN.search(stripped):
                complexity += 1

        if in_function:
            max_function_length = max(max_function_length, current_length)

        return {
            "complexity": complexity,
            "max_function_length": max_function_length,
            "total_lines": len(lines),
            "functions": functions,
        }

    def _check_ergonomic_issues(self, content: str) -> List[Violation]:
        violations: List[Violation] = []
        lines = content.split("\n")
        long_lines = sum(1 for line in lines if len(line) > self.max_line_length)
        if long_lines > len(lines) * LONG_LINE_RATIO:
            violations.append(
                Violation(
                    type="LONG_LINES",
                    message=f"{long_lines} lines exceed {self.max_line_length} characters - may cause eye strain",
                    severity=Severity.MEDIUM,
                )
            )

        for pattern in self.repetitive_patterns:
            compiled = compile_pattern(pattern, 0)
            count = sum(1 for _ in compiled.finditer(content))
            if count > MAX_REPETITIONS:
                violations.append(
                    Violation(
                        type="REPETITIVE_PATTERNS",
                        message=f"High repetition of {compiled.pattern} may increase RSI risk",
                        severity=Severity.LOW,
                        details={"pattern": compiled.pattern, "count": count},
                    )
                )
        return violations

    def _check_mental_health_indicators(self, content: str, context: Mapping[str, Any]) -> List[Violation]:
        violations: List[Violation] = []

        todo_markers = len(TODO_PATTERN.findall(content))
        if todo_markers > self.max_todo_markers:
            violations.append(
                Violation(
                    type="TECHNICAL_DEBT",
                    message=f"{todo_markers} TODO/FIXME comments indicate potential burnout or time pressure",
                    severity=Severity.MEDIUM,
                )
            )

        developer_hours = context.get("developer_hours")
        if developer_hours and developer_hours > self.max_developer_hours:
            violations.append(
                Violation(
                    type="OVERTIME_INDICATOR",
                    message="Extended development hours detected - monitor for fatigue",
                    severity=Severity.MEDIUM,
                )
            )

        test_coverage = context.get("test_coverage")
        if test_coverage is not None and test_coverage < self.code_quality_thresholds["min_test_coverage"]:
            violations.append(
                Violation(
                    type="TEST_COVERAGE",
                    message=(
                        f"Test coverage {test_coverage}% is below the minimum "
                        f"{self.code_quality_thresholds['min_test_coverage']}%"
                    ),
                    severity=Severity.MEDIUM,
                )
            )
        elif not TEST_INDICATORS.search(content) and len(content) > UNTESTED_CONTENT_CHARS:
            violations.append(
                Violation(
                    type="TEST_COVERAGE",
                    message="Large codebase without visible tests - may indicate quality concerns",
                    severity=Severity.LOW,
                )
            )
        return violations

    def describe(self) -> Requirements:
        return Requirements(
            standard="OSHA",
            description="Occupational Safety and Health Administration - Workplace safety standards",
            parameters={
                "thresholds": dict(self.code_quality_thresholds),
                "checks": {
                    "ergonomics_check": self.ergonomics_check,
                    "mental_health_monitoring": self.mental_health_monitoring,
                },
                "max_line_length": self.max_line_length,
                "max_todo_markers": self.max_todo_markers,
                "max_developer_hours": self.max_developer_hours,
                "blocking_severity": severity_name(self.blocking_severity),
            },
            applicable_regions=("US",),
        )


__all__ = ["OshaPolicy"]
