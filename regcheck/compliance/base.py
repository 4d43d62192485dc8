"""
Policy module contract and helpers shared by the heuristic checks.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping, Optional, Pattern, Protocol, Sequence, Union, runtime_checkable

from regcheck.services.types import (
    ANALYSIS_ERROR,
    ModuleResult,
    Requirements,
    Severity,
    Violation,
)

PatternLike = Union[str, Pattern[str]]


@runtime_checkable
class PolicyModule(Protocol):
    """Capability set every policy module implements.

    Implementations take a configuration mapping at construction and ignore
    keys they do not recognise.
    """

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        ...

    def describe(self) -> Requirements:
        ...


def option(config: Optional[Mapping[str, Any]], key: str, default: Any) -> Any:
    """Return ``config[key]`` when present and not None, else ``default``."""
    if not config:
        return default
    value = config.get(key)
    return default if value is None else value


def compile_pattern(pattern: PatternLike, flags: int = re.IGNORECASE) -> Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, flags)


def any_match(patterns: Iterable[PatternLike], text: str) -> bool:
    return any(compile_pattern(pattern).search(text) for pattern in patterns)


def word_pattern(term: str) -> Pattern[str]:
    """Case-insensitive whole-word matcher for a literal keyword or entity name."""
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def build_result(
    violations: Sequence[Violation],
    recommendations: Sequence[str],
    metadata: Mapping[str, Any],
    blocking_severity: Union[Severity, str],
) -> ModuleResult:
    """Freeze collected findings, deriving ``compliant`` from the blocking threshold."""
    threshold = Severity.parse(blocking_severity)
    compliant = not any(violation.severity >= threshold for violation in violations)
    return ModuleResult(
        compliant=compliant,
        violations=tuple(violations),
        recommendations=tuple(recommendations),
        metadata=dict(metadata),
    )


def severity_name(value: Any) -> str:
    return str(getattr(value, "value", value))


def analysis_error(label: str, exc: BaseException) -> ModuleResult:
    return ModuleResult.failure(
        ANALYSIS_ERROR,
        f"Failed to analyze {label}: {exc}",
        Severity.MEDIUM,
    )


def context_list(context: Mapping[str, Any], key: str) -> List[str]:
    """Read a list-of-strings context entry; a bare string counts as one item."""
    value = context.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


__all__ = [
    "PatternLike",
    "PolicyModule",
    "analysis_error",
    "any_match",
    "build_result",
    "compile_pattern",
    "context_list",
    "option",
    "severity_name",
    "word_pattern",
]
