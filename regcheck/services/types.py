"""
Dataclasses describing policy findings and aggregated compliance reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Severity(str, Enum):
    """Ordinal risk level attached to every violation."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: "Severity | str") -> "Severity":
        if isinstance(value, cls):
            return value
        return cls(str(value).upper())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}

ANALYSIS_ERROR = "ANALYSIS_ERROR"
MODULE_ERROR = "MODULE_ERROR"


@dataclass(frozen=True)
class Violation:
    """Single issue flagged by a policy module."""

    type: str
    message: str
    severity: Severity
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ModuleResult:
    """Outcome of one policy module evaluating one piece of content."""

    compliant: bool
    violations: Tuple[Violation, ...] = ()
    recommendations: Tuple[str, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, violation_type: str, message: str, severity: Severity) -> "ModuleResult":
        """Non-compliant result carrying exactly one error violation."""
        return cls(
            compliant=False,
            violations=(Violation(type=violation_type, message=message, severity=severity),),
        )


@dataclass(frozen=True)
class Summary:
    """Statistics derived from the module results of one round."""

    total_violations: int
    violations_by_severity: Dict[Severity, int]
    recommendations: Tuple[str, ...] = ()

    @property
    def critical_violations(self) -> int:
        return self.violations_by_severity.get(Severity.CRITICAL, 0)

    @property
    def high_violations(self) -> int:
        return self.violations_by_severity.get(Severity.HIGH, 0)


@dataclass(frozen=True)
class ComplianceReport:
    """Aggregated outcome of one evaluation round across enabled modules."""

    overall_compliant: bool
    module_results: Dict[str, ModuleResult]
    summary: Summary


@dataclass(frozen=True)
class Requirements:
    """Static description of a policy module's configuration and domain."""

    standard: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    applicable_regions: Tuple[str, ...] = ()
    note: Optional[str] = None
    error: Optional[str] = None


__all__ = [
    "ANALYSIS_ERROR",
    "MODULE_ERROR",
    "Severity",
    "Violation",
    "ModuleResult",
    "Summary",
    "ComplianceReport",
    "Requirements",
]
