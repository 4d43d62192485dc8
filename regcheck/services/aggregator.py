"""
Pure aggregation of per-module results into a report summary.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Set

from regcheck.services.types import ComplianceReport, ModuleResult, Severity, Summary


def aggregate(module_results: Mapping[str, ModuleResult]) -> Summary:
    """Summarise module results, visiting modules in mapping order.

    Recommendations are deduplicated by exact string equality; the first
    occurrence keeps its position.
    """
    by_severity: Dict[Severity, int] = {severity: 0 for severity in Severity}
    recommendations: List[str] = []
    seen: Set[str] = set()
    total = 0

    for result in module_results.values():
        for violation in result.violations:
            by_severity[Severity.parse(violation.severity)] += 1
            total += 1
        for recommendation in result.recommendations:
            if recommendation in seen:
                continue
            seen.add(recommendation)
            recommendations.append(recommendation)

    return Summary(
        total_violations=total,
        violations_by_severity=by_severity,
        recommendations=tuple(recommendations),
    )


def build_report(module_results: Mapping[str, ModuleResult]) -> ComplianceReport:
    results = dict(module_results)
    return ComplianceReport(
        overall_compliant=all(result.compliant for result in results.values()),
        module_results=results,
        summary=aggregate(results),
    )


__all__ = ["aggregate", "build_report"]
