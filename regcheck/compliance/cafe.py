"""
Fuel economy (CAFE) heuristics estimating the energy cost of code.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from regcheck.compliance.base import analysis_error, build_result, compile_pattern, option, severity_name
from regcheck.services.types import ModuleResult, Requirements, Severity, Violation

LOOP_PATTERN = re.compile(r"\b(for|while|do)\b")
FUNCTION_DEF_PATTERN = re.compile(r"\b(?:def|function)\s+(\w+)\s*\(")

DEFAULT_INTENSIVE_PATTERNS = (
    r"\b(?:Math\.|crypto\.|fs\.|http\.)",
    r"\b(?:hashlib\.|requests\.|socket\.|subprocess\.)",
)

# kWh per construct
LOOP_ENERGY = 0.01
RECURSION_ENERGY = 0.05
INTENSIVE_ENERGY = 0.005


class CafePolicy:
    """Flags code whose estimated energy use or emissions exceed configured limits."""

    label = "energy efficiency"

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.energy_threshold = option(config, "energy_threshold", 0.1)
        self.emissions_limit = option(config, "emissions_limit", 50)
        self.carbon_intensity = option(config, "carbon_intensity", 400)
        self.intensive_patterns = option(config, "intensive_patterns", DEFAULT_INTENSIVE_PATTERNS)
        self.blocking_severity = option(config, "blocking_severity", Severity.HIGH)

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        try:
            return self._evaluate(content)
        except Exception as exc:
            return analysis_error(self.label, exc)

    def _evaluate(self, content: str) -> ModuleResult:
        violations: List[Violation] = []
        recommendations: List[str] = []
        metrics = self._analyze_energy_efficiency(content)

        if metrics["estimated_energy"] > self.energy_threshold:
            violations.append(
                Violation(
                    type="ENERGY_EFFICIENCY",
                    message=(
                        f"Estimated energy usage {metrics['estimated_energy']}kWh "
                        f"exceeds threshold {self.energy_threshold}kWh"
                    ),
                    severity=Severity.HIGH,
                )
            )
        if metrics["estimated_emissions"] > self.emissions_limit:
            violations.append(
                Violation(
                    type="EMISSIONS",
                    message=(
                        f"Estimated CO2 emissions {metrics['estimated_emissions']}g/h "
                        f"exceed limit {self.emissions_limit}g/h"
                    ),
                    severity=Severity.HIGH,
                )
            )

        if metrics["has_loops"]:
            recommendations.append("Consider optimizing loops for better energy efficiency")
        if metrics["has_recursion"]:
            recommendations.append(
                "Recursion detected - consider iterative approaches for lower energy consumption"
            )

        return build_result(violations, recommendations, {"metrics": metrics}, self.blocking_severity)

    def _analyze_energy_efficiency(self, content: str) -> Dict[str, Any]:
        intensive = [compile_pattern(pattern, 0) for pattern in self.intensive_patterns]
        energy = 0.0
        complexity = 0
        has_loops = False

        for line in content.split("\n"):
            stripped = line.strip()
            if LOOP_PATTERN.search(stripped):
                has_loops = True
                energy += LOOP_ENERGY
                complexity += 2
            if any(pattern.search(stripped) for pattern in intensive):
                energy += INTENSIVE_ENERGY
                complexity += 1

        recursive = self._recursive_functions(content)
        if recursive:
            energy += RECURSION_ENERGY
            complexity += 5

        energy = round(energy, 6)
        return {
            "estimated_energy": energy,
            "estimated_emissions": round(energy * self.carbon_intensity, 6),
            "has_loops": has_loops,
            "has_recursion": bool(recursive),
            "recursive_functions": recursive,
            "complexity_score": complexity,
        }

    @staticmethod
    def _recursive_functions(content: str) -> List[str]:
        """Names of defined functions that are called again somewhere in the content."""
        names: List[str] = []
        for match in FUNCTION_DEF_PATTERN.finditer(content):
            name = match.group(1)
            calls = re.findall(rf"\b{re.escape(name)}\s*\(", content)
            if len(calls) > 1 and name not in names:
                names.append(name)
        return names

    def describe(self) -> Requirements:
        return Requirements(
            standard="CAFE",
            description="Corporate Average Fuel Economy - Environmental compliance for energy efficiency",
            parameters={
                "energy_threshold": self.energy_threshold,
                "emissions_limit": self.emissions_limit,
                "carbon_intensity": self.carbon_intensity,
                "blocking_severity": severity_name(self.blocking_severity),
            },
            applicable_regions=("US", "Global"),
        )


__all__ = ["CafePolicy"]
