"""
GDPR heuristics for personal data processing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from regcheck.compliance.base import (
    analysis_error,
    any_match,
    build_result,
    compile_pattern,
    option,
    severity_name,
)
from regcheck.services.types import ModuleResult, Requirements, Severity, Violation

DEFAULT_PERSONAL_DATA_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "name": (r"\bname\b", r"\bfirstname\b", r"\blastname\b"),
    "email": (r"\bemail\b", r"\bmail\b"),
    "phone": (r"\bphone\b", r"\bmobile\b", r"\btelephone\b"),
    "address": (r"\baddress\b", r"\blocation\b", r"\bcity\b", r"\bcountry\b"),
    "financial": (r"\bcredit.?card\b", r"\bbank\b", r"\baccount\b", r"\biban\b"),
    "health": (r"\bhealth\b", r"\bmedical\b", r"\bdiagnosis\b"),
    "genetic": (r"\bdna\b", r"\bgenetic\b"),
    "biometric": (r"\bfingerprint\b", r"\bface\b", r"\bvoice\b"),
    "racial": (r"\brace\b", r"\bethnicity\b"),
    "religious": (r"\breligion\b", r"\bbelief\b"),
    "political": (r"\bpolitical\b", r"\bparty\b"),
}

SPECIAL_CATEGORY_TYPES = frozenset({"genetic", "biometric", "racial"})
SENSITIVE_TYPES = frozenset({"financial", "health"})

CONSENT_PATTERNS = (r"\bconsent\b", r"\bagree\b", r"\bopt.?in\b", r"\bpermission\b", r"\bauthorization\b")
RETENTION_PATTERNS = (r"\bretention\b", r"\bexpire\b", r"\bdelete.*after\b", r"\bttl\b", r"\bcleanup\b")
ERASURE_PATTERNS = (r"\berasure\b", r"\bdelete.*user\b", r"\bremove.*data\b", r"\bgdpr.*delete\b")
MINIMIZATION_PATTERNS = (r"\bcollect.*only\b", r"\bminimal.*data\b", r"\bnecessary.*data\b")
TRANSFER_PATTERNS = (
    r"\bexport.*data\b",
    r"\bsend.*to.*(us|china|russia|asia)\b",
    r"\btransfer.*international\b",
)

PERSONAL_DATA_RECOMMENDATIONS = (
    "Implement explicit user consent mechanisms",
    "Establish data retention schedules",
    "Provide data erasure capabilities",
    "Conduct Data Protection Impact Assessment (DPIA)",
    "Appoint a Data Protection Officer (DPO)",
)


class GdprPolicy:
    """Checks personal data processing for consent, retention, erasure and transfers."""

    label = "GDPR compliance"

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.data_retention_days = option(config, "data_retention_days", 2555)
        self.consent_required = option(config, "consent_required", True)
        self.right_to_erasure = option(config, "right_to_erasure", True)
        self.personal_data_patterns = option(config, "personal_data_patterns", DEFAULT_PERSONAL_DATA_PATTERNS)
        self.blocking_severity = option(config, "blocking_severity", Severity.CRITICAL)

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        try:
            return self._evaluate(content)
        except Exception as exc:
            return analysis_error(self.label, exc)

    def _evaluate(self, content: str) -> ModuleResult:
        violations: List[Violation] = []
        recommendations: List[str] = []
        data_types, risk_level = self._analyze_personal_data(content)

        if data_types:
            if self.consent_required and not any_match(CONSENT_PATTERNS, content):
                violations.append(
                    Violation(
                        type="CONSENT_MISSING",
                        message="Personal data processing without consent mechanism",
                        severity=Severity.CRITICAL,
                        details={"data_types": list(data_types)},
                    )
                )
            if not any_match(RETENTION_PATTERNS, content):
                violations.append(
                    Violation(
                        type="RETENTION_POLICY_MISSING",
                        message="No data retention policy for personal data",
                        severity=Severity.HIGH,
                    )
                )
            if self.right_to_erasure and not any_match(ERASURE_PATTERNS, content):
                violations.append(
                    Violation(
                        type="RIGHT_TO_ERASURE_MISSING",
                        message="No mechanism for data erasure requests",
                        severity=Severity.HIGH,
                    )
                )
            if not any_match(MINIMIZATION_PATTERNS, content):
                violations.append(
                    Violation(
                        type="DATA_MINIMIZATION_VIOLATION",
                        message="Code collects more data than necessary",
                        severity=Severity.MEDIUM,
                    )
                )

        if any_match(TRANSFER_PATTERNS, content):
            violations.append(
                Violation(
                    type="INTERNATIONAL_TRANSFER",
                    message="Potential international data transfer without adequacy check",
                    severity=Severity.HIGH,
                )
            )

        if data_types:
            recommendations.extend(PERSONAL_DATA_RECOMMENDATIONS)

        metadata = {
            "personal_data_detected": bool(data_types),
            "data_types": data_types,
            "risk_level": risk_level.value,
        }
        return build_result(violations, recommendations, metadata, self.blocking_severity)

    def _analyze_personal_data(self, content: str) -> Tuple[List[str], Severity]:
        data_types: List[str] = []
        risk_level = Severity.LOW
        for data_type, patterns in self.personal_data_patterns.items():
            if not any(compile_pattern(pattern).search(content) for pattern in patterns):
                continue
            data_types.append(data_type)
            if data_type in SPECIAL_CATEGORY_TYPES:
                risk_level = Severity.CRITICAL
            elif data_type in SENSITIVE_TYPES and risk_level is not Severity.CRITICAL:
                risk_level = Severity.HIGH
            elif risk_level is Severity.LOW:
                risk_level = Severity.MEDIUM
        return data_types, risk_level

    def describe(self) -> Requirements:
        return Requirements(
            standard="GDPR",
            description="General Data Protection Regulation - EU data protection law",
            parameters={
                "data_retention_days": self.data_retention_days,
                "consent_required": self.consent_required,
                "right_to_erasure": self.right_to_erasure,
                "personal_data_types": list(self.personal_data_patterns),
                "blocking_severity": severity_name(self.blocking_severity),
            },
            applicable_regions=("EU", "EEA"),
        )


__all__ = ["GdprPolicy"]
