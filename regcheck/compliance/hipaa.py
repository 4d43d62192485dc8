"""
HIPAA heuristics for code or text handling protected health information (PHI).
"""

from __future__ import annotations

import re
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

DEFAULT_PHI_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "ssn": (r"\b\d{3}-\d{2}-\d{4}\b", r"\b\d{9}\b"),
    "medical_record": (r"\bpatient\b", r"\bdiagnosis\b", r"\btreatment\b"),
    "personal_info": (r"\bname\b", r"\baddress\b", r"\bphone\b", r"\bemail\b"),
    "demographics": (r"\bage\b", r"\bgender\b", r"\brace\b"),
}

# PHI categories that escalate risk straight to CRITICAL
CRITICAL_PHI_TYPES = frozenset({"ssn", "medical_record"})

ENCRYPTION_PATTERNS = (
    r"\bcrypto\.",
    r"\bencrypt\b",
    r"\bdecrypt\b",
    r"\bcrypt\b",
    r"\bhash\b",
    r"\bssl\b",
    r"\btls\b",
)
ACCESS_CONTROL_PATTERNS = (
    r"\bauthenticate\b",
    r"\bauthorize\b",
    r"\bpermission\b",
    r"\broles?\b",
    r"\bacl\b",
    r"\baccess.control\b",
)
AUDIT_PATTERNS = (r"\blog\b", r"\baudit\b", r"\btrack\b", r"\brecord\b")

HARDCODED_SECRET = re.compile(r"""\b(password|secret|key)\s*[:=]\s*['"][^'"]{8,}['"]""")
PLAIN_HTTP = re.compile(r"\bhttp:\s*//")
HTTPS = re.compile(r"\bhttps:")

PHI_RECOMMENDATIONS = (
    "Implement proper PHI encryption at rest and in transit",
    "Add role-based access controls for PHI data",
    "Enable audit logging for all PHI operations",
    "Implement data minimization principles",
)


class HipaaPolicy:
    """Checks PHI handling for encryption, access control and audit logging."""

    label = "HIPAA compliance"

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.encryption_required = option(config, "encryption_required", True)
        self.audit_logging = option(config, "audit_logging", True)
        self.phi_patterns = option(config, "phi_patterns", DEFAULT_PHI_PATTERNS)
        self.blocking_severity = option(config, "blocking_severity", Severity.CRITICAL)

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        try:
            return self._evaluate(content)
        except Exception as exc:
            return analysis_error(self.label, exc)

    def _evaluate(self, content: str) -> ModuleResult:
        violations: List[Violation] = []
        recommendations: List[str] = []
        phi_types, risk_level = self._analyze_phi_presence(content)

        if phi_types:
            if self.encryption_required and not any_match(ENCRYPTION_PATTERNS, content):
                violations.append(
                    Violation(
                        type="ENCRYPTION_MISSING",
                        message="PHI detected but no encryption mechanisms found",
                        severity=Severity.CRITICAL,
                        details={"phi_types": list(phi_types)},
                    )
                )
            if not any_match(ACCESS_CONTROL_PATTERNS, content):
                violations.append(
                    Violation(
                        type="ACCESS_CONTROL_MISSING",
                        message="PHI handling without proper access controls",
                        severity=Severity.HIGH,
                    )
                )
            if self.audit_logging and not any_match(AUDIT_PATTERNS, content):
                violations.append(
                    Violation(
                        type="AUDIT_LOGGING_MISSING",
                        message="PHI operations without audit logging",
                        severity=Severity.HIGH,
                    )
                )

        violations.extend(self._check_security_issues(content))

        if phi_types:
            recommendations.extend(PHI_RECOMMENDATIONS)

        metadata = {
            "phi_detected": bool(phi_types),
            "phi_types": phi_types,
            "risk_level": risk_level.value,
        }
        return build_result(violations, recommendations, metadata, self.blocking_severity)

    def _analyze_phi_presence(self, content: str) -> Tuple[List[str], Severity]:
        phi_types: List[str] = []
        risk_level = Severity.LOW
        for phi_type, patterns in self.phi_patterns.items():
            if not any(compile_pattern(pattern).search(content) for pattern in patterns):
                continue
            phi_types.append(phi_type)
            if phi_type in CRITICAL_PHI_TYPES:
                risk_level = Severity.CRITICAL
            elif risk_level is not Severity.CRITICAL:
                risk_level = Severity.HIGH
        return phi_types, risk_level

    @staticmethod
    def _check_security_issues(content: str) -> List[Violation]:
        violations: List[Violation] = []
        if HARDCODED_SECRET.search(content):
            violations.append(
                Violation(
                    type="HARDCODED_SECRETS",
                    message="Potential hardcoded secrets detected",
                    severity=Severity.CRITICAL,
                )
            )
        if PLAIN_HTTP.search(content) and not HTTPS.search(content):
            violations.append(
                Violation(
                    type="INSECURE_TRANSMISSION",
                    message="HTTP used instead of HTTPS for data transmission",
                    severity=Severity.HIGH,
                )
            )
        return violations

    def describe(self) -> Requirements:
        return Requirements(
            standard="HIPAA",
            description=(
                "Health Insurance Portability and Accountability Act - Protects patient health information"
            ),
            parameters={
                "encryption_required": self.encryption_required,
                "audit_logging": self.audit_logging,
                "phi_patterns": list(self.phi_patterns),
                "blocking_severity": severity_name(self.blocking_severity),
            },
            applicable_regions=("US",),
        )


__all__ = ["HipaaPolicy"]
