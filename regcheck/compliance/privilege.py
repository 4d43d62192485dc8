"""
Attorney-client privilege heuristics for legal communications.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from regcheck.compliance.base import (
    analysis_error,
    any_match,
    build_result,
    context_list,
    option,
    severity_name,
    word_pattern,
)
from regcheck.services.types import ModuleResult, Requirements, Severity, Violation

DEFAULT_PRIVILEGED_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "legal": (
        "attorney",
        "client",
        "counsel",
        "lawyer",
        "litigation",
        "lawsuit",
        "complaint",
        "defendant",
        "plaintiff",
    ),
    "advice": ("advice", "recommendation", "strategy", "opinion", "assessment"),
    "confidential": ("confidential", "privileged", "secret", "proprietary"),
    "legal_actions": ("settlement", "plea", "negotiation", "mediation", "arbitration"),
    "legal_documents": ("contract", "agreement", "deposition", "affidavit", "brief"),
}

ATTORNEY_PARTICIPANT = re.compile(r"\b(attorney|lawyer|esquire|counsel)\b", re.IGNORECASE)
CLIENT_PARTICIPANT = re.compile(r"\b(client|customer|party)\b", re.IGNORECASE)
AUTHORIZED_ROLES = ("attorney", "lawyer", "client", "paralegal", "legal assistant")

SECURE_CONTENT_PATTERNS = (r"\bencrypted\b", r"\bsecure\b", r"\bconfidential\b")
PRIVILEGE_MARKINGS = (
    r"\bprivileged\b",
    r"\bconfidential\b",
    r"\battorney.?client\b",
    r"\blegal.?advice\b",
    r"\bwork.?product\b",
)
WAIVER_PATTERNS = (r"\bdisclose.*to\b", r"\bshare.*with\b", r"\bwaive.*privilege\b", r"\bnot.*privileged\b")

PRIVILEGED_KEYWORD_THRESHOLD = 3
HIGH_RISK_KEYWORD_THRESHOLD = 5

PRIVILEGE_RECOMMENDATIONS = (
    "Mark all privileged communications clearly",
    "Use secure communication channels for privileged content",
    "Limit privileged communications to authorized personnel only",
    "Implement privilege review processes",
)


class PrivilegePolicy:
    """Detects privileged legal communications and risks to that privilege.

    Context keys: ``participants`` (list of role/name strings), ``encrypted``,
    ``secure_channel`` and ``third_party_present`` (booleans).
    """

    label = "attorney-client privilege"

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.privilege_detection = option(config, "privilege_detection", True)
        self.communication_logging = option(config, "communication_logging", True)
        self.privileged_keywords = option(config, "privileged_keywords", DEFAULT_PRIVILEGED_KEYWORDS)
        self.blocking_severity = option(config, "blocking_severity", Severity.CRITICAL)

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        try:
            return self._evaluate(content, context)
        except Exception as exc:
            return analysis_error(self.label, exc)

    def _evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        violations: List[Violation] = []
        recommendations: List[str] = []
        participants = context_list(context, "participants")

        analysis = {"is_privileged": False, "privilege_type": None, "risk_level": Severity.LOW, "keyword_matches": 0}
        if self.privilege_detection:
            analysis = self._analyze_privilege(content, participants)

        if analysis["is_privileged"]:
            if self._has_unauthorized_disclosure(participants):
                violations.append(
                    Violation(
                        type="UNAUTHORIZED_DISCLOSURE",
                        message="Privileged communication may have been disclosed to unauthorized parties",
                        severity=Severity.CRITICAL,
                    )
                )
            if not self._has_secure_communication(content, context):
                violations.append(
                    Violation(
                        type="INSECURE_COMMUNICATION",
                        message="Privileged communication not using secure channels",
                        severity=Severity.HIGH,
                    )
                )
            if not any_match(PRIVILEGE_MARKINGS, content):
                violations.append(
                    Violation(
                        type="MISSING_PRIVILEGE_MARKINGS",
                        message="Privileged communication not properly marked",
                        severity=Severity.MEDIUM,
                    )
                )

        violations.extend(self._check_privilege_waiver(content, context))

        if analysis["is_privileged"]:
            recommendations.extend(PRIVILEGE_RECOMMENDATIONS)

        metadata = {
            "privilege_detected": analysis["is_privileged"],
            "privilege_type": analysis["privilege_type"],
            "keyword_matches": analysis["keyword_matches"],
            "risk_level": analysis["risk_level"].value,
        }
        return build_result(violations, recommendations, metadata, self.blocking_severity)

    def _analyze_privilege(self, content: str, participants: List[str]) -> Dict[str, Any]:
        has_attorney = any(ATTORNEY_PARTICIPANT.search(p) for p in participants)
        has_client = any(CLIENT_PARTICIPANT.search(p) for p in participants)

        keyword_matches = 0
        for keywords in self.privileged_keywords.values():
            for keyword in keywords:
                if word_pattern(keyword).search(content):
                    keyword_matches += 1

        is_privileged = (has_attorney and has_client) or keyword_matches >= PRIVILEGED_KEYWORD_THRESHOLD
        risk_level = Severity.LOW
        if is_privileged:
            if keyword_matches >= HIGH_RISK_KEYWORD_THRESHOLD:
                risk_level = Severity.HIGH
            elif keyword_matches >= PRIVILEGED_KEYWORD_THRESHOLD:
                risk_level = Severity.MEDIUM

        return {
            "is_privileged": is_privileged,
            "privilege_type": "ATTORNEY_CLIENT" if is_privileged else None,
            "risk_level": risk_level,
            "keyword_matches": keyword_matches,
        }

    @staticmethod
    def _has_unauthorized_disclosure(participants: List[str]) -> bool:
        return any(
            not any(word_pattern(role).search(participant) for role in AUTHORIZED_ROLES)
            for participant in participants
        )

    @staticmethod
    def _has_secure_communication(content: str, context: Mapping[str, Any]) -> bool:
        if context.get("encrypted") or context.get("secure_channel"):
            return True
        return any_match(SECURE_CONTENT_PATTERNS, content)

    @staticmethod
    def _check_privilege_waiver(content: str, context: Mapping[str, Any]) -> List[Violation]:
        violations: List[Violation] = []
        if any_match(WAIVER_PATTERNS, content):
            violations.append(
                Violation(
                    type="POTENTIAL_WAIVER",
                    message="Content may indicate waiver of attorney-client privilege",
                    severity=Severity.HIGH,
                )
            )
        if context.get("third_party_present"):
            violations.append(
                Violation(
                    type="THIRD_PARTY_PRESENCE",
                    message="Third party present during privileged communication",
                    severity=Severity.CRITICAL,
                )
            )
        return violations

    def describe(self) -> Requirements:
        return Requirements(
            standard="ATTORNEY_CLIENT_PRIVILEGE",
            description="Attorney-Client Privilege - Protects confidential legal communications",
            parameters={
                "privilege_detection": self.privilege_detection,
                "communication_logging": self.communication_logging,
                "privileged_categories": list(self.privileged_keywords),
                "blocking_severity": severity_name(self.blocking_severity),
            },
            applicable_regions=("US", "Common Law Countries"),
        )


__all__ = ["PrivilegePolicy"]
