"""
US sanctions screening heuristics for transactions with embargoed parties.
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

DEFAULT_SANCTIONS_LIST: Dict[str, Tuple[str, ...]] = {
    "military": (
        "rosoboronexport",
        "rostec",
        "almas-antey",
        "kronshtadt",
        "diamond-antey",
        "tactical missiles corporation",
        "uralvagonzavod",
        "oboronprom",
    ),
    "government": (
        "rosneft",
        "gazprom",
        "sberbank",
        "vtb bank",
        "promsvyazbank",
        "vnesheconombank",
        "rosselkhozbank",
        "gazprombank",
    ),
    "oligarchs": (
        "roman abramovich",
        "oleg deripaska",
        "viktor vekselberg",
        "suleiman kerimov",
        "alexei mordashov",
        "vagit alekperov",
        "leonid mikhelson",
        "gennady timchenko",
    ),
    "technology": (
        "yandex",
        "vkontakte",
        "mail.ru",
        "kaspersky lab",
        "dr.web",
        "positive technologies",
        "group-ib",
    ),
}

# Entity categories that escalate exposure straight to CRITICAL
CRITICAL_CATEGORIES = frozenset({"military", "government"})

RUSSIAN_CONTEXT = re.compile(r"\b(russia|russian|ru\.|\.ru)\b", re.IGNORECASE)
SANCTIONS_CONTEXT = re.compile(r"\b(russia|russian|sanctioned)\b", re.IGNORECASE)
RUSSIAN_MENTION = re.compile(r"\b(russia|russian)\b", re.IGNORECASE)
CRYPTO_MENTION = re.compile(r"\b(crypto|bitcoin|ethereum|blockchain)\b", re.IGNORECASE)

TRANSACTION_PATTERNS = (
    r"\b(purchase|buy|sell|trade|transfer|payment)\b",
    r"\b(contract|agreement|deal)\b",
    r"\b(export|import|ship)\b",
)
RESTRICTED_AREAS = (
    r"\b(russia|russian federation)\b",
    r"\b(crimea|donbas|luhansk|donetsk)\b",
    r"\b(belarus|iran|north korea)\b",
)
EXPORT_PATTERNS = (
    r"\b(export|ship|send|transfer).*(software|technology|data)\b",
    r"\b(dual.use|controlled|restricted).*(item|technology)\b",
)
EVASION_PATTERNS = (
    r"\b(shell|front|proxy|nominee)\b.*\b(company|entity|organization)\b",
    r"\b(third.party|intermediary|agent)\b.*\b(russia|russian)\b",
    r"\b(avoid|bypass|circumvent)\b.*\b(sanctions?|embargo)\b",
)

SANCTIONS_RECOMMENDATIONS = (
    "Conduct thorough sanctions screening before any transactions",
    "Implement automated sanctions compliance checks",
    "Establish sanctions compliance training programs",
)


class SanctionsPolicy:
    """Screens content and context for exposure to sanctioned entities and regions.

    Context keys: ``participants`` and ``organizations`` (lists of strings),
    ``location`` and ``ip_address`` (strings).
    """

    label = "sanctions compliance"

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.sanctions_list = option(config, "sanctions_list", DEFAULT_SANCTIONS_LIST)
        self.geographic_restrictions = option(config, "geographic_restrictions", True)
        self.transaction_monitoring = option(config, "transaction_monitoring", True)
        self.export_controls = option(config, "export_controls", True)
        self.blocking_severity = option(config, "blocking_severity", Severity.CRITICAL)

    def evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        try:
            return self._evaluate(content, context)
        except Exception as exc:
            return analysis_error(self.label, exc)

    def _evaluate(self, content: str, context: Mapping[str, Any]) -> ModuleResult:
        violations: List[Violation] = []
        recommendations: List[str] = []
        location = str(context.get("location") or "")
        entities, risk_level = self._analyze_sanctions_exposure(content, context)

        if entities:
            if self.transaction_monitoring and self._has_prohibited_transactions(content):
                violations.append(
                    Violation(
                        type="PROHIBITED_TRANSACTION",
                        message="Transaction with sanctioned entity detected",
                        severity=Severity.CRITICAL,
                        details={"sanctioned_entities": entities},
                    )
                )
            if self.geographic_restrictions and (
                any_match(RESTRICTED_AREAS, content) or any_match(RESTRICTED_AREAS, location)
            ):
                violations.append(
                    Violation(
                        type="GEOGRAPHIC_RESTRICTION",
                        message="Activity in restricted geographic area",
                        severity=Severity.CRITICAL,
                    )
                )
            if self.export_controls and any_match(EXPORT_PATTERNS, content):
                violations.append(
                    Violation(
                        type="EXPORT_CONTROL_VIOLATION",
                        message="Export of controlled technology or data",
                        severity=Severity.HIGH,
                    )
                )

        violations.extend(self._check_sanctions_evasion(content))

        if entities:
            recommendations.extend(SANCTIONS_RECOMMENDATIONS)

        metadata = {
            "sanctioned_entity_detected": bool(entities),
            "sanctioned_entities": entities,
            "risk_level": risk_level.value,
        }
        return build_result(violations, recommendations, metadata, self.blocking_severity)

    def _analyze_sanctions_exposure(
        self, content: str, context: Mapping[str, Any]
    ) -> Tuple[List[Dict[str, str]], Severity]:
        entities: List[Dict[str, str]] = []
        risk_level = Severity.LOW

        for category, names in self.sanctions_list.items():
            for name in names:
                if not word_pattern(name).search(content):
                    continue
                entities.append({"entity": name, "category": category})
                if category in CRITICAL_CATEGORIES:
                    risk_level = Severity.CRITICAL
                elif risk_level is not Severity.CRITICAL:
                    risk_level = Severity.HIGH

        context_text = " ".join(
            context_list(context, "participants")
            + context_list(context, "organizations")
            + [str(context.get("location") or ""), str(context.get("ip_address") or "")]
        )
        if RUSSIAN_CONTEXT.search(context_text):
            entities.append({"entity": "Russia", "category": "country"})
            risk_level = Severity.CRITICAL

        return entities, risk_level

    @staticmethod
    def _has_prohibited_transactions(content: str) -> bool:
        return any_match(TRANSACTION_PATTERNS, content) and bool(SANCTIONS_CONTEXT.search(content))

    @staticmethod
    def _check_sanctions_evasion(content: str) -> List[Violation]:
        violations: List[Violation] = []
        if any_match(EVASION_PATTERNS, content):
            violations.append(
                Violation(
                    type="SANCTIONS_EVASION",
                    message="Potential attempt to evade sanctions through intermediaries",
                    severity=Severity.CRITICAL,
                )
            )
        if CRYPTO_MENTION.search(content) and RUSSIAN_MENTION.search(content):
            violations.append(
                Violation(
                    type="CRYPTO_SANCTIONS_RISK",
                    message="Cryptocurrency transaction with sanctioned entity detected",
                    severity=Severity.HIGH,
                )
            )
        return violations

    def describe(self) -> Requirements:
        return Requirements(
            standard="US_SANCTIONS",
            description=(
                "US Sanctions against Russia and other embargoed entities - Prevents prohibited transactions"
            ),
            parameters={
                "geographic_restrictions": self.geographic_restrictions,
                "transaction_monitoring": self.transaction_monitoring,
                "export_controls": self.export_controls,
                "sanctioned_categories": list(self.sanctions_list),
                "blocking_severity": severity_name(self.blocking_severity),
            },
            applicable_regions=("US", "Global"),
            note="Compliance supports the international sanctions regime",
        )


__all__ = ["SanctionsPolicy"]
