"""
Serialisation helpers turning report dataclasses into JSON-ready payloads.

Dataclasses are flattened to dicts, severities to their names and tuples to
lists, so reports can be written to JSONL, returned over REST or fed to the
HTML template without callers knowing the Python types involved.
"""

from __future__ import annotations

from dataclasses import is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping

from regcheck.services.types import ComplianceReport, Requirements


def _serialize(obj: Any) -> Any:
    """Recursively serialise dataclasses, enums and datetimes."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return {key: _serialize(getattr(obj, key)) for key in obj.__dataclass_fields__}
    if isinstance(obj, Mapping):
        return {_serialize(key): _serialize(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_serialize(item) for item in obj]
    return obj


def serialize_report(report: ComplianceReport) -> Dict[str, Any]:
    """
    Convert a ComplianceReport into a JSON-compatible dict.

    The summary additionally carries ``critical_violations`` and
    ``high_violations`` counters.
    """

    payload = _serialize(report)
    payload["summary"]["critical_violations"] = report.summary.critical_violations
    payload["summary"]["high_violations"] = report.summary.high_violations
    return payload


def serialize_requirements(requirements: Mapping[str, Requirements]) -> Dict[str, Any]:
    return {name: _serialize(item) for name, item in requirements.items()}


__all__ = ["serialize_report", "serialize_requirements"]
