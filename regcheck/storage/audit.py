"""
Audit logging utilities for compliance reports.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from regcheck.reporting.schema import serialize_report
from regcheck.services.types import ComplianceReport


@dataclass(slots=True)
class ReportAuditRecord:
    """Structured log entry for one evaluation round."""

    timestamp: str
    content_sha256: str
    content_length: int
    context: Dict[str, Any]
    overall_compliant: bool
    report: Dict[str, Any]
    metadata: Dict[str, Any]


class JsonlReportLogger:
    """Append-only JSONL logger for compliance reports.

    Only a digest of the evaluated content is stored, never the content itself.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(
        self,
        report: ComplianceReport,
        *,
        content: str = "",
        context: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> ReportAuditRecord:
        content = content or ""
        record = ReportAuditRecord(
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            content_sha256=hashlib.sha256(content.encode("utf-8")).hexdigest(),
            content_length=len(content),
            context=dict(context or {}),
            overall_compliant=report.overall_compliant,
            report=serialize_report(report),
            metadata=dict(metadata or {}),
        )
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(asdict(record), ensure_ascii=False, default=str) + "\n")
        return record

    def read(self) -> List[Dict[str, Any]]:
        """Return every logged record; an absent file yields an empty list."""
        if not self.path.exists():
            return []
        records: List[Dict[str, Any]] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line:
                    records.append(json.loads(line))
        return records


__all__ = ["JsonlReportLogger", "ReportAuditRecord"]
