"""
Persistence helpers for compliance reports.
"""

from .audit import JsonlReportLogger, ReportAuditRecord

__all__ = ["JsonlReportLogger", "ReportAuditRecord"]
