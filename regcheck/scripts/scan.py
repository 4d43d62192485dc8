"""
CLI to check files against the compliance modules.

Usage:
    python -m regcheck.scripts.scan app.py notes.txt --context '{"developer_hours": 10}'

Engine defaults come from the ``REGCHECK_*`` environment (a ``.env`` file is
honoured); flags override them. Reports are printed as JSON unless
``--json-out`` is given. Exit status is 0 on success, 1 when
``--fail-on-violation`` is set and any file is non-compliant, and 2 on usage
or input errors.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from dotenv import load_dotenv

from regcheck.config.settings import load_module_options, load_settings, parse_module_list
from regcheck.reporting.html import write_html
from regcheck.reporting.schema import serialize_report, serialize_requirements
from regcheck.services.engine import create_orchestrator
from regcheck.services.types import ComplianceReport
from regcheck.storage.audit import JsonlReportLogger

logger = logging.getLogger("regcheck.scripts.scan")


def print_step(message: str) -> None:
    print(f"[scan] {message}", file=sys.stderr)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check files against regcheck compliance modules.")
    parser.add_argument("files", nargs="*", type=Path, help="Files to evaluate.")
    parser.add_argument(
        "--context",
        default=None,
        help="JSON object passed to every module as evaluation context.",
    )
    parser.add_argument(
        "--modules",
        default=None,
        help="Comma-separated modules to enable (default: REGCHECK_ENABLED_MODULES or all).",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        help="Module to disable; may be repeated.",
    )
    parser.add_argument(
        "--module-config",
        type=Path,
        default=None,
        help="JSON file mapping module names to option objects.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Thread pool size for module evaluation.")
    parser.add_argument("--json-out", type=Path, default=None, help="Write reports as JSON to this path.")
    parser.add_argument("--html-out", type=Path, default=None, help="Write an HTML report to this path.")
    parser.add_argument("--audit-log", type=Path, default=None, help="Append one JSONL record per report.")
    parser.add_argument("--list-modules", action="store_true", help="List registered modules and exit.")
    parser.add_argument("--requirements", action="store_true", help="Print module requirements and exit.")
    parser.add_argument(
        "--fail-on-violation",
        action="store_true",
        help="Exit with status 1 when any file is non-compliant.",
    )
    args = parser.parse_args(argv)
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    if not args.files and not (args.list_modules or args.requirements):
        parser.error("at least one file is required")
    return args


def _parse_context(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("--context must be a JSON object")
    return payload


def _html_path(base: Path, source: Path, multiple: bool) -> Path:
    if not multiple:
        return base
    return base.with_name(f"{base.stem}-{source.stem}{base.suffix or '.html'}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    try:
        settings = load_settings()
        context = _parse_context(args.context)
        options = load_module_options(args.module_config) if args.module_config else settings.module_options
    except (ValueError, OSError) as exc:
        print_step(f"ERROR: {exc}")
        return 2

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.log_level)

    enabled = parse_module_list(args.modules) if args.modules else settings.enabled_modules
    orchestrator = create_orchestrator(
        options,
        enabled_modules=enabled,
        max_workers=args.workers or settings.max_workers,
    )
    for name in args.disable:
        orchestrator.set_module_enabled(name, False)

    if args.list_modules:
        registry = orchestrator.registry
        listing = [{"name": name, "enabled": registry.is_enabled(name)} for name in registry.available_names()]
        print(json.dumps(listing, indent=2))
        return 0
    if args.requirements:
        print(json.dumps(serialize_requirements(orchestrator.get_requirements()), indent=2))
        return 0

    audit_path = args.audit_log or settings.audit_log
    try:
        audit_logger = JsonlReportLogger(audit_path) if audit_path else None
    except OSError as exc:
        print_step(f"ERROR: cannot prepare audit log {audit_path}: {exc}")
        return 2

    reports: Dict[str, ComplianceReport] = {}
    for path in args.files:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print_step(f"ERROR: cannot read {path}: {exc}")
            return 2
        report = orchestrator.check_compliance(content, context)
        reports[str(path)] = report
        if audit_logger is not None:
            try:
                audit_logger.log(report, content=content, context=context, metadata={"source": str(path)})
            except OSError as exc:
                print_step(f"ERROR: cannot append audit record to {audit_logger.path}: {exc}")
                return 2
        verdict = "compliant" if report.overall_compliant else "NON-COMPLIANT"
        print_step(f"{path}: {verdict} ({report.summary.total_violations} violations)")

    payload = {name: serialize_report(report) for name, report in reports.items()}
    if args.json_out:
        args.json_out.parent.mkdir(parents=True, exist_ok=True)
        args.json_out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print_step(f"JSON results written to {args.json_out}")
    else:
        print(json.dumps(payload, indent=2))

    if args.html_out:
        multiple = len(reports) > 1
        for name, report in reports.items():
            target = _html_path(args.html_out, Path(name), multiple)
            write_html(report, target, title=f"Compliance Report: {Path(name).name}", source=name)
            print_step(f"Report written to {target}")
    if audit_logger is not None:
        print_step(f"Audit log appended at {audit_logger.path}")

    if args.fail_on_violation and not all(report.overall_compliant for report in reports.values()):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
