"""
HTML rendering of compliance reports.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from jinja2 import Template

from regcheck.reporting.schema import serialize_report
from regcheck.services.types import ComplianceReport, Severity

REPORT_TEMPLATE = Template(
    r"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{{ title }}</title>
  <style>
    body { font-family: ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto; margin:24px; line-height:1.45; }
    h2 { margin-top: 2rem; border-bottom: 1px solid #e5e7eb; padding-bottom: 0.25rem; }
    .meta { color: #475569; font-size: 12px; }
    table { border-collapse: collapse; width: 100%; margin-top: 12px; font-size: 13px; }
    th, td { border: 1px solid #e2e8f0; padding: 6px 8px; text-align: left; }
    th { background: #f1f5f9; font-weight: 600; color: #1f2937; }
    .verdict { display: inline-block; padding: 4px 10px; border-radius: 8px; font-weight: 600; }
    .pass { background: #dcfce7; color: #166534; }
    .fail { background: #fee2e2; color: #991b1b; }
    .sev-CRITICAL { color: #991b1b; font-weight: 600; }
    .sev-HIGH { color: #b45309; font-weight: 600; }
    .sev-MEDIUM { color: #a16207; }
    .sev-LOW { color: #475569; }
  </style>
</head>
<body>
  <h1>{{ title }}</h1>
  <div class="meta">Generated {{ generated_at }}{% if source %} · {{ source }}{% endif %}</div>
  <p>
    <span class="verdict {{ 'pass' if report.overall_compliant else 'fail' }}">
      {{ 'COMPLIANT' if report.overall_compliant else 'NON-COMPLIANT' }}
    </span>
    {{ report.summary.total_violations }} violation(s)
  </p>
  <table>
    <tr>{% for severity in severities %}<th>{{ severity }}</th>{% endfor %}</tr>
    <tr>{% for severity in severities %}<td>{{ report.summary.violations_by_severity.get(severity, 0) }}</td>{% endfor %}</tr>
  </table>

  {% for name, result in report.module_results.items() %}
  <h2>{{ name }}
    <span class="verdict {{ 'pass' if result.compliant else 'fail' }}">{{ 'pass' if result.compliant else 'fail' }}</span>
  </h2>
  {% if result.violations %}
  <table>
    <tr><th>Severity</th><th>Type</th><th>Message</th></tr>
    {% for violation in result.violations %}
    <tr>
      <td class="sev-{{ violation.severity }}">{{ violation.severity }}</td>
      <td><code>{{ violation.type }}</code></td>
      <td>{{ violation.message }}</td>
    </tr>
    {% endfor %}
  </table>
  {% else %}
  <p class="meta">No violations.</p>
  {% endif %}
  {% endfor %}

  {% if report.summary.recommendations %}
  <h2>Recommendations</h2>
  <ul>
    {% for recommendation in report.summary.recommendations %}
    <li>{{ recommendation }}</li>
    {% endfor %}
  </ul>
  {% endif %}
</body>
</html>
""",
    autoescape=True,
)


def render_html(report: ComplianceReport, *, title: str = "Compliance Report", source: Optional[str] = None) -> str:
    return REPORT_TEMPLATE.render(
        title=title,
        source=source,
        report=serialize_report(report),
        severities=[severity.value for severity in Severity],
        generated_at=datetime.now(timezone.utc).isoformat(),
    )


def write_html(report: ComplianceReport, path: Path, **kwargs: Optional[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_html(report, **kwargs), encoding="utf-8")


__all__ = ["render_html", "write_html"]
