"""Aggregate validation issues into a report and render it."""

import json
from collections.abc import Iterable, Sequence
from itertools import groupby

import click

from plugin_lint.core.models import Asset, AssetKind, Report, Severity, ValidationIssue

_SEVERITY_COLORS = {Severity.ERROR: "red", Severity.WARNING: "yellow"}


def build_report(issues: Iterable[ValidationIssue], assets: Sequence[Asset]) -> Report:
    """Merge issues into a deterministic report.

    Issues are deduplicated and sorted by path, then rule id, then message,
    so the result does not depend on file-system traversal order.

    Args:
        issues: Issues from every validation stage.
        assets: All assets that were successfully built.

    Returns:
        Immutable Report.
    """
    unique = {issue.sort_key: issue for issue in issues}
    ordered = tuple(unique[key] for key in sorted(unique))
    counts = {kind: 0 for kind in AssetKind}
    for asset in assets:
        counts[asset.kind] += 1
    return Report(issues=ordered, asset_counts=counts)


def summary_line(report: Report) -> str:
    return (
        f"{report.error_count} errors, {report.warning_count} warnings "
        f"across {report.total_assets} assets"
    )


def render_text(report: Report, *, color: bool) -> str:
    """Render the report grouped by file path, followed by a summary line.

    Args:
        report: The report to render.
        color: Whether to include ANSI styling.

    Returns:
        Text ending with a newline.
    """

    def style(text: str, *, fg: str | None = None, bold: bool | None = None) -> str:
        return click.style(text, fg=fg, bold=bold) if color else text

    lines: list[str] = []
    for path, group in groupby(report.issues, key=lambda issue: issue.path):
        lines.append(style(path, bold=True))
        for issue in group:
            label = style(f"{issue.severity.value:<8}", fg=_SEVERITY_COLORS[issue.severity])
            lines.append(f"  {label} {issue.rule_id}  {issue.message}")
        lines.append("")

    summary = summary_line(report)
    if report.error_count > 0:
        lines.append(style(summary, fg="red", bold=True))
    elif report.warning_count > 0:
        lines.append(style(summary, fg="yellow"))
    else:
        lines.append(style(summary, fg="green"))
    return "\n".join(lines) + "\n"


def report_to_dict(report: Report) -> dict[str, object]:
    return {
        "issues": [
            {
                "severity": issue.severity.value,
                "path": issue.path,
                "ruleId": issue.rule_id,
                "message": issue.message,
            }
            for issue in report.issues
        ],
        "assetCounts": {kind.value: report.asset_counts.get(kind, 0) for kind in AssetKind},
        "errorCount": report.error_count,
        "warningCount": report.warning_count,
    }


def render_json(report: Report) -> str:
    """Serialize the report for machine consumption (stable key order)."""
    return json.dumps(report_to_dict(report), indent=2, sort_keys=True) + "\n"
