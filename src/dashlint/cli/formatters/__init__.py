"""
Output formatters for dashlint CLI commands.

Supports:
- table: Human-readable text (default)
- json: Machine-readable JSON
"""

from __future__ import annotations

from pathlib import Path

from .json_fmt import format_json
from .models import SEVERITY_STATUS, CheckResult, CheckStatus, LintReport, OutputFormat


def format_report(
    report: LintReport,
    output_format: OutputFormat | str = OutputFormat.TABLE,
    output_file: Path | str | None = None,
    verbose: bool = False,
) -> str:
    """
    Format a lint report in the specified format.

    Args:
        report: The lint report to format
        output_format: Output format (table, json)
        output_file: Optional file path to write output to
        verbose: Include passed checks

    Returns:
        Formatted string output
    """
    if isinstance(output_format, str):
        output_format = OutputFormat(output_format)

    if output_format == OutputFormat.JSON:
        output = format_json(report, include_passed=verbose)
    else:
        output = _format_table(report, verbose)

    if output_file:
        Path(output_file).write_text(output)

    return output


def _format_table(report: LintReport, verbose: bool = False) -> str:
    """Format report as human-readable text."""
    lines = []

    status_icons = {
        CheckStatus.PASS: "✓",
        CheckStatus.WARN: "⚠",
        CheckStatus.FAIL: "✗",
        CheckStatus.SKIP: "○",
    }

    for check in report.checks:
        if check.status == CheckStatus.PASS and not verbose:
            continue
        icon = status_icons.get(check.status, "?")
        lines.append(f"{icon} [{check.name}] {check.location}")
        if check.message:
            lines.append(f"    {check.message}")

    lines.append(
        f"Summary: {report.passed} passed, {report.warnings} warnings, "
        f"{report.errors} errors, {report.skipped} excluded"
    )
    lines.append(f"Overall: {report.status.value.upper()}")

    return "\n".join(lines)


__all__ = [
    "OutputFormat",
    "CheckStatus",
    "CheckResult",
    "LintReport",
    "SEVERITY_STATUS",
    "format_report",
    "format_json",
]
