"""
JSON output formatter for dashlint.

Produces structured JSON output for machine consumption and CI pipelines.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .models import CheckStatus

if TYPE_CHECKING:
    from .models import LintReport


def format_json(report: LintReport, include_passed: bool = False) -> str:
    """
    Format lint report as JSON.

    Output structure:
    {
        "version": "1.0",
        "timestamp": "2026-01-17T14:30:00Z",
        "command": "lint",
        "sources": ["dashboards/api.json"],
        "results": [...],
        "summary": {...}
    }

    Passed checks are omitted unless include_passed is set.
    """
    results: list[dict[str, Any]] = [
        {
            "rule": check.name,
            "status": check.status.value,
            "message": check.message,
            "location": check.location,
            **check.details,
        }
        for check in report.checks
        if include_passed or check.status != CheckStatus.PASS
    ]

    output: dict[str, Any] = {
        "version": "1.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": report.command,
        "sources": report.sources,
        "results": results,
        "summary": {
            "status": report.status.value,
            "errors": report.errors,
            "warnings": report.warnings,
            "passed": report.passed,
            "skipped": report.skipped,
            "total": len(report.checks),
        },
    }

    return json.dumps(output, indent=2, sort_keys=True, default=str)
