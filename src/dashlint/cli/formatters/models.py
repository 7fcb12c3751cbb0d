"""
Data models for dashlint CLI formatters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dashlint.lint.results import ResultContext, ResultSet, Severity


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"


class CheckStatus(str, Enum):
    """Status of a single lint check."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"


SEVERITY_STATUS = {
    Severity.SUCCESS: CheckStatus.PASS,
    Severity.EXCLUDE: CheckStatus.SKIP,
    Severity.WARNING: CheckStatus.WARN,
    Severity.ERROR: CheckStatus.FAIL,
}


@dataclass
class CheckResult:
    """Result of a single rule evaluation."""

    name: str
    status: CheckStatus
    message: str
    location: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_context(cls, context: ResultContext) -> CheckResult:
        details: dict[str, Any] = {"dashboard": context.dashboard.title}
        if context.panel is not None:
            details["panel"] = context.panel.title
            details["panel_id"] = context.panel.id
        if context.target_index is not None:
            details["target_index"] = context.target_index
        return cls(
            name=context.rule,
            status=SEVERITY_STATUS[context.severity],
            message=context.result.message,
            location=context.location(),
            details=details,
        )


@dataclass
class LintReport:
    """
    Report structure consumed by all formatters.
    """

    command: str
    checks: list[CheckResult] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)

    @classmethod
    def from_results(
        cls, results: ResultSet, sources: list[str] | None = None, command: str = "lint"
    ) -> LintReport:
        return cls(
            command=command,
            checks=[CheckResult.from_context(r) for r in results],
            sources=sources or [],
        )

    @property
    def status(self) -> CheckStatus:
        """Overall status based on check results."""
        if any(c.status == CheckStatus.FAIL for c in self.checks):
            return CheckStatus.FAIL
        if any(c.status == CheckStatus.WARN for c in self.checks):
            return CheckStatus.WARN
        return CheckStatus.PASS

    @property
    def errors(self) -> int:
        """Count of failed checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.FAIL)

    @property
    def warnings(self) -> int:
        """Count of warning checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.WARN)

    @property
    def passed(self) -> int:
        """Count of passed checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.PASS)

    @property
    def skipped(self) -> int:
        """Count of excluded checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.SKIP)
