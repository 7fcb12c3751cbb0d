"""
Lint results.

A rule evaluation produces a Result; the engine wraps each one in a
ResultContext recording where it was found and collects them in a ResultSet.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Iterator

from dashlint.dashboards.models import Dashboard, Panel, Target


class Severity(IntEnum):
    """Result severity, ordered from least to most severe."""

    SUCCESS = 0
    EXCLUDE = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Result:
    """Outcome of evaluating one rule against one subject."""

    severity: Severity
    message: str = ""

    @classmethod
    def success(cls) -> Result:
        return cls(Severity.SUCCESS)

    @classmethod
    def error(cls, message: str) -> Result:
        return cls(Severity.ERROR, message)

    @property
    def is_success(self) -> bool:
        return self.severity == Severity.SUCCESS


@dataclass(frozen=True)
class ResultContext:
    """A result together with the rule and dashboard location that produced it."""

    rule: str
    dashboard: Dashboard
    result: Result
    panel: Panel | None = None
    target: Target | None = None
    target_index: int | None = None

    @property
    def severity(self) -> Severity:
        return self.result.severity

    def with_severity(self, severity: Severity) -> ResultContext:
        """Copy of this context with the result's severity replaced."""
        return replace(self, result=replace(self.result, severity=severity))

    def location(self) -> str:
        """Human-readable location, e.g. "API Health > Requests > target 0"."""
        parts = [self.dashboard.title or "<untitled>"]
        if self.panel is not None:
            parts.append(self.panel.title or f"panel {self.panel.id}")
        if self.target_index is not None:
            parts.append(f"target {self.target_index}")
        return " > ".join(parts)


@dataclass
class ResultSet:
    """Ordered collection of lint results."""

    results: list[ResultContext] = field(default_factory=list)

    def add(self, context: ResultContext) -> None:
        self.results.append(context)

    def extend(self, other: ResultSet) -> None:
        self.results.extend(other.results)

    def __iter__(self) -> Iterator[ResultContext]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def count(self, severity: Severity) -> int:
        """Number of results with the given severity."""
        return sum(1 for r in self.results if r.severity == severity)

    @property
    def errors(self) -> list[ResultContext]:
        return [r for r in self.results if r.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ResultContext]:
        return [r for r in self.results if r.severity == Severity.WARNING]

    @property
    def max_severity(self) -> Severity:
        """Most severe result, SUCCESS for an empty set."""
        return max((r.severity for r in self.results), default=Severity.SUCCESS)

    @property
    def passed(self) -> bool:
        """Return True if no blocking errors."""
        return self.max_severity < Severity.ERROR

    def by_rule(self) -> dict[str, list[ResultContext]]:
        """Group results by rule name, preserving order."""
        grouped: dict[str, list[ResultContext]] = defaultdict(list)
        for r in self.results:
            grouped[r.rule].append(r)
        return dict(grouped)
