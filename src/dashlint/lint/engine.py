"""
Lint engine.

Runs every rule of a RuleSet over dashboards and collects the results,
applying the lint configuration's exclusions and warnings on the way.
"""

from __future__ import annotations

from typing import Iterable

from dashlint.dashboards.models import Dashboard
from dashlint.lint.config import LintConfig
from dashlint.lint.results import ResultSet, Severity
from dashlint.lint.rules import RuleSet
from dashlint.logging import bind_context


class Linter:
    """Applies a set of rules to dashboards."""

    def __init__(self, rule_set: RuleSet, config: LintConfig | None = None):
        self.rule_set = rule_set
        self.config = config or LintConfig()

    def lint_dashboard(self, dashboard: Dashboard) -> ResultSet:
        """Run every rule against a single dashboard."""
        log = bind_context(dashboard=dashboard.title, uid=dashboard.uid)
        results = ResultSet()

        for rule in self.rule_set:
            for context in rule.lint(dashboard):
                results.add(self.config.apply(context))

        log.info(
            "dashboard_linted",
            rules=len(self.rule_set),
            results=len(results),
            errors=results.count(Severity.ERROR),
            warnings=results.count(Severity.WARNING),
            excluded=results.count(Severity.EXCLUDE),
        )
        return results

    def lint(self, dashboards: Iterable[Dashboard]) -> ResultSet:
        """Run every rule against each dashboard and merge the results."""
        results = ResultSet()
        for dashboard in dashboards:
            results.extend(self.lint_dashboard(dashboard))
        return results
