"""
Rule abstraction and registry.

Every lint rule has a unique name and a description and produces
ResultContexts for a dashboard. TargetRule covers the common case of a check
evaluated once per panel target.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Iterator

from dashlint.core.errors import ConfigurationError
from dashlint.dashboards.models import Dashboard, Panel, Target
from dashlint.lint.results import Result, ResultContext


class Rule(ABC):
    """Base class for lint rules."""

    name: str = "base"
    description: str = "Base rule"

    @abstractmethod
    def lint(self, dashboard: Dashboard) -> Iterator[ResultContext]:
        """Check a dashboard and yield one context per evaluated subject."""


class TargetRule(Rule):
    """Rule evaluated for every (panel, target) pair of a dashboard."""

    @abstractmethod
    def evaluate(self, dashboard: Dashboard, panel: Panel, target: Target) -> Result:
        """Evaluate a single target."""

    def lint(self, dashboard: Dashboard) -> Iterator[ResultContext]:
        for panel in dashboard.get_panels():
            for index, target in enumerate(panel.targets):
                yield ResultContext(
                    rule=self.name,
                    dashboard=dashboard,
                    result=self.evaluate(dashboard, panel, target),
                    panel=panel,
                    target=target,
                    target_index=index,
                )


class RuleSet:
    """Registry of rules keyed by name, in registration order."""

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self.add(rule)

    def add(self, rule: Rule) -> None:
        """Register a rule. Names must be unique."""
        if rule.name in self._rules:
            raise ConfigurationError(
                f"Rule already registered: {rule.name}", details={"rule": rule.name}
            )
        self._rules[rule.name] = rule

    def get(self, name: str) -> Rule | None:
        return self._rules.get(name)

    def names(self) -> list[str]:
        return list(self._rules)

    def select(self, names: Iterable[str]) -> RuleSet:
        """Return a new RuleSet restricted to the given rule names."""
        selected = RuleSet()
        for name in names:
            rule = self._rules.get(name)
            if rule is None:
                raise ConfigurationError(
                    f"Unknown rule: {name}",
                    details={"available": ", ".join(self._rules)},
                )
            selected.add(rule)
        return selected

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules
