"""
Target PromQL rule.

Checks every query target of Prometheus-backed dashboards:
- the query is valid PromQL once template variables are expanded
- the query is not empty
- a target that reuses another panel's query references a panel that exists
"""

from __future__ import annotations

from typing import Iterable

import structlog

from dashlint.core.errors import ConfigurationError, DanglingReferenceError, LintError
from dashlint.dashboards.models import PROMETHEUS, Dashboard, Panel, Target
from dashlint.lint.promql import parse_target_expr
from dashlint.lint.results import Result
from dashlint.lint.rules import TargetRule
from dashlint.lint.variables import DEFAULT_DURATION, duration_ms

logger = structlog.get_logger()

# Panel types whose targets are known to hold queries. Anything else is
# skipped so unfamiliar panel types do not produce false positives.
QUERY_PANEL_TYPES = frozenset(
    {"singlestat", "graph", "table", "stat", "state-timeline", "timeseries"}
)


def panel_has_queries(panel: Panel, panel_types: frozenset[str] = QUERY_PANEL_TYPES) -> bool:
    """Return True if the panel has queries we should try and validate."""
    return panel.type in panel_types


def resolve_panel_reference(dashboard: Dashboard, panel: Panel, target: Target) -> Panel:
    """
    Find the panel whose query a target reuses.

    The referenced panel's own targets are validated where they are defined.

    Raises:
        DanglingReferenceError: If no panel in the dashboard has the referenced id
    """
    for candidate in dashboard.get_panels():
        if candidate.id == target.panel_id:
            return candidate
    raise DanglingReferenceError(
        f"Dashboard '{dashboard.title}', panel '{panel.title}' invalid panel reference "
        f"in target, reference panel id '{target.panel_id}'",
        details={
            "dashboard": dashboard.title,
            "panel": panel.title,
            "panel_id": target.panel_id,
        },
    )


class TargetPromQLRule(TargetRule):
    """Checks that each target uses a valid PromQL query."""

    name = "target-promql-rule"
    description = "Checks that each target uses a valid PromQL query."

    def __init__(
        self,
        rate_interval: str = DEFAULT_DURATION,
        allow_empty_targets: bool = False,
        extra_panel_types: Iterable[str] = (),
    ):
        """
        Args:
            rate_interval: Duration substituted for $__rate_interval
            allow_empty_targets: Pass targets with neither a query nor a panel reference
            extra_panel_types: Panel types to check besides QUERY_PANEL_TYPES

        Raises:
            ConfigurationError: If rate_interval is not a PromQL duration
        """
        try:
            rate_interval_ms = duration_ms(rate_interval)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid rate interval: {rate_interval}", details={"rate_interval": rate_interval}
            ) from e
        self.global_values = {
            "__rate_interval": rate_interval,
            "__rate_interval_ms": str(rate_interval_ms),
        }
        self.allow_empty_targets = allow_empty_targets
        self.panel_types = QUERY_PANEL_TYPES | frozenset(extra_panel_types)

    def evaluate(self, dashboard: Dashboard, panel: Panel, target: Target) -> Result:
        datasource = dashboard.get_template_datasource()
        if datasource is None or datasource.query != PROMETHEUS:
            # Missing template datasources is a separate rule.
            return Result.success()

        if not panel_has_queries(panel, self.panel_types):
            return Result.success()

        expr = target.expr.strip()
        if not expr:
            return self._evaluate_reference(dashboard, panel, target)

        try:
            parse_target_expr(expr, dashboard.templating, self.global_values)
        except LintError as e:
            logger.debug(
                "invalid_promql",
                dashboard=dashboard.title,
                panel=panel.title,
                error_type=type(e).__name__,
            )
            return Result.error(
                f"Dashboard '{dashboard.title}', panel '{panel.title}' "
                f"invalid PromQL query '{target.expr}': {e.message}"
            )

        return Result.success()

    def _evaluate_reference(self, dashboard: Dashboard, panel: Panel, target: Target) -> Result:
        if target.panel_id <= 0:
            if self.allow_empty_targets:
                return Result.success()
            return Result.error(
                f"Dashboard '{dashboard.title}', panel '{panel.title}' "
                "has a target with an empty query"
            )

        try:
            resolve_panel_reference(dashboard, panel, target)
        except DanglingReferenceError as e:
            return Result.error(e.message)
        return Result.success()
