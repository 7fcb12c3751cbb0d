"""Built-in rule registration."""

from __future__ import annotations

from dashlint.config.settings import Settings, get_settings
from dashlint.lint.rule_target_promql import TargetPromQLRule
from dashlint.lint.rules import RuleSet


def default_rule_set(settings: Settings | None = None) -> RuleSet:
    """Return a RuleSet with every built-in rule, configured from settings."""
    settings = settings or get_settings()
    return RuleSet(
        [
            TargetPromQLRule(
                rate_interval=settings.rate_interval,
                allow_empty_targets=settings.allow_empty_targets,
                extra_panel_types=settings.extra_panel_types,
            ),
        ]
    )
