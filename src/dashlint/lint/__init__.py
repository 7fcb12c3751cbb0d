"""Lint rules, engine and results for Grafana dashboards."""

from dashlint.lint.config import LintConfig, load_lint_config
from dashlint.lint.engine import Linter
from dashlint.lint.promql import parse_promql, parse_target_expr
from dashlint.lint.registry import default_rule_set
from dashlint.lint.results import Result, ResultContext, ResultSet, Severity
from dashlint.lint.rule_target_promql import (
    QUERY_PANEL_TYPES,
    TargetPromQLRule,
    panel_has_queries,
    resolve_panel_reference,
)
from dashlint.lint.rules import Rule, RuleSet, TargetRule
from dashlint.lint.variables import GLOBAL_VARIABLES, expand_variables

__all__ = [
    # Results
    "Severity",
    "Result",
    "ResultContext",
    "ResultSet",
    # Rules
    "Rule",
    "TargetRule",
    "RuleSet",
    "default_rule_set",
    "TargetPromQLRule",
    "QUERY_PANEL_TYPES",
    "panel_has_queries",
    "resolve_panel_reference",
    # Query handling
    "expand_variables",
    "GLOBAL_VARIABLES",
    "parse_promql",
    "parse_target_expr",
    # Engine
    "Linter",
    "LintConfig",
    "load_lint_config",
]
