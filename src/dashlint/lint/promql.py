"""
PromQL parsing for dashboard targets.

Wraps the promql-parser grammar. Only grammatical validity is checked:
metric names, label sets and matcher shapes are not inspected.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import promql_parser

from dashlint.core.errors import QueryParseError
from dashlint.dashboards.models import Template
from dashlint.lint.variables import expand_variables


def parse_promql(expr: str) -> Any:
    """
    Parse a fully expanded PromQL expression.

    Returns:
        The parsed expression tree

    Raises:
        QueryParseError: If the expression is not valid PromQL
    """
    try:
        return promql_parser.parse(expr)
    except ValueError as e:
        raise QueryParseError(str(e), details={"expr": expr}) from e


def parse_target_expr(
    expr: str,
    templates: Sequence[Template],
    global_values: Mapping[str, str] | None = None,
) -> Any:
    """
    Expand template variables in a target query, then parse it.

    Raises:
        ExpansionError: If a variable reference cannot be substituted
        QueryParseError: If the expanded query is not valid PromQL
    """
    return parse_promql(expand_variables(expr, templates, global_values))
