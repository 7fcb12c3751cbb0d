"""
Template variable expansion for PromQL targets.

Grafana substitutes dashboard variables into queries when it sends them to
Prometheus. To parse a query offline every variable reference is replaced with
a literal that keeps the surrounding PromQL grammatical. The value itself is
irrelevant to the linter, so the replacement depends on where the reference
sits:

- inside a string literal: the variable's current value, escaped for the quote
- inside a range or subquery bracket, or after `offset`: a duration
- after `@`: a number
- anywhere else: the current value if it is an identifier, number or duration,
  otherwise the variable name (always a valid identifier). Only identifiers
  are spliced in front of further name characters, as in ${prefix}_total.

Supported reference syntaxes are $var, ${var}, ${var:format}, [[var]] and
[[var:format]]. The input is scanned once from left to right, so text that a
substitution inserts is never scanned again.

Usage:
    from dashlint.lint.variables import expand_variables

    expand_variables('rate(http_requests_total{job=~"$job"}[$__rate_interval])', templates)
    # 'rate(http_requests_total{job=~"api"}[5m])'
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Mapping, Sequence

from dashlint.core.errors import ExpansionError
from dashlint.dashboards.models import Template

DEFAULT_DURATION = "5m"

# Grafana built-in variables, replaced the same way in every context
GLOBAL_VARIABLES: dict[str, str] = {
    "__rate_interval": DEFAULT_DURATION,
    "__rate_interval_ms": "300000",
    "__interval": "1m",
    "__interval_ms": "60000",
    "__range": "6h",
    "__range_s": "21600",
    "__range_ms": "21600000",
    "__from": "1594671549254",
    "__to": "1594693149254",
    "__dashboard": "dashboard",
    "__name": "name",
    "__org": "1",
    "__org.name": "org",
    "__user.id": "1",
    "__user.login": "user",
    "__user.email": "user@example.com",
    "__timezone": "UTC",
}

# Formatting options accepted in ${var:format}
VARIABLE_FORMATS = frozenset(
    {
        "csv",
        "date",
        "distributed",
        "doublequote",
        "glob",
        "json",
        "lucene",
        "percentencode",
        "pipe",
        "queryparam",
        "raw",
        "regex",
        "singlequote",
        "sqlstring",
        "text",
    }
)

# Plain names may be dotted ($__org.name); legacy names never contain brackets
_VARIABLE_RE = re.compile(
    r"\$(?P<plain>\w+(?:\.\w+)*)|\$\{(?P<braced>[^}]+)\}|\[\[(?P<legacy>[^\[\]]+)\]\]"
)
_PLAIN_RE = re.compile(r"\$(?P<plain>\w+)")
_DURATION_RE = re.compile(r"^(\d+(ms|[smhdwy]))+$")
_DURATION_PART_RE = re.compile(r"(\d+)(ms|[smhdwy])")
_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_WORD_CHAR_RE = re.compile(r"[\w:]")

# Text preceding a reference that makes it an offset duration or an @ timestamp
_OFFSET_PREFIX_RE = re.compile(r"(?<![\w:])offset\s*-?\s*$", re.IGNORECASE)
_AT_PREFIX_RE = re.compile(r"@\s*$")

_DURATION_UNITS_MS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
    "y": 365 * 24 * 60 * 60 * 1000,
}

_QUOTES = "\"'`"


class _Context(Enum):
    BARE = "bare"
    RANGE = "range"
    STRING = "string"
    OFFSET = "offset"
    TIMESTAMP = "timestamp"


def duration_ms(value: str) -> int:
    """
    Convert a PromQL duration such as "1h30m" to milliseconds.

    Raises:
        ValueError: If the value is not a duration
    """
    if not _DURATION_RE.match(value):
        raise ValueError(f"invalid duration '{value}'")
    return sum(int(n) * _DURATION_UNITS_MS[unit] for n, unit in _DURATION_PART_RE.findall(value))


def expand_variables(
    expr: str,
    templates: Sequence[Template],
    global_values: Mapping[str, str] | None = None,
) -> str:
    """
    Replace every variable reference in a query with a valid PromQL literal.

    Args:
        expr: Raw query text from a panel target
        templates: The dashboard's template variables
        global_values: Overrides for built-in variables (e.g. __rate_interval)

    Returns:
        The expanded query. Input without variable references is returned unchanged.

    Raises:
        ExpansionError: If a reference outside a string names an undeclared
            variable or uses an unknown format
    """
    globals_ = dict(GLOBAL_VARIABLES)
    if global_values:
        globals_.update(global_values)
    declared = {t.name: t for t in templates if t.name}

    try:
        return _expand(expr, declared, globals_)
    except ValueError as e:
        raise ExpansionError(f"could not expand variables: {e}", details={"expr": expr}) from e


def _expand(expr: str, declared: Mapping[str, Template], globals_: Mapping[str, str]) -> str:
    out: list[str] = []
    quote: str | None = None
    depth = 0
    i = 0
    n = len(expr)

    while i < n:
        ch = expr[i]

        if ch in "$[":
            match = _VARIABLE_RE.match(expr, i)
            if match:
                name = match.group("plain")
                if name and "." in name and name not in globals_ and name not in declared:
                    # $host.example.com refers to $host
                    match = _PLAIN_RE.match(expr, i)
                if quote:
                    context = _Context.STRING
                elif depth:
                    context = _Context.RANGE
                else:
                    context = _bare_context("".join(out))
                followed_by_name = _WORD_CHAR_RE.match(expr, match.end()) is not None
                out.append(
                    _substitute(match, context, quote, declared, globals_, followed_by_name)
                )
                i = match.end()
                continue

        if quote:
            if ch == "\\" and quote != "`":
                out.append(expr[i : i + 2])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "#":
            end = expr.find("\n", i)
            end = n if end == -1 else end
            out.append(expr[i:end])
            i = end
            continue
        elif ch == "[":
            depth += 1
        elif ch == "]" and depth:
            depth -= 1

        out.append(ch)
        i += 1

    return "".join(out)


def _substitute(
    match: re.Match[str],
    context: _Context,
    quote: str | None,
    declared: Mapping[str, Template],
    globals_: Mapping[str, str],
    followed_by_name: bool = False,
) -> str:
    name = match.group("plain")
    if name is None:
        inner = match.group("braced") or match.group("legacy")
        name, _, fmt = inner.partition(":")
        name = name.strip()
        if fmt and fmt.split(":")[0].strip() not in VARIABLE_FORMATS:
            raise ValueError(f"unknown format '{fmt}' for variable '{name}'")

    if name in globals_:
        value = globals_[name]
        return _escape(value, quote) if context is _Context.STRING else value

    template = declared.get(name)
    if template is None:
        if context is _Context.STRING:
            # Grafana leaves unknown variables untouched; inside a string that is still valid
            return match.group(0)
        raise ValueError(f"undefined variable '{name}'")

    if context is _Context.STRING:
        return _escape(_string_value(template), quote)
    if context is _Context.TIMESTAMP:
        return _timestamp_value(template)
    if context in (_Context.RANGE, _Context.OFFSET) or template.type == "interval":
        return _duration_value(template)
    return _bare_value(template, followed_by_name)


def _bare_context(preceding: str) -> _Context:
    if _OFFSET_PREFIX_RE.search(preceding):
        return _Context.OFFSET
    if _AT_PREFIX_RE.search(preceding):
        return _Context.TIMESTAMP
    return _Context.BARE


def _string_value(template: Template) -> str:
    if template.is_all():
        return template.all_value or ".*"
    return "|".join(template.values())


def _duration_value(template: Template) -> str:
    for value in template.values():
        if _DURATION_RE.match(value):
            return value
    return DEFAULT_DURATION


def _timestamp_value(template: Template) -> str:
    for value in template.values():
        if _NUMBER_RE.match(value):
            return value
    return "0"


def _bare_value(template: Template, followed_by_name: bool = False) -> str:
    values = template.values()
    if values and not template.is_all():
        value = values[0]
        if _IDENTIFIER_RE.match(value):
            return value
        if not followed_by_name and (_NUMBER_RE.match(value) or _DURATION_RE.match(value)):
            return value
    return _identifier(template.name)


def _identifier(name: str) -> str:
    ident = re.sub(r"[^a-zA-Z0-9_:]", "_", name)
    if not _IDENTIFIER_RE.match(ident):
        ident = f"_{ident}"
    return ident


def _escape(value: str, quote: str | None) -> str:
    if quote == "`":
        return value.replace("`", "")
    if quote is None:
        return value
    return value.replace("\\", "\\\\").replace(quote, "\\" + quote)
