"""Tests for lint/rule_target_promql.py.

Tests for the target PromQL rule: panel eligibility, panel references
and query validation.
"""

import pytest

from dashlint.core.errors import ConfigurationError, DanglingReferenceError
from dashlint.dashboards.models import Dashboard, Panel, Target, Template
from dashlint.lint.results import Severity
from dashlint.lint.rule_target_promql import (
    QUERY_PANEL_TYPES,
    TargetPromQLRule,
    panel_has_queries,
    resolve_panel_reference,
)
from dashlint.lint.variables import expand_variables

PROMETHEUS_DATASOURCE = Template(name="datasource", type="datasource", query="prometheus")


def _dashboard(*panels, templating=None, title="API Health"):
    if templating is None:
        templating = [PROMETHEUS_DATASOURCE]
    return Dashboard(title=title, panels=list(panels), templating=templating)


def _panel(expr="", panel_id=0, id=1, title="Requests", type="graph"):
    return Panel(id=id, title=title, type=type, targets=[Target(expr=expr, panel_id=panel_id)])


class TestPanelHasQueries:
    """Tests for the panel type allow-list."""

    @pytest.mark.parametrize("panel_type", sorted(QUERY_PANEL_TYPES))
    def test_query_panel_types(self, panel_type):
        assert panel_has_queries(Panel(id=1, type=panel_type)) is True

    @pytest.mark.parametrize("panel_type", ["text", "row", "logs", "gauge", "news", ""])
    def test_other_panel_types(self, panel_type):
        assert panel_has_queries(Panel(id=1, type=panel_type)) is False

    def test_custom_allow_list(self):
        assert panel_has_queries(Panel(id=1, type="gauge"), frozenset({"gauge"})) is True

    def test_allow_list_contents(self):
        assert QUERY_PANEL_TYPES == frozenset(
            {"singlestat", "graph", "table", "stat", "state-timeline", "timeseries"}
        )


class TestResolvePanelReference:
    """Tests for resolving targets that reuse another panel's query."""

    def test_existing_panel(self):
        source = _panel("up", id=1)
        reusing = _panel(panel_id=1, id=2, title="Latency")
        dashboard = _dashboard(source, reusing)

        resolved = resolve_panel_reference(dashboard, reusing, reusing.targets[0])

        assert resolved is source

    def test_panel_inside_row(self):
        nested = _panel("up", id=7, title="Nested")
        row = Panel(id=5, title="Row", type="row", panels=[nested])
        reusing = _panel(panel_id=7, id=2, title="Latency")
        dashboard = _dashboard(row, reusing)

        assert resolve_panel_reference(dashboard, reusing, reusing.targets[0]) is nested

    def test_missing_panel(self):
        reusing = _panel(panel_id=99, id=2, title="Latency")
        dashboard = _dashboard(_panel("up", id=1), reusing)

        with pytest.raises(DanglingReferenceError) as exc_info:
            resolve_panel_reference(dashboard, reusing, reusing.targets[0])

        assert "invalid panel reference" in exc_info.value.message
        assert exc_info.value.details == {
            "dashboard": "API Health",
            "panel": "Latency",
            "panel_id": 99,
        }


class TestTargetPromQLRuleApplicability:
    """Dashboards and panels the rule does not apply to always pass."""

    def setup_method(self):
        self.rule = TargetPromQLRule()

    def test_name_and_description(self):
        assert self.rule.name == "target-promql-rule"
        assert self.rule.description == "Checks that each target uses a valid PromQL query."

    def test_no_datasource_template(self):
        panel = _panel("sum(rate(x[5m])")
        dashboard = _dashboard(panel, templating=[])

        result = self.rule.evaluate(dashboard, panel, panel.targets[0])

        assert result.severity == Severity.SUCCESS

    def test_non_prometheus_datasource(self):
        panel = _panel("sum(rate(x[5m])")
        loki = Template(name="datasource", type="datasource", query="loki")
        dashboard = _dashboard(panel, templating=[loki])

        assert self.rule.evaluate(dashboard, panel, panel.targets[0]).is_success

    @pytest.mark.parametrize("panel_type", ["text", "logs", "gauge", "news", ""])
    @pytest.mark.parametrize("expr", ["sum(rate(x[5m])", "", "{{{"])
    def test_ineligible_panel_always_passes(self, panel_type, expr):
        panel = _panel(expr, type=panel_type)
        dashboard = _dashboard(panel)

        result = self.rule.evaluate(dashboard, panel, panel.targets[0])

        assert result.severity == Severity.SUCCESS
        assert result.message == ""


class TestTargetPromQLRuleQueries:
    """Tests for targets carrying a literal query."""

    def setup_method(self):
        self.rule = TargetPromQLRule()

    @pytest.mark.parametrize("panel_type", sorted(QUERY_PANEL_TYPES))
    def test_valid_query(self, panel_type):
        panel = _panel('sum(rate(http_requests_total{job="api"}[5m]))', type=panel_type)
        dashboard = _dashboard(panel)

        assert self.rule.evaluate(dashboard, panel, panel.targets[0]).is_success

    def test_valid_query_with_variables(self):
        templates = [
            PROMETHEUS_DATASOURCE,
            Template(name="job", current=["api", "web"], multi=True),
            Template(name="group", current="instance"),
        ]
        panel = _panel(
            'sum(rate(http_requests_total{job=~"$job"}[$__rate_interval])) by ($group)'
        )
        dashboard = _dashboard(panel, templating=templates)

        assert self.rule.evaluate(dashboard, panel, panel.targets[0]).is_success

    @pytest.mark.parametrize(
        "expr",
        [
            "sum(rate(http_requests_total[5m])",
            "rate(http_requests_total[5m]",
            'up{job="api"',
        ],
    )
    def test_invalid_query(self, expr):
        panel = _panel(expr, title="Errors")
        dashboard = _dashboard(panel, title="Checkout")

        result = self.rule.evaluate(dashboard, panel, panel.targets[0])

        assert result.severity == Severity.ERROR
        assert "Checkout" in result.message
        assert "Errors" in result.message
        assert expr in result.message
        assert "invalid PromQL query" in result.message

    def test_expansion_failure(self):
        panel = _panel("rate($metric[5m])")
        dashboard = _dashboard(panel)

        result = self.rule.evaluate(dashboard, panel, panel.targets[0])

        assert result.severity == Severity.ERROR
        assert "could not expand variables" in result.message
        assert "rate($metric[5m])" in result.message

    def test_extra_panel_types(self):
        rule = TargetPromQLRule(extra_panel_types=["gauge"])
        panel = _panel("sum(rate(x[5m])", type="gauge")
        dashboard = _dashboard(panel)

        assert rule.evaluate(dashboard, panel, panel.targets[0]).severity == Severity.ERROR

    def test_custom_rate_interval(self):
        rule = TargetPromQLRule(rate_interval="30s")
        panel = _panel("rate(http_requests_total[$__rate_interval])")
        dashboard = _dashboard(panel)

        assert rule.evaluate(dashboard, panel, panel.targets[0]).is_success

    def test_rate_interval_ms_follows_rate_interval(self):
        rule = TargetPromQLRule(rate_interval="30s")

        assert rule.global_values == {
            "__rate_interval": "30s",
            "__rate_interval_ms": "30000",
        }

    def test_invalid_rate_interval(self):
        with pytest.raises(ConfigurationError) as exc_info:
            TargetPromQLRule(rate_interval="auto")

        assert exc_info.value.details == {"rate_interval": "auto"}

    @pytest.mark.parametrize(
        "expr",
        [
            "rate(http_requests_total[[[interval]]])",
            "rate(http_requests_total[$__rate_interval]) offset $interval",
            "rate(http_requests_total[5m] @ $ts)",
        ],
    )
    def test_templated_durations_and_timestamps(self, expr):
        templating = [
            PROMETHEUS_DATASOURCE,
            Template(name="interval", type="custom", current="auto"),
            Template(name="ts", type="custom", current="now"),
        ]
        panel = _panel(expr)
        dashboard = _dashboard(panel, templating=templating)

        assert self.rule.evaluate(dashboard, panel, panel.targets[0]).is_success


class TestTargetPromQLRuleReferences:
    """Tests for targets without a query."""

    def setup_method(self):
        self.rule = TargetPromQLRule()

    def test_reference_to_existing_panel(self):
        source = _panel("up", id=1)
        reusing = _panel(panel_id=1, id=2, title="Latency")
        dashboard = _dashboard(source, reusing)

        assert self.rule.evaluate(dashboard, reusing, reusing.targets[0]).is_success

    def test_dangling_reference(self):
        reusing = _panel(panel_id=42, id=2, title="Latency")
        dashboard = _dashboard(_panel("up", id=1), reusing)

        result = self.rule.evaluate(dashboard, reusing, reusing.targets[0])

        assert result.severity == Severity.ERROR
        assert "API Health" in result.message
        assert "Latency" in result.message
        assert "42" in result.message

    def test_whitespace_query_treated_as_empty(self):
        source = _panel("up", id=1)
        reusing = _panel("  \n", panel_id=1, id=2)
        dashboard = _dashboard(source, reusing)

        assert self.rule.evaluate(dashboard, reusing, reusing.targets[0]).is_success

    def test_empty_query_without_reference(self):
        panel = _panel("", panel_id=0)
        dashboard = _dashboard(panel)

        result = self.rule.evaluate(dashboard, panel, panel.targets[0])

        assert result.severity == Severity.ERROR
        assert "empty query" in result.message

    def test_empty_query_allowed(self):
        rule = TargetPromQLRule(allow_empty_targets=True)
        panel = _panel("", panel_id=0)
        dashboard = _dashboard(panel)

        assert rule.evaluate(dashboard, panel, panel.targets[0]).is_success


class TestEndToEnd:
    """Worked examples for the API Health dashboard."""

    def test_rate_interval_query(self):
        expr = "rate(http_requests_total[$__rate_interval])"
        panel = _panel(expr, id=1, title="Requests", type="graph")
        dashboard = _dashboard(panel)

        assert expand_variables(expr, dashboard.templating) == "rate(http_requests_total[5m])"
        assert TargetPromQLRule().evaluate(dashboard, panel, panel.targets[0]).is_success

    def test_dangling_panel_reference(self):
        requests = _panel("rate(http_requests_total[$__rate_interval])", id=1, title="Requests")
        latency = _panel("", panel_id=99, id=2, title="Latency")
        dashboard = _dashboard(requests, latency)

        result = TargetPromQLRule().evaluate(dashboard, latency, latency.targets[0])

        assert result.severity == Severity.ERROR
        assert "invalid panel reference" in result.message
        assert "99" in result.message


class TestTargetRuleLint:
    """Tests for iterating a dashboard through TargetRule.lint."""

    def test_one_context_per_target(self):
        multi = Panel(
            id=1,
            title="Requests",
            type="graph",
            targets=[Target(expr="up"), Target(expr="sum(up")],
        )
        row = Panel(id=2, title="Row", type="row", panels=[_panel("up", id=3, title="Inner")])
        dashboard = _dashboard(multi, row)

        contexts = list(TargetPromQLRule().lint(dashboard))

        assert [(c.panel.title, c.target_index) for c in contexts] == [
            ("Requests", 0),
            ("Requests", 1),
            ("Inner", 0),
        ]
        assert [c.severity for c in contexts] == [
            Severity.SUCCESS,
            Severity.ERROR,
            Severity.SUCCESS,
        ]
        assert all(c.rule == "target-promql-rule" for c in contexts)
