"""Grafana dashboard data models.

Provides typed, read-only Python models for the parts of Grafana dashboard
JSON that lint rules inspect.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

# Plugin id of the Prometheus data source
PROMETHEUS = "prometheus"

# Value Grafana stores in `current` when "All" is selected
ALL_VALUE = "$__all"


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Target:
    """Query target of a panel."""

    expr: str = ""
    panel_id: int = 0  # Reuse the query of this panel when expr is empty
    ref_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Target":
        """Build from Grafana target JSON."""
        return cls(
            expr=data.get("expr") or "",
            panel_id=_as_int(data.get("panelId")),
            ref_id=data.get("refId") or "",
        )


@dataclass(frozen=True)
class Panel:
    """Grafana dashboard panel."""

    id: int
    title: str = ""
    type: str = ""
    targets: List[Target] = field(default_factory=list)

    # Children of a collapsed row
    panels: List["Panel"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Panel":
        """Build from Grafana panel JSON."""
        return cls(
            id=_as_int(data.get("id")),
            title=data.get("title") or "",
            type=data.get("type") or "",
            targets=[Target.from_dict(t) for t in data.get("targets") or [] if isinstance(t, dict)],
            panels=[cls.from_dict(p) for p in data.get("panels") or [] if isinstance(p, dict)],
        )


@dataclass(frozen=True)
class Template:
    """Dashboard template variable (including data source selectors)."""

    name: str
    type: str = "query"  # query, custom, interval, datasource, constant, textbox, adhoc
    query: str = ""  # Plugin id for datasource templates
    label: str = ""
    current: Union[str, List[str], None] = None
    options: List[str] = field(default_factory=list)
    multi: bool = False
    include_all: bool = False
    all_value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Template":
        """Build from Grafana templating JSON."""
        query = data.get("query")
        # Newer Grafana versions store query variables as objects
        if isinstance(query, dict):
            query = query.get("query")

        current = data.get("current") or {}
        value = current.get("value") if isinstance(current, dict) else None
        if isinstance(value, list):
            value = [str(v) for v in value]
        elif value is not None:
            value = str(value)

        options = [
            str(o.get("value"))
            for o in data.get("options") or []
            if isinstance(o, dict) and o.get("value") is not None
        ]

        return cls(
            name=data.get("name") or "",
            type=data.get("type") or "query",
            query=query if isinstance(query, str) else "",
            label=data.get("label") or "",
            current=value,
            options=options,
            multi=bool(data.get("multi")),
            include_all=bool(data.get("includeAll")),
            all_value=data.get("allValue") or None,
        )

    def values(self) -> List[str]:
        """Currently selected values, falling back to the first option."""
        if isinstance(self.current, list):
            selected = self.current
        elif self.current is not None:
            selected = [self.current]
        else:
            selected = []
        if not selected and self.options:
            selected = self.options[:1]
        return selected

    def is_all(self) -> bool:
        """Whether the "All" option is currently selected."""
        return ALL_VALUE in self.values()


@dataclass(frozen=True)
class Dashboard:
    """Complete Grafana dashboard."""

    title: str
    panels: List[Panel] = field(default_factory=list)
    templating: List[Template] = field(default_factory=list)
    uid: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dashboard":
        """Build from Grafana dashboard JSON."""
        panels = [Panel.from_dict(p) for p in data.get("panels") or [] if isinstance(p, dict)]

        # Legacy schema keeps panels under rows
        for row in data.get("rows") or []:
            if isinstance(row, dict):
                panels.extend(
                    Panel.from_dict(p) for p in row.get("panels") or [] if isinstance(p, dict)
                )

        templating = data.get("templating") or {}
        templates = [
            Template.from_dict(t) for t in templating.get("list") or [] if isinstance(t, dict)
        ]

        return cls(
            title=data.get("title") or "",
            panels=panels,
            templating=templates,
            uid=data.get("uid"),
        )

    def get_panels(self) -> Iterator[Panel]:
        """Yield every panel in document order, including row children."""
        for panel in self.panels:
            yield panel
            yield from panel.panels

    def get_template_datasource(self) -> Optional[Template]:
        """Return the dashboard's data source template, if any."""
        for template in self.templating:
            if template.type == "datasource":
                return template
        return None
