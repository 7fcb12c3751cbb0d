"""
Dashboard Loader

Reads Grafana dashboard documents from disk into Dashboard models.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator

import structlog
import yaml

from dashlint.core.errors import DashboardLoadError
from dashlint.dashboards.models import Dashboard

logger = structlog.get_logger()

# Directories are searched for JSON only; YAML dashboards must be named explicitly
DASHBOARD_PATTERN = "*.json"


def load_dashboard(path: str | Path) -> Dashboard:
    """
    Load a single dashboard file.

    JSON files are decoded with json, anything else with the YAML loader.
    Documents exported through the Grafana API wrap the
    dashboard in a {"dashboard": {...}} envelope, which is unwrapped.

    Raises:
        DashboardLoadError: If the file is missing or not a dashboard object
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DashboardLoadError(
            f"Dashboard file not found: {path}", details={"path": str(path)}
        ) from e
    except OSError as e:
        raise DashboardLoadError(
            f"Could not read dashboard: {e}", details={"path": str(path)}
        ) from e

    try:
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DashboardLoadError(
            f"Could not decode dashboard: {e}", details={"path": str(path)}
        ) from e

    if not isinstance(data, dict):
        raise DashboardLoadError(
            "Dashboard document must be an object", details={"path": str(path)}
        )

    if "panels" not in data and "rows" not in data and isinstance(data.get("dashboard"), dict):
        data = data["dashboard"]

    dashboard = Dashboard.from_dict(data)
    logger.debug("dashboard_loaded", path=str(path), title=dashboard.title)
    return dashboard


def iter_dashboard_files(path: str | Path) -> Iterator[Path]:
    """Yield dashboard files under a path (a file yields itself, in any format)."""
    path = Path(path)
    if not path.is_dir():
        yield path
        return

    yield from sorted(p for p in path.rglob(DASHBOARD_PATTERN) if p.is_file())


def load_dashboards(paths: Iterable[str | Path]) -> Iterator[tuple[Path, Dashboard]]:
    """Load every dashboard found under the given paths."""
    for path in paths:
        for file_path in iter_dashboard_files(path):
            yield file_path, load_dashboard(file_path)
