"""
Grafana dashboard models and loading.
"""

from dashlint.dashboards.loader import iter_dashboard_files, load_dashboard, load_dashboards
from dashlint.dashboards.models import PROMETHEUS, Dashboard, Panel, Target, Template

__all__ = [
    "Dashboard",
    "Panel",
    "Target",
    "Template",
    "PROMETHEUS",
    "load_dashboard",
    "load_dashboards",
    "iter_dashboard_files",
]
