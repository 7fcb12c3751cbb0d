"""Static checks for Grafana dashboards."""

__version__ = "0.1.0"
