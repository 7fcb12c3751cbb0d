"""Root test configuration."""

import logging

import pytest
import structlog

from dashlint.config.settings import get_settings


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def grafana_dashboard_json():
    """A Prometheus-backed dashboard in Grafana JSON form."""
    return {
        "uid": "api-health",
        "title": "API Health",
        "templating": {
            "list": [
                {
                    "name": "datasource",
                    "type": "datasource",
                    "query": "prometheus",
                    "current": {"text": "Prometheus", "value": "Prometheus"},
                },
                {
                    "name": "job",
                    "type": "query",
                    "query": {"query": "label_values(up, job)", "refId": "A"},
                    "current": {"text": ["api", "web"], "value": ["api", "web"]},
                    "multi": True,
                    "includeAll": True,
                },
            ]
        },
        "panels": [
            {
                "id": 1,
                "title": "Requests",
                "type": "graph",
                "targets": [
                    {
                        "expr": 'sum(rate(http_requests_total{job=~"$job"}[$__rate_interval]))',
                        "refId": "A",
                    }
                ],
            },
            {
                "id": 2,
                "title": "Requests (reused)",
                "type": "timeseries",
                "targets": [{"panelId": 1, "refId": "A"}],
            },
            {"id": 3, "title": "Notes", "type": "text"},
        ],
    }
