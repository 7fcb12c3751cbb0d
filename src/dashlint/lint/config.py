"""
Lint configuration file.

A YAML file (conventionally `.lint` next to the dashboards) that excludes
results or downgrades them to warnings, per rule:

    exclusions:
      target-promql-rule:
        reason: Dashboard imported from upstream
        entries:
          - dashboard: API Health
            panel: Requests
            targetIdx: 0
    warnings:
      target-promql-rule: {}

A rule listed without entries applies to every result of that rule.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dashlint.core.errors import ConfigurationError
from dashlint.lint.results import ResultContext, Severity

logger = structlog.get_logger()


class ConfigEntry(BaseModel):
    """Narrows an exclusion or warning to one dashboard, panel or target."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    dashboard: Optional[str] = None
    panel: Optional[str] = None
    target_idx: Optional[int] = Field(default=None, alias="targetIdx")
    reason: str = ""

    def matches(self, context: ResultContext) -> bool:
        if self.dashboard is not None and self.dashboard != context.dashboard.title:
            return False
        if self.panel is not None and (context.panel is None or self.panel != context.panel.title):
            return False
        if self.target_idx is not None and self.target_idx != context.target_index:
            return False
        return True


class RuleOverride(BaseModel):
    """Exclusion or warning settings for a single rule."""

    model_config = ConfigDict(extra="forbid")

    reason: str = ""
    entries: List[ConfigEntry] = Field(default_factory=list)

    def matches(self, context: ResultContext) -> bool:
        return not self.entries or any(entry.matches(context) for entry in self.entries)


class LintConfig(BaseModel):
    """Per-rule exclusions and warning downgrades."""

    model_config = ConfigDict(extra="forbid")

    exclusions: Dict[str, Optional[RuleOverride]] = Field(default_factory=dict)
    warnings: Dict[str, Optional[RuleOverride]] = Field(default_factory=dict)

    def is_excluded(self, context: ResultContext) -> bool:
        return _matches(self.exclusions, context)

    def is_warning(self, context: ResultContext) -> bool:
        return _matches(self.warnings, context)

    def apply(self, context: ResultContext) -> ResultContext:
        """Return the context with exclusions and warnings applied."""
        if context.result.is_success:
            return context
        if self.is_excluded(context):
            return context.with_severity(Severity.EXCLUDE)
        if context.severity == Severity.ERROR and self.is_warning(context):
            return context.with_severity(Severity.WARNING)
        return context


def _matches(overrides: Dict[str, Optional[RuleOverride]], context: ResultContext) -> bool:
    if context.rule not in overrides:
        return False
    override = overrides[context.rule]
    return override is None or override.matches(context)


def load_lint_config(path: str | Path, required: bool = False) -> LintConfig:
    """
    Load a lint configuration file.

    Args:
        path: Path to the YAML file
        required: Raise if the file does not exist instead of returning an empty config

    Raises:
        ConfigurationError: If the file is required but missing, or is invalid
    """
    path = Path(path)
    if not path.is_file():
        if required:
            raise ConfigurationError(
                f"Lint config not found: {path}", details={"path": str(path)}
            )
        return LintConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read lint config: {e}", details={"path": str(path)}
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Lint config must be a mapping", details={"path": str(path)})

    try:
        config = LintConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid lint config: {e}", details={"path": str(path)}
        ) from e

    logger.debug(
        "lint_config_loaded",
        path=str(path),
        exclusions=len(config.exclusions),
        warnings=len(config.warnings),
    )
    return config
