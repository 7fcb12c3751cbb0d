"""Core building blocks shared across dashlint."""

from dashlint.core.errors import (
    ConfigurationError,
    DanglingReferenceError,
    DashboardLoadError,
    DashLintError,
    ExitCode,
    ExpansionError,
    LintError,
    QueryParseError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "DashLintError",
    "ConfigurationError",
    "DashboardLoadError",
    "LintError",
    "ExpansionError",
    "QueryParseError",
    "DanglingReferenceError",
    "format_error_message",
    "main_with_error_handling",
]
