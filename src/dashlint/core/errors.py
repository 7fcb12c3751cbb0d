"""
Unified error handling for dashlint.

This module provides the exception hierarchy used across the linter and
the exit code mapping applied by CLI commands.

Exit Codes:
- 0: Success
- 1: Warning (lint produced warnings and --strict was requested)
- 10: Configuration error (bad lint config, unreadable dashboard)
- 12: Validation error (lint produced errors)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    WARNING = 1
    CONFIG_ERROR = 10
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class DashLintError(Exception):
    """Base exception for dashlint errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DashLintError):
    """Raised for lint configuration and settings errors."""

    exit_code = ExitCode.CONFIG_ERROR


class DashboardLoadError(DashLintError):
    """Raised when a dashboard document cannot be read or decoded."""

    exit_code = ExitCode.CONFIG_ERROR


class LintError(DashLintError):
    """Base class for problems found in a dashboard."""

    exit_code = ExitCode.VALIDATION_ERROR


class ExpansionError(LintError):
    """A template variable in a query could not be substituted."""


class QueryParseError(LintError):
    """An expanded query is not valid PromQL."""


class DanglingReferenceError(LintError):
    """A target reuses the query of a panel that does not exist."""


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes with
    consistent error reporting.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - DashLintError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except DashLintError as e:
                # Expected failures (bad paths, bad config) are reported, not logged as errors
                print(f"Error: {format_error_message(e)}", file=sys.stderr)
                if log_errors:
                    logger.debug(
                        "command_failed",
                        command=func.__name__,
                        error_type=type(e).__name__,
                        exit_code=int(e.exit_code),
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted", command=func.__name__)
                return 130  # SIGINT
            except Exception as e:
                print(f"Internal error: {e}", file=sys.stderr)
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        command=func.__name__,
                        error_type=type(e).__name__,
                        message=str(e),
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: DashLintError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
