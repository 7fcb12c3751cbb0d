"""
CLI command for linting Grafana dashboards.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from rich.markup import escape

from dashlint.cli.formatters import CheckStatus, LintReport, OutputFormat, format_report
from dashlint.cli.ux import console, error, header, info, success, warning
from dashlint.config import Settings, get_settings
from dashlint.core.errors import (
    ConfigurationError,
    DashboardLoadError,
    ExitCode,
    main_with_error_handling,
)
from dashlint.dashboards.loader import load_dashboards
from dashlint.lint.config import LintConfig, load_lint_config
from dashlint.lint.engine import Linter
from dashlint.lint.registry import default_rule_set
from dashlint.lint.results import ResultSet, Severity


@main_with_error_handling()
def lint_command(
    paths: Sequence[str],
    config: Optional[str] = None,
    output_format: Optional[str] = None,
    rules: Optional[Sequence[str]] = None,
    strict: bool = False,
    verbose: bool = False,
    output_file: Optional[str] = None,
) -> int:
    """
    Lint Grafana dashboards.

    Args:
        paths: Dashboard files or directories
        config: Lint config file; defaults to a `.lint` file next to each path
        output_format: table or json (defaults to the configured output format)
        rules: Restrict linting to these rule names
        strict: Treat warnings as failures
        verbose: Also show passed checks
        output_file: Write the formatted report to this file

    Returns:
        Exit code (0 clean, 1 warnings with --strict, 12 errors)
    """
    settings = get_settings()
    fmt = _output_format(output_format or settings.output_format)

    rule_set = default_rule_set(settings)
    if rules:
        rule_set = rule_set.select(rules)

    explicit_config = load_lint_config(config, required=True) if config else None

    results = ResultSet()
    sources: list[str] = []
    for path in paths:
        linter = Linter(rule_set, explicit_config or _find_config(path, settings))
        for file_path, dashboard in load_dashboards([path]):
            sources.append(str(file_path))
            results.extend(linter.lint_dashboard(dashboard))

    if not sources:
        raise DashboardLoadError("No dashboards found", details={"paths": ", ".join(paths)})

    report = LintReport.from_results(results, sources)

    if output_file:
        format_report(report, fmt, output_file=output_file, verbose=verbose)
        info(f"Report written to {output_file}")
    elif fmt == OutputFormat.JSON:
        print(format_report(report, fmt, verbose=verbose))
    else:
        _print_report(report, verbose)

    return _exit_code(results, strict)


@main_with_error_handling()
def rules_command() -> int:
    """List the registered lint rules."""
    header("Lint rules")
    for rule in default_rule_set():
        console.print(f"[highlight]{rule.name}[/highlight]  {escape(rule.description)}")
    return ExitCode.SUCCESS


def _output_format(value: str) -> OutputFormat:
    try:
        return OutputFormat(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown output format: {value}",
            details={"available": ", ".join(f.value for f in OutputFormat)},
        ) from e


def _find_config(path: str, settings: Settings) -> LintConfig:
    """Load the lint config that sits next to a dashboard path, if any."""
    location = Path(path)
    directory = location if location.is_dir() else location.parent
    return load_lint_config(directory / settings.lint_config_name)


def _exit_code(results: ResultSet, strict: bool) -> int:
    if results.max_severity == Severity.ERROR:
        return ExitCode.VALIDATION_ERROR
    if strict and results.max_severity == Severity.WARNING:
        return ExitCode.WARNING
    return ExitCode.SUCCESS


def _print_report(report: LintReport, verbose: bool) -> None:
    """Print a lint report to the console."""
    for check in report.checks:
        if check.status == CheckStatus.PASS and not verbose:
            continue
        if check.status == CheckStatus.FAIL:
            icon = "[error]✗[/error]"
        elif check.status == CheckStatus.WARN:
            icon = "[warning]⚠[/warning]"
        elif check.status == CheckStatus.SKIP:
            icon = "[muted]○[/muted]"
        else:
            icon = "[success]✓[/success]"
        console.print(f"{icon} [muted]({check.name})[/muted] {escape(check.location or '')}")
        if check.message:
            console.print(f"    {escape(check.message)}")

    console.print()
    summary = (
        f"{len(report.sources)} dashboards, {report.errors} errors, "
        f"{report.warnings} warnings, {report.skipped} excluded"
    )
    if report.status == CheckStatus.FAIL:
        error(summary)
    elif report.status == CheckStatus.WARN:
        warning(summary)
    else:
        success(summary)
