"""
CLI commands for dashlint.
"""

from dashlint.cli.lint import lint_command, rules_command

__all__ = [
    "lint_command",
    "rules_command",
]
