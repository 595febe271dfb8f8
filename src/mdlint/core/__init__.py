"""Core modules for Markdown linting."""
from .linter import (
    LintReport,
    Violation,
    analyze,
    apply_edits,
    compose_fix_all,
    get_rule_info,
    lint_file,
)

__all__ = [
    "LintReport",
    "Violation",
    "analyze",
    "apply_edits",
    "compose_fix_all",
    "get_rule_info",
    "lint_file",
]
