"""Markdown lint engine."""
from .document import Document, build_document
from .engine import analyze, get_available_rules
from .files import fix_content, lint_content, lint_file
from .fixes import apply_edits, compose_fix_all, compute_fix
from .models import Edit, EditSet, Fix, LintReport, RuleConfig, RuleInfo, Severity, Violation
from .registry import all_rules, get_rule_info
from .suppression import Directive, DirectiveKind, parse_suppression_directive

__all__ = [
    "analyze", "compute_fix", "compose_fix_all", "apply_edits",
    "parse_suppression_directive", "get_rule_info", "all_rules", "get_available_rules",
    "lint_file", "lint_content", "fix_content", "build_document", "Document",
    "Directive", "DirectiveKind", "Edit", "EditSet", "Fix", "LintReport",
    "RuleConfig", "RuleInfo", "Severity", "Violation",
]
