"""File-level linting - read, analyze, optionally fix and write back."""
import asyncio
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from .engine import analyze
from .fixes import apply_edits, compose_fix_all
from .models import LintReport, Violation
from .registry import RULE_INFOS, resolve_rule_id

logger = logging.getLogger(__name__)


def _selected(rules: Optional[Iterable[str]]) -> Optional[set[str]]:
    if not rules:
        return None
    selected = set()
    for rule in rules:
        rule_id = resolve_rule_id(rule)
        if rule_id is None:
            logger.warning(f"Unknown rule: {rule}")
        else:
            selected.add(rule_id)
    return selected


def fix_content(
    content: str,
    violations: list[Violation],
    rules: Optional[Iterable[str]] = None,
) -> tuple[str, list[str]]:
    """
    Apply every compatible fix to content.

    Args:
        content: Original content
        violations: Violations found in that content
        rules: Only apply fixes from these rules (default: all)

    Returns:
        Tuple of (fixed_content, list_of_applied_rule_ids)
    """
    edits = compose_fix_all(violations, _selected(rules))
    if not edits:
        return content, []
    if edits.dropped:
        logger.info(f"{len(edits.dropped)} overlapping fixes deferred to a later pass")
    return apply_edits(content, edits), sorted(edits.rules)


async def lint_content(
    content: str,
    source_path: str = "<string>",
    rules: Optional[list[str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
    global_enablement: Optional[Mapping[str, bool]] = None,
    parameters: Optional[Mapping[str, Mapping[str, Any]]] = None,
    max_workers: Optional[int] = None,
) -> LintReport:
    """
    Lint markdown content.

    Args:
        content: The markdown content to lint
        source_path: Path for reporting (doesn't need to exist)
        rules: Specific rules to run (default: all enabled rules)
        overrides: File override entries
        global_enablement: Rule key -> enabled from the options store
        parameters: Rule key -> parameter mapping from the options store
        max_workers: Thread pool size for rule evaluation

    Returns:
        LintReport with all violations found
    """
    selected = _selected(rules)
    enablement = dict(global_enablement or {})
    if selected is not None:
        enablement = {info.id: info.id in selected for info in RULE_INFOS}

    violations = await asyncio.to_thread(
        analyze,
        content,
        overrides,
        enablement,
        parameters=parameters,
        max_workers=max_workers,
    )

    report = LintReport(path=source_path)
    for violation in violations:
        if selected is None or violation.rule_id in selected:
            report.add_violation(violation)
    return report


async def lint_file(
    path: Path,
    fix: bool = False,
    rules: Optional[list[str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
    global_enablement: Optional[Mapping[str, bool]] = None,
    parameters: Optional[Mapping[str, Mapping[str, Any]]] = None,
    max_workers: Optional[int] = None,
) -> LintReport:
    """
    Lint a markdown file.

    Args:
        path: Path to the .md file
        fix: If True, apply fixes and write back
        rules: Specific rules to run (default: all enabled rules)
        overrides: File override entries for this file
        global_enablement: Rule key -> enabled from the options store
        parameters: Rule key -> parameter mapping from the options store
        max_workers: Thread pool size for rule evaluation

    Returns:
        LintReport with all violations found before fixing
    """
    with open(path, encoding="utf-8", newline="") as f:
        content = f.read()

    report = await lint_content(
        content,
        str(path),
        rules=rules,
        overrides=overrides,
        global_enablement=global_enablement,
        parameters=parameters,
        max_workers=max_workers,
    )

    if fix and report.fixable > 0:
        fixed_content, fixed_rules = fix_content(content, report.violations, rules)
        report.fixed = fixed_rules

        if fixed_content != content:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(fixed_content)
            logger.info(f"Wrote {len(fixed_rules)} rule fixes to {path}")

    return report
