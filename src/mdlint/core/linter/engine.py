"""Lint engine - resolves configuration, runs rules and filters suppressions."""
import itertools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from .document import Document, build_document
from .models import RuleConfig, Violation
from .resolver import resolve_configs
from .rules import RULES
from .suppression import build_suppression_mask

logger = logging.getLogger(__name__)

_passes = itertools.count(1)


def _run_rule(
    rule_id: str,
    rule_func: Callable,
    doc: Document,
    config: RuleConfig,
    pass_number: int,
) -> list[Violation]:
    """Evaluate one rule; a failing rule contributes nothing."""
    try:
        return list(rule_func(doc, config))
    except Exception as e:
        logger.error(f"Rule {rule_id} failed in analysis pass {pass_number}: {e}")
        return []


def _in_bounds(doc: Document, violation: Violation) -> Optional[Violation]:
    if not 0 <= violation.line < doc.line_count:
        logger.debug(f"{violation.rule_id}: dropping violation on line {violation.line}")
        return None
    if violation.column_end < violation.column_start or violation.column_start < 0:
        start = max(violation.column_start, 0)
        return replace(violation, column_start=start, column_end=max(start, violation.column_end))
    return violation


def analyze(
    text: str,
    overrides: Optional[Mapping[str, str]] = None,
    global_enablement: Optional[Mapping[str, bool]] = None,
    *,
    parameters: Optional[Mapping[str, Mapping[str, Any]]] = None,
    max_workers: Optional[int] = None,
) -> list[Violation]:
    """
    Lint Markdown text.

    Args:
        text: Markdown source in any newline convention
        overrides: File override entries (``md_<rule>`` keys, ``indent_size``)
        global_enablement: Rule key -> enabled from the options store
        parameters: Rule key -> parameter mapping from the options store
        max_workers: Evaluate rules on a thread pool when greater than one

    Returns:
        Violations sorted by (line, column, rule ID), with the configured
        severity and inline suppressions applied
    """
    if not text:
        return []

    configs = resolve_configs(overrides, global_enablement, parameters)
    active = [
        (rule_id, rule_func, configs[rule_id])
        for rule_id, rule_func in RULES.items()
        if configs[rule_id].active
    ]
    if not active:
        return []

    pass_number = next(_passes)
    try:
        doc = build_document(text)
    except Exception as e:
        logger.error(f"Document model failed in analysis pass {pass_number}: {e}")
        return []
    mask = build_suppression_mask([line.text for line in doc.lines])

    def run(entry) -> list[Violation]:
        rule_id, rule_func, config = entry
        return _run_rule(rule_id, rule_func, doc, config, pass_number)

    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(run, active))
    else:
        results = [run(entry) for entry in active]

    violations: list[Violation] = []
    for (rule_id, _, config), found in zip(active, results):
        for violation in found:
            violation = _in_bounds(doc, violation)
            if violation is None or mask.is_suppressed(violation.rule_id, violation.line):
                continue
            violations.append(replace(violation, severity=config.severity))

    violations.sort(key=lambda v: (v.line, v.column_start, v.rule_id))
    logger.debug(f"Analysis pass {pass_number}: {len(violations)} violations from {len(active)} rules")
    return violations


def get_available_rules() -> dict[str, str]:
    """
    Get list of available rules with descriptions.

    Returns:
        Dict mapping rule ID to the first docstring line of its function
    """
    return {
        rule_id: (func.__doc__ or "No description").strip().split('\n')[0]
        for rule_id, func in RULES.items()
    }
