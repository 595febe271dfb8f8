"""Fix computation, composition and application."""
import logging
from typing import Iterable, Optional

from .models import Edit, EditSet, Violation
from .scanner import NEWLINE_RE, detect_newline

logger = logging.getLogger(__name__)


def compute_fix(violation: Violation) -> Optional[Edit]:
    """
    Turn a violation's fix payload into an edit.

    Args:
        violation: A violation that may carry a Fix

    Returns:
        Edit on ``violation.line + line_delta``, or None when the violation
        has no fix or the payload is out of bounds
    """
    fix = violation.fix
    if fix is None:
        return None
    if fix.line_delta not in (-1, 0, 1):
        logger.debug(f"{violation.rule_id}: fix line delta {fix.line_delta} out of range")
        return None
    line = violation.line + fix.line_delta
    if line < 0 or fix.column_start < 0 or fix.column_end < fix.column_start:
        logger.debug(f"{violation.rule_id}: fix span is invalid on line {line}")
        return None
    return Edit(line, fix.column_start, fix.column_end, fix.replacement)


def _overlaps(edit: Edit, kept: Edit) -> bool:
    if edit.line != kept.line:
        return False
    if edit.column_start < kept.column_end:
        return True
    both_insertions = (
        edit.column_start == edit.column_end and kept.column_start == kept.column_end
    )
    return both_insertions and edit.column_start == kept.column_start


def compose_fix_all(
    violations: Iterable[Violation],
    rule_ids: Optional[Iterable[str]] = None,
) -> EditSet:
    """
    Collect the fixes of many violations into one non-overlapping edit set.

    Edits are sorted by (line, start, end). On overlap the first edit in
    that order wins; identical duplicates collapse silently and any other
    overlapping edit is dropped.

    Args:
        violations: Violations from ``analyze``
        rule_ids: Only use fixes from these rules (default: all)

    Returns:
        EditSet with the kept edits, the dropped ones and the contributing rules
    """
    wanted = set(rule_ids) if rule_ids is not None else None
    candidates: list[tuple[Edit, str]] = []
    for violation in violations:
        if wanted is not None and violation.rule_id not in wanted:
            continue
        edit = compute_fix(violation)
        if edit is not None:
            candidates.append((edit, violation.rule_id))

    candidates.sort(key=lambda pair: (pair[0].line, pair[0].column_start, pair[0].column_end))

    kept: list[Edit] = []
    dropped: list[Edit] = []
    rules: set[str] = set()
    for edit, rule_id in candidates:
        if kept and kept[-1] == edit:
            rules.add(rule_id)
            continue
        if kept and _overlaps(edit, kept[-1]):
            logger.debug(f"Dropping overlapping {rule_id} edit at line {edit.line}")
            dropped.append(edit)
            continue
        kept.append(edit)
        rules.add(rule_id)

    return EditSet(tuple(kept), tuple(dropped), frozenset(rules))


def _line_bounds(text: str) -> list[tuple[int, int, int]]:
    """(start, content end, terminator end) offsets of every line."""
    bounds = []
    offset = 0
    for match in NEWLINE_RE.finditer(text):
        bounds.append((offset, match.start(), match.end()))
        offset = match.end()
    if offset < len(text):
        bounds.append((offset, len(text), len(text)))
    return bounds


def apply_edits(text: str, edits: Iterable[Edit]) -> str:
    """
    Apply edits to text.

    Edits are applied right to left by absolute offset so earlier offsets
    stay valid. Each line keeps its own terminator; newlines inside
    replacements use the first terminator found in the text.

    Args:
        text: Original document text
        edits: Non-overlapping edits, e.g. an EditSet

    Returns:
        The edited text
    """
    edits = list(edits)
    if not edits:
        return text

    newline = detect_newline(text)
    bounds = _line_bounds(text)

    def absolute(line: int, column: int) -> int:
        if line >= len(bounds):
            return len(text)
        start, content_end, terminator_end = bounds[line]
        if start + column <= content_end:
            return start + column
        # Past the content: the whole terminator is consumed.
        return terminator_end

    positioned = []
    for edit in edits:
        start = absolute(edit.line, edit.column_start)
        end = max(start, absolute(edit.line, edit.column_end))
        positioned.append((start, end, edit.replacement.replace("\n", newline)))
    positioned.sort(key=lambda item: (item[0], item[1]), reverse=True)

    result = text
    for start, end, replacement in positioned:
        result = result[:start] + replacement + result[end:]
    return result
