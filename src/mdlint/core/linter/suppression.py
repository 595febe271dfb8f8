"""Inline suppression - ``<!-- markdownlint-... -->`` directives.

The mask is computed from raw line text alone and applied to violations
after every rule has run.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .registry import resolve_rule_id

logger = logging.getLogger(__name__)

DIRECTIVE_RE = re.compile(
    r'<!--\s*markdownlint-'
    r'(disable-next-line|disable-line|disable-file|disable|enable|capture|restore)'
    r'(?:\s+([^>]*?))?\s*-->',
    re.IGNORECASE
)
RULE_TOKEN_RE = re.compile(r'[A-Za-z][A-Za-z0-9_-]*')
COMMENT_ONLY_RE = re.compile(r'^\s*<!--.*-->\s*$')


class DirectiveKind(Enum):
    DISABLE = "disable"
    ENABLE = "enable"
    DISABLE_LINE = "disable-line"
    DISABLE_NEXT_LINE = "disable-next-line"
    DISABLE_FILE = "disable-file"
    CAPTURE = "capture"
    RESTORE = "restore"


@dataclass(frozen=True)
class Directive:
    """
    A parsed suppression directive.

    ``rule_ids`` is None when the directive names no rules (all rules).
    Tokens that do not name a known rule are dropped.
    """
    kind: DirectiveKind
    rule_ids: Optional[frozenset[str]] = None
    column: int = 0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "rule_ids": None if self.rule_ids is None else sorted(self.rule_ids),
        }


def find_directives(line_text: str) -> list[Directive]:
    """Parse every directive on a line, in order."""
    directives = []
    for match in DIRECTIVE_RE.finditer(line_text):
        kind = DirectiveKind(match.group(1).lower())
        rule_ids = None
        if match.group(2) and match.group(2).strip():
            resolved = set()
            for token in RULE_TOKEN_RE.findall(match.group(2)):
                rule_id = resolve_rule_id(token)
                if rule_id is None:
                    logger.debug(f"Unknown rule in suppression directive: {token}")
                else:
                    resolved.add(rule_id)
            rule_ids = frozenset(resolved)
        directives.append(Directive(kind, rule_ids, match.start()))
    return directives


def parse_suppression_directive(line_text: str) -> Optional[Directive]:
    """
    Recognize a suppression directive on a line.

    Args:
        line_text: One line of Markdown

    Returns:
        The first directive on the line, or None
    """
    directives = find_directives(line_text)
    return directives[0] if directives else None


@dataclass(frozen=True)
class RuleSet:
    """
    A set of rule IDs that can also mean "every rule".

    With ``everything`` set, ``ids`` lists the exceptions.
    """
    everything: bool = False
    ids: frozenset[str] = frozenset()

    def __contains__(self, rule_id: str) -> bool:
        if self.everything:
            return rule_id not in self.ids
        return rule_id in self.ids

    def __bool__(self) -> bool:
        return self.everything or bool(self.ids)

    def add(self, rule_ids: Optional[frozenset[str]]) -> "RuleSet":
        if rule_ids is None:
            return RuleSet(True)
        if self.everything:
            return RuleSet(True, self.ids - rule_ids)
        return RuleSet(False, self.ids | rule_ids)

    def remove(self, rule_ids: Optional[frozenset[str]]) -> "RuleSet":
        if rule_ids is None:
            return RuleSet()
        if self.everything:
            return RuleSet(True, self.ids | rule_ids)
        return RuleSet(False, self.ids - rule_ids)

    def union(self, other: "RuleSet") -> "RuleSet":
        if self.everything and other.everything:
            return RuleSet(True, self.ids & other.ids)
        if self.everything:
            return RuleSet(True, self.ids - other.ids)
        if other.everything:
            return RuleSet(True, other.ids - self.ids)
        return RuleSet(False, self.ids | other.ids)


EMPTY = RuleSet()


class SuppressionMask:
    """Per-line suppression state for one analysis pass."""

    def __init__(self, file_wide: RuleSet, running: list[RuleSet], line_specific: list[RuleSet]):
        self.file_wide = file_wide
        self.running = running
        self.line_specific = line_specific

    def is_suppressed(self, rule_id: str, line: int) -> bool:
        if rule_id in self.file_wide:
            return True
        if 0 <= line < len(self.running):
            return rule_id in self.running[line] or rule_id in self.line_specific[line]
        return False

    def suppressed_on(self, line: int) -> RuleSet:
        """Everything suppressed on a line."""
        return self.file_wide.union(self.running[line]).union(self.line_specific[line])


class _SavedStack:
    """Index-addressed stack of saved running sets."""

    def __init__(self):
        self._slots: list[RuleSet] = []
        self._depth = 0

    def push(self, value: RuleSet) -> None:
        if self._depth < len(self._slots):
            self._slots[self._depth] = value
        else:
            self._slots.append(value)
        self._depth += 1

    def pop(self) -> Optional[RuleSet]:
        if self._depth == 0:
            return None
        self._depth -= 1
        return self._slots[self._depth]


def _next_content_line(lines: Sequence[str], index: int) -> Optional[int]:
    for candidate in range(index + 1, len(lines)):
        if not COMMENT_ONLY_RE.match(lines[candidate]):
            return candidate
    return None


def build_suppression_mask(lines: Sequence[str]) -> SuppressionMask:
    """
    Scan raw lines for directives and build the suppression mask.

    The running set after a line's directives applies to that line, so a
    ``disable`` line is suppressed and an ``enable`` line is not.

    Args:
        lines: Raw line texts

    Returns:
        SuppressionMask for the lines
    """
    parsed = [find_directives(text) if "markdownlint-" in text.lower() else [] for text in lines]

    file_wide = EMPTY
    for directives in parsed:
        for directive in directives:
            if directive.kind is DirectiveKind.DISABLE_FILE:
                file_wide = file_wide.add(directive.rule_ids)

    running = EMPTY
    saved = _SavedStack()
    running_by_line: list[RuleSet] = []
    line_specific: list[RuleSet] = [EMPTY] * len(lines)

    for index, directives in enumerate(parsed):
        for directive in directives:
            kind = directive.kind
            if kind is DirectiveKind.DISABLE:
                running = running.add(directive.rule_ids)
            elif kind is DirectiveKind.ENABLE:
                running = running.remove(directive.rule_ids)
            elif kind is DirectiveKind.DISABLE_LINE:
                line_specific[index] = line_specific[index].add(directive.rule_ids)
            elif kind is DirectiveKind.DISABLE_NEXT_LINE:
                target = _next_content_line(lines, index)
                if target is not None:
                    line_specific[target] = line_specific[target].add(directive.rule_ids)
            elif kind is DirectiveKind.CAPTURE:
                saved.push(running)
            elif kind is DirectiveKind.RESTORE:
                restored = saved.pop()
                if restored is not None:
                    running = restored
        running_by_line.append(running)

    return SuppressionMask(file_wide, running_by_line, line_specific)
