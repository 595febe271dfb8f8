"""List rules."""
import re
from typing import Generator, Optional

from ..document import Blockquote, Document, ListBlock, ListItem
from ..models import Fix, RuleConfig, Violation
from ..registry import STYLE_CONSISTENT
from .common import blank_line_violations, is_quoted, reindent_fix

MARKER_STYLES = {"*": "asterisk", "+": "plus", "-": "dash"}
STYLE_MARKERS = {style: marker for marker, style in MARKER_STYLES.items()}
QUOTE_PREFIX_RE = re.compile(r'^(?:\s*>)+ ?')


def _unordered_lists(doc: Document) -> list[ListBlock]:
    return [b for b in doc.blocks_of(ListBlock) if not b.ordered]


def _next_marker(marker: str) -> str:
    order = ["*", "+", "-"]
    return order[(order.index(marker) + 1) % len(order)]


def ul_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD004 - unordered list marker style.

    ``sublist`` fixes a marker per nesting level, taking the first marker
    seen at that level unless it matches the parent level's marker.
    """
    style = config.get_str("style", STYLE_CONSISTENT)
    expected_by_level: dict[int, str] = {}
    consistent: Optional[str] = None

    for block in _unordered_lists(doc):
        for item in block.items:
            actual = item.marker_char
            if style == "sublist":
                if block.level not in expected_by_level:
                    parent = expected_by_level.get(block.level - 1)
                    expected_by_level[block.level] = (
                        _next_marker(actual) if actual == parent else actual
                    )
                expected = expected_by_level[block.level]
            elif style == STYLE_CONSISTENT:
                consistent = consistent or actual
                expected = consistent
            else:
                expected = STYLE_MARKERS.get(style, actual)

            if actual != expected:
                yield Violation(
                    "MD004",
                    f"Unordered list style [Expected: {MARKER_STYLES[expected]}; "
                    f"Actual: {MARKER_STYLES[actual]}]",
                    item.start_line,
                    item.indent,
                    item.indent + 1,
                    fix=Fix(item.indent, item.indent + 1, expected),
                )


def _home_column(doc: Document, block: ListBlock) -> int:
    """Column where items of the list belong: the parent item's content column."""
    parent = doc.parent(block)
    if isinstance(parent, ListItem):
        return parent.content_column
    return _container_base(doc, block, block.start_line)


def list_indent(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD005 - items of one list should share an indentation.

    Items are expected at the list's home column when any item sits there,
    otherwise at the first item's indentation. Ordered lists may instead
    right-align their numbers, so an item whose marker ends where the first
    item's marker ends is also accepted. Only moves to the home column carry
    a fix.
    """
    for block in doc.blocks_of(ListBlock):
        first = block.items[0]
        home = _home_column(doc, block)
        expected = home if any(item.indent == home for item in block.items) else first.indent
        expected_end = first.indent + len(first.marker)
        for item in block.items:
            actual = item.indent
            if actual == expected:
                continue
            if block.ordered and actual + len(item.marker) == expected_end:
                continue
            text = doc.line_text(item.start_line)
            yield Violation(
                "MD005",
                f"Inconsistent indentation for list items at the same level "
                f"[Expected: {expected}; Actual: {actual}]",
                item.start_line,
                min(actual, expected),
                actual + len(item.marker),
                fix=reindent_fix(text, actual, expected) if expected == home else None,
            )


def ul_start_left(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD006 - top-level bulleted lists should start at the beginning of the line."""
    for block in doc.blocks:
        if not isinstance(block, ListBlock) or block.ordered:
            continue
        for item in block.items:
            if item.indent > 0:
                yield Violation(
                    "MD006",
                    "Consider starting bulleted lists at the beginning of the line",
                    item.start_line,
                    0,
                    item.indent + 1,
                    fix=Fix(0, item.indent, ""),
                )


def _container_base(doc: Document, block: ListBlock, line: int) -> int:
    if not any(isinstance(a, Blockquote) for a in doc.ancestors(block)):
        return 0
    match = QUOTE_PREFIX_RE.match(doc.line_text(line))
    return match.end() if match else 0


def ul_indent(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD007 - unordered list indentation.

    Only lists whose every enclosing list is unordered are checked. The
    ``indent`` option falls back to ``indent_size`` from the file overrides.
    """
    default_indent = config.indent_size or 2
    indent = config.get_int("indent", default_indent)
    start_indented = config.get_bool("start_indented", False)
    start_indent = config.get_int("start_indent", indent)

    for block in _unordered_lists(doc):
        enclosing = [a for a in doc.ancestors(block) if isinstance(a, ListBlock)]
        if any(a.ordered for a in enclosing):
            continue
        nesting = len(enclosing)
        expected_relative = (start_indent if start_indented else 0) + nesting * indent
        for item in block.items:
            base = _container_base(doc, block, item.start_line)
            expected = base + expected_relative
            if item.indent == expected:
                continue
            text = doc.line_text(item.start_line)
            yield Violation(
                "MD007",
                f"Unordered list indentation [Expected: {expected_relative}; "
                f"Actual: {item.indent - base}]",
                item.start_line,
                min(item.indent, expected),
                item.indent + 1,
                fix=reindent_fix(text, item.indent, expected),
            )


def _prefix_style(block: ListBlock, style: str) -> str:
    numbers = [item.number for item in block.items]
    if style != "one_or_ordered":
        return style
    if len(numbers) >= 2 and numbers[0] == numbers[1] and numbers[0] in (0, 1):
        return "zero" if numbers[0] == 0 else "one"
    return "ordered"


def ol_prefix(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD029 - ordered list item prefix.

    ``one_or_ordered`` infers the style from the first two items: a list
    that repeats ``1.`` (or ``0.``) is the "one" style, anything else must
    count up from its first number.
    """
    style = config.get_str("style", "one_or_ordered")
    for block in doc.blocks_of(ListBlock):
        if not block.ordered:
            continue
        list_style = _prefix_style(block, style)
        start = block.items[0].number
        if list_style == "ordered" and style == "ordered" and start not in (0, 1):
            start = 1
        for index, item in enumerate(block.items):
            if list_style == "one":
                expected = 1
            elif list_style == "zero":
                expected = 0
            else:
                expected = start + index
            if item.number == expected:
                continue
            pattern = {"one": "1/1/1", "zero": "0/0/0"}.get(list_style, "1/2/3")
            digits = len(item.marker) - 1
            yield Violation(
                "MD029",
                f"Ordered list item prefix should be '{expected}' "
                f"[Expected: {expected}; Actual: {item.number}; Style: {pattern}]",
                item.start_line,
                item.indent,
                item.indent + digits,
                fix=Fix(item.indent, item.indent + digits, str(expected)),
            )


def list_marker_space(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD030 - spaces after list markers.

    A list is "multi" when any of its items holds more than one block.
    """
    for block in doc.blocks_of(ListBlock):
        multi = any(len(item.children) > 1 for item in block.items)
        prefix = "ol" if block.ordered else "ul"
        expected = config.get_int(f"{prefix}_{'multi' if multi else 'single'}", 1)
        for item in block.items:
            text = doc.line_text(item.start_line)
            marker_end = item.indent + len(item.marker)
            rest = text[marker_end:]
            spacing = len(rest) - len(rest.lstrip(" \t"))
            if not rest.strip() or spacing == expected:
                continue
            yield Violation(
                "MD030",
                f"Spaces after list markers [Expected: {expected}; Actual: {spacing}]",
                item.start_line,
                item.indent,
                marker_end + spacing,
                fix=Fix(marker_end, marker_end + spacing, " " * expected),
            )


def blanks_around_lists(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD032 - lists should be surrounded by blank lines."""
    for block in doc.blocks_of(ListBlock):
        if any(isinstance(a, ListItem) for a in doc.ancestors(block)) or is_quoted(doc, block):
            continue
        yield from blank_line_violations(
            doc, "MD032", "Lists should be surrounded by blank lines", block,
        )
