"""Whitespace and line-shape rules."""
import re
from typing import Generator

from ..document import Document, FencedCode, ListItem, Table
from ..models import Fix, RuleConfig, Violation
from ..scanner import REFERENCE_DEFINITION_RE

STANDALONE_LINK_RE = re.compile(
    r'^\s*(?:(?:[-*+]|\d+[.)])\s+|>\s*)*'
    r'(?:!?\[[^\]]*\](?:\([^)]*\)|\[[^\]]*\])?|<[^>\s]+>|https?://\S+)\s*$'
)


def no_trailing_spaces(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD009 - flag trailing whitespace.

    Exactly ``br_spaces`` trailing spaces are allowed as a hard line break.
    In strict mode they are only allowed where they actually produce a
    break, i.e. when a non-blank line follows.
    """
    br_spaces = config.get_int("br_spaces", 2)
    strict = config.get_bool("strict", False)
    list_item_empty_lines = config.get_bool("list_item_empty_lines", False)
    code_blocks = config.get_bool("code_blocks", False)

    list_lines = set()
    if list_item_empty_lines:
        for item in doc.blocks_of(ListItem):
            list_lines.update(item.lines)

    for line in doc.lines:
        n = line.number
        if n in doc.code_lines and not code_blocks:
            continue
        text = line.text
        stripped = text.rstrip()
        trailing = len(text) - len(stripped)
        if trailing == 0:
            continue

        if not stripped:
            if n in list_lines:
                continue
        elif br_spaces >= 2 and trailing == br_spaces and text.endswith(" " * br_spaces):
            if not strict or not doc.is_blank(n + 1):
                continue

        yield Violation(
            "MD009",
            f"Trailing spaces [Expected: 0 or {br_spaces}; Actual: {trailing}]",
            n,
            len(stripped),
            len(text),
            fix=Fix(len(stripped), len(text), ""),
        )


def no_hard_tabs(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD010 - flag hard tab characters, replacing each with spaces."""
    code_blocks = config.get_bool("code_blocks", True)
    ignored_languages = {lang.lower() for lang in config.get_list("ignore_code_languages")}
    spaces = " " * config.get_int("spaces_per_tab", 1)

    ignored_lines = set()
    for fence in doc.blocks_of(FencedCode):
        if fence.language.lower() in ignored_languages:
            ignored_lines.update(range(fence.start_line + 1, fence.end_line + (0 if fence.closed else 1)))

    for line in doc.lines:
        if "\t" not in line.text:
            continue
        if line.number in doc.code_lines and (not code_blocks or line.number in ignored_lines):
            continue
        for column, ch in enumerate(line.text):
            if ch == "\t":
                yield Violation(
                    "MD010",
                    f"Hard tabs [Column: {column + 1}]",
                    line.number,
                    column,
                    column + 1,
                    fix=Fix(column, column + 1, spaces),
                )


def no_multiple_blanks(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD012 - flag runs of blank lines longer than ``maximum``.

    Every blank line past the limit is reported and deleted by its fix,
    including extra blank lines at the end of the file.
    """
    maximum = config.get_int("maximum", 1)
    run = 0
    for line in doc.lines:
        n = line.number
        if not line.is_blank or n in doc.code_lines or doc.in_front_matter(n):
            run = 0
            continue
        run += 1
        if run > maximum:
            yield Violation(
                "MD012",
                f"Multiple consecutive blank lines [Expected: {maximum}; Actual: {run}]",
                n,
                0,
                len(line.text),
                fix=Fix(0, len(line.text) + 1, ""),
            )


def line_length(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD013 - flag lines longer than the configured limit.

    Without ``strict`` a line is only reported when there is whitespace
    past the limit, so long URLs and other unbreakable words pass. Link
    reference definitions and lines holding only a link or image are exempt.
    """
    limit = config.get_int("line_length", 80)
    heading_limit = config.get_int("heading_line_length", limit)
    code_limit = config.get_int("code_block_line_length", limit)
    check_code = config.get_bool("code_blocks", True)
    check_tables = config.get_bool("tables", True)
    check_headings = config.get_bool("headings", True)
    strict = config.get_bool("strict", False)
    stern = config.get_bool("stern", False)

    heading_lines = set()
    for heading in doc.headings():
        heading_lines.update(heading.lines)
    table_lines = set()
    for table in doc.blocks_of(Table):
        table_lines.update(table.lines)

    for line in doc.lines:
        n = line.number
        text = line.text
        if doc.in_front_matter(n):
            continue

        if n in doc.code_lines:
            if not check_code:
                continue
            maximum = code_limit
        elif n in heading_lines:
            if not check_headings:
                continue
            maximum = heading_limit
        elif n in table_lines:
            if not check_tables:
                continue
            maximum = limit
        else:
            maximum = limit

        if len(text) <= maximum:
            continue
        if n not in doc.code_lines and (
            REFERENCE_DEFINITION_RE.match(text) or STANDALONE_LINK_RE.match(text)
        ):
            continue
        if not strict:
            if stern:
                if not re.search(r'\s', text.strip()):
                    continue
            elif not re.search(r'\s', text[maximum:]):
                continue

        yield Violation(
            "MD013",
            f"Line length [Expected: {maximum}; Actual: {len(text)}]",
            n,
            maximum,
            len(text),
        )


def single_trailing_newline(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD047 - the file must end with a newline character."""
    if not doc.text or doc.ends_with_newline:
        return
    last = doc.lines[-1]
    end = len(last.text)
    yield Violation(
        "MD047",
        "Files should end with a single newline character",
        last.number,
        max(end - 1, 0),
        end,
        fix=Fix(end, end, "\n"),
    )
