"""Helpers shared by several rule families."""
import re
from typing import Generator, Optional

from ..document import Block, Blockquote, Document
from ..models import Fix, Violation

SLUG_STRIP_RE = re.compile(r'[^\w\s-]')
INLINE_LINK_RE = re.compile(r'!?\[([^\]]*)\]\([^)]*\)')


def line_end(doc: Document, number: int) -> int:
    return len(doc.lines[number].text)


def is_quoted(doc: Document, block: Block) -> bool:
    return any(isinstance(a, Blockquote) for a in doc.ancestors(block))


def after_front_matter(doc: Document, number: int) -> bool:
    """True if the line directly above ``number`` closes the front matter."""
    return doc.front_matter is not None and doc.front_matter.end_line == number - 1


def count_blank_above(doc: Document, number: int) -> int:
    count = 0
    while number - count - 1 >= 0 and doc.is_blank(number - count - 1):
        count += 1
    return count


def count_blank_below(doc: Document, number: int) -> int:
    count = 0
    while number + count + 1 < doc.line_count and doc.is_blank(number + count + 1):
        count += 1
    return count


def blank_line_violations(
    doc: Document,
    rule_id: str,
    message: str,
    block: Block,
    above: int = 1,
    below: int = 1,
    last_line: Optional[int] = None,
) -> Generator[Violation, None, None]:
    """
    Check for required blank lines around a block.

    Missing lines above are reported on the first line and fixed by
    inserting newlines at its start; missing lines below are reported on
    the last line and fixed by inserting at the start of the next line.
    """
    first = block.start_line
    last = block.end_line if last_line is None else last_line

    if above > 0 and first > 0 and not after_front_matter(doc, first):
        actual = count_blank_above(doc, first)
        if actual < above and first - actual > 0:
            yield Violation(
                rule_id,
                f"{message} [Expected: {above}; Actual: {actual}; Above]",
                first,
                0,
                line_end(doc, first),
                fix=Fix(0, 0, "\n" * (above - actual)),
            )

    if below > 0 and last + 1 < doc.line_count:
        actual = count_blank_below(doc, last)
        if actual < below and last + actual + 1 < doc.line_count:
            yield Violation(
                rule_id,
                f"{message} [Expected: {below}; Actual: {actual}; Below]",
                last,
                0,
                line_end(doc, last),
                fix=Fix(0, 0, "\n" * (below - actual), line_delta=1),
            )


def reindent_fix(text: str, actual: int, expected: int) -> Optional[Fix]:
    """Fix moving text starting at column ``actual`` to column ``expected``."""
    if actual > expected:
        if text[expected:actual].strip(" "):
            return None
        return Fix(expected, actual, "")
    return Fix(actual, actual, " " * (expected - actual))


def github_slug(text: str) -> str:
    """Anchor slug for a heading, as GitHub generates it."""
    text = INLINE_LINK_RE.sub(r'\1', text)
    slug = SLUG_STRIP_RE.sub("", text.strip().lower())
    return re.sub(r'\s+', "-", slug)
