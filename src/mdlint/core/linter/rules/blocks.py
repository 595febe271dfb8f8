"""Blockquote, thematic break and paragraph rules."""
import re
from typing import Generator, Iterable

from ..document import Block, Blockquote, Document, ListBlock, ListItem, Paragraph, ThematicBreak
from ..models import Fix, RuleConfig, Violation
from ..registry import STYLE_CONSISTENT

QUOTE_SPACES_RE = re.compile(r'^((?:\s*>)+)( {2,})(?=\S)')
EMPHASIS_LINE_RE = re.compile(r'^\s*(\*\*|__|\*|_)(?!\s)([^*_]+?)(?<!\s)\1\s*$')

DEFAULT_PUNCTUATION = ".,;:!?。，；：！？"


def no_multiple_space_blockquote(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD027 - multiple spaces after the blockquote symbol."""
    for line in doc.lines:
        n = line.number
        if n in doc.code_lines or doc.in_front_matter(n):
            continue
        match = QUOTE_SPACES_RE.match(line.text)
        if match is None:
            continue
        # One space belongs to the marker, the rest is the violation.
        start = match.start(2) + 1
        yield Violation(
            "MD027",
            "Multiple spaces after blockquote symbol",
            n,
            start,
            match.end(2),
            fix=Fix(start, match.end(2), ""),
        )


def _sibling_lists(doc: Document) -> Iterable[list[Block]]:
    yield doc.blocks
    for block in doc.walk():
        if isinstance(block, (ListItem, Blockquote)):
            yield block.children
        elif isinstance(block, ListBlock):
            yield block.items


def no_blanks_blockquote(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD028 - blank line inside blockquote.

    Two blockquotes separated only by blank lines read as one quote but
    parse as two; the fix turns each blank line into an empty quote line.
    """
    for siblings in _sibling_lists(doc):
        for before, after in zip(siblings, siblings[1:]):
            if not (isinstance(before, Blockquote) and isinstance(after, Blockquote)):
                continue
            between = range(before.end_line + 1, after.start_line)
            if not between or not all(doc.is_blank(n) for n in between):
                continue
            for n in between:
                text = doc.line_text(n)
                yield Violation(
                    "MD028",
                    "Blank line inside blockquote",
                    n,
                    0,
                    len(text),
                    fix=Fix(0, len(text), ">"),
                )


def hr_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD035 - thematic breaks should use one consistent style."""
    style = config.get_str("style", STYLE_CONSISTENT)
    for rule in doc.blocks_of(ThematicBreak):
        actual = rule.marker
        if style == STYLE_CONSISTENT:
            style = actual
        if actual == style:
            continue
        text = doc.line_text(rule.start_line)
        start = text.index(actual[0]) if actual else 0
        end = len(text.rstrip())
        yield Violation(
            "MD035",
            f"Horizontal rule style [Expected: {style}; Actual: {actual}]",
            rule.start_line,
            start,
            end,
            fix=Fix(start, end, style),
        )


def no_emphasis_as_heading(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD036 - a single-line paragraph that is only emphasis reads as a heading."""
    punctuation = config.get_str("punctuation", DEFAULT_PUNCTUATION)
    for paragraph in doc.blocks_of(Paragraph):
        if paragraph.start_line != paragraph.end_line:
            continue
        if any(isinstance(a, ListItem) for a in doc.ancestors(paragraph)):
            continue
        inline = doc.inline_lines.get(paragraph.start_line)
        if inline is None:
            continue
        match = EMPHASIS_LINE_RE.match(inline.text)
        if match is None:
            continue
        content = match.group(2).strip()
        if punctuation and content[-1] in punctuation:
            continue
        yield Violation(
            "MD036",
            f'Emphasis used instead of a heading [Context: "{content}"]',
            paragraph.start_line,
            inline.column + match.start(1),
            inline.column + match.end(2) + len(match.group(1)),
        )
