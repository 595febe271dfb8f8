"""Inline rules - emphasis, code spans, raw HTML, URLs and names."""
import re
from typing import Generator

from ..document import Document, InlineSpan, SpanKind, Table
from ..models import Fix, RuleConfig, Violation
from ..registry import STYLE_CONSISTENT

REVERSED_LINK_RE = re.compile(r'(?<![\\\]])\(([^()\n]+)\)\[([^\[\]\n^]+)\](?!\()')
URL_LIKE_RE = re.compile(r'^(?:https?://|www\.|mailto:|/|#|\.\.?/)|\.[a-z]{2,}(?:/|$)', re.IGNORECASE)
SPACED_EMPHASIS_RE = re.compile(r'(?<![*_\w\\])(\*{1,3}|_{1,3})([^*_\n]+?)\1(?![*_\w])')

MARKER_STYLES = {"*": "asterisk", "_": "underscore"}


def _overlaps(spans: list[InlineSpan], start: int, end: int) -> bool:
    return any(s.column_start < end and start < s.column_end for s in spans)


def no_reversed_links(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD011 - ``(text)[url]`` is a reversed link; swap it to ``[text](url)``."""
    for n, inline in doc.inline_lines.items():
        if "(" not in inline.text:
            continue
        code = [s for s in doc.spans_on(n) if s.kind is SpanKind.CODE_SPAN]
        for match in REVERSED_LINK_RE.finditer(inline.text):
            text, url = match.group(1), match.group(2)
            if not URL_LIKE_RE.search(url):
                continue
            start = inline.column + match.start()
            end = inline.column + match.end()
            if _overlaps(code, start, end):
                continue
            yield Violation(
                "MD011",
                f"Reversed link syntax [Context: \"{match.group()}\"]",
                n,
                start,
                end,
                fix=Fix(start, end, f"[{text}]({url})"),
            )


def no_inline_html(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD033 - inline HTML.

    Closing tags are not reported. ``table_allowed_elements`` replaces the
    allow-list for elements inside tables.
    """
    allowed = {e.lower() for e in config.get_list("allowed_elements")}
    table_allowed = config.parameters.get("table_allowed_elements")
    table_allowed = (
        allowed if table_allowed is None
        else {e.lower() for e in config.get_list("table_allowed_elements")}
    )
    table_lines = set()
    for table in doc.blocks_of(Table):
        table_lines.update(table.lines)

    for span in doc.spans_of(SpanKind.RAW_HTML):
        if span.marker:
            continue
        permitted = table_allowed if span.line in table_lines else allowed
        if span.text in permitted:
            continue
        yield Violation(
            "MD033",
            f"Inline HTML [Element: {span.text}]",
            span.line,
            span.column_start,
            span.column_end,
        )


def no_bare_urls(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD034 - bare URLs should be wrapped in angle brackets."""
    for span in doc.spans_of(SpanKind.BARE_URL):
        yield Violation(
            "MD034",
            f'Bare URL used [Context: "{span.text}"]',
            span.line,
            span.column_start,
            span.column_end,
            fix=Fix(span.column_start, span.column_end, f"<{span.text}>"),
        )


def no_space_in_emphasis(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD037 - spaces inside emphasis markers, e.g. ``** bold **``."""
    for n, inline in doc.inline_lines.items():
        masked = inline.masked
        if "*" not in masked and "_" not in masked:
            continue
        for match in SPACED_EMPHASIS_RE.finditer(masked):
            inner = inline.text[match.start(2):match.end(2)]
            if not inner.strip() or inner.strip() == inner:
                continue
            marker = match.group(1)
            start = inline.column + match.start()
            end = inline.column + match.end()
            yield Violation(
                "MD037",
                f'Spaces inside emphasis markers [Context: "{inline.text[match.start():match.end()]}"]',
                n,
                start,
                end,
                fix=Fix(start, end, f"{marker}{inner.strip()}{marker}"),
            )


def no_space_in_code(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD038 - spaces inside code span elements.

    Content made only of spaces is allowed, as is a single space on both
    sides when the content starts or ends with a backtick.
    """
    for span in doc.spans_of(SpanKind.CODE_SPAN):
        content = span.text
        stripped = content.strip()
        if not stripped or stripped == content:
            continue
        lead = len(content) - len(content.lstrip())
        trail = len(content) - len(content.rstrip())
        if lead == 1 and trail == 1 and (stripped.startswith("`") or stripped.endswith("`")):
            continue
        run = len(span.marker or "`")
        start = span.column_start + run
        end = span.column_end - run
        yield Violation(
            "MD038",
            f'Spaces inside code span elements [Context: "{span.marker}{content}{span.marker}"]',
            span.line,
            span.column_start,
            span.column_end,
            fix=Fix(start, end, stripped),
        )


def no_space_in_links(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD039 - spaces inside link text."""
    for span in doc.links():
        if span.style == "autolink":
            continue
        text = span.text
        if not text.strip() or text.strip() == text:
            continue
        yield Violation(
            "MD039",
            f'Spaces inside link text [Context: "[{text}]"]',
            span.line,
            span.column_start,
            span.column_end,
            fix=Fix(span.text_start, span.text_start + len(text), text.strip()),
        )


def proper_names(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD044 - proper names should have the correct capitalization.

    Names inside URLs are left alone; code blocks and HTML are checked
    unless ``code_blocks`` or ``html_elements`` turn them off.
    """
    names = config.get_list("names")
    if not names:
        return
    code_blocks = config.get_bool("code_blocks", True)
    html_elements = config.get_bool("html_elements", True)
    # Longer names first so "JavaScript" wins over "Java".
    names = sorted(names, key=len, reverse=True)
    patterns = [
        (name, re.compile(r'(?<![\w./-])' + re.escape(name) + r'(?![\w])', re.IGNORECASE))
        for name in names
    ]

    for line in doc.lines:
        n = line.number
        if doc.in_front_matter(n):
            continue
        if n in doc.code_lines and not code_blocks:
            continue
        if n in doc.html_lines and not html_elements:
            continue
        skip = [
            s for s in doc.spans_on(n)
            if s.kind is SpanKind.BARE_URL
            or (s.kind is SpanKind.LINK and s.style == "autolink")
            or (s.kind is SpanKind.CODE_SPAN and not code_blocks)
            or (s.kind is SpanKind.RAW_HTML and not html_elements)
        ]
        taken: list[tuple[int, int]] = []
        for name, pattern in patterns:
            for match in pattern.finditer(line.text):
                start, end = match.span()
                if any(a < end and start < b for a, b in taken):
                    continue
                taken.append((start, end))
                if match.group() == name or _overlaps(skip, start, end):
                    continue
                yield Violation(
                    "MD044",
                    f"Proper names should have the correct capitalization "
                    f"[Expected: {name}; Actual: {match.group()}]",
                    n,
                    start,
                    end,
                    fix=Fix(start, end, name),
                )


def _marker_style(doc: Document, config: RuleConfig, rule_id: str, kind: SpanKind,
                  label: str) -> Generator[Violation, None, None]:
    style = config.get_str("style", STYLE_CONSISTENT)
    for span in doc.spans_of(kind):
        actual = MARKER_STYLES.get(span.marker[0]) if span.marker else None
        if actual is None:
            continue
        if style == STYLE_CONSISTENT:
            style = actual
        if actual == style:
            continue
        marker = ("*" if style == "asterisk" else "_") * len(span.marker)
        yield Violation(
            rule_id,
            f"{label} style [Expected: {style}; Actual: {actual}]",
            span.line,
            span.column_start,
            span.column_end,
            fix=Fix(span.column_start, span.column_end, f"{marker}{span.text}{marker}"),
        )


def emphasis_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD049 - emphasis should use one marker consistently."""
    yield from _marker_style(doc, config, "MD049", SpanKind.EMPHASIS, "Emphasis")


def strong_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD050 - strong emphasis should use one marker consistently."""
    yield from _marker_style(doc, config, "MD050", SpanKind.STRONG, "Strong")
