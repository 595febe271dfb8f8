"""Heading rules."""
import re
from typing import Generator

from ..document import Block, Document, Heading, HtmlBlock, FrontMatter, ListItem
from ..models import Fix, RuleConfig, Violation
from ..registry import STYLE_CONSISTENT
from .common import blank_line_violations, is_quoted, line_end

MISSING_SPACE_ATX_RE = re.compile(r'^( {0,3})(#{1,6})([^#\s])')
MULTIPLE_SPACE_ATX_RE = re.compile(r'^( {0,3}#{1,6})([ \t]{2,})(?=\S)')
CLOSED_ATX_RE = re.compile(r'^( {0,3})(#{1,6})(.*?)(#+)([ \t]*)$')
ENTITY_END_RE = re.compile(r'&#?[0-9a-zA-Z]+;$')
H1_HTML_RE = re.compile(r'^\s*<h1[\s>]', re.IGNORECASE)

DEFAULT_PUNCTUATION = ".,;:!。，；：！"


def _span(doc: Document, heading: Heading) -> tuple[int, int]:
    return 0, line_end(doc, heading.start_line)


def _violation(doc: Document, rule_id: str, message: str, heading: Heading, fix=None) -> Violation:
    start, end = _span(doc, heading)
    return Violation(rule_id, message, heading.start_line, start, end, fix=fix)


def heading_increment(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD001 - heading levels should only increment by one level at a time."""
    previous = None
    if doc.has_front_matter_title(config.get_str("front_matter_title", r'^\s*"?title"?\s*[:=]')):
        previous = 1
    for heading in doc.headings():
        if previous is not None and heading.level > previous + 1:
            yield _violation(
                doc, "MD001",
                f"Heading levels should only increment by one level at a time "
                f"[Expected: h{previous + 1}; Actual: h{heading.level}]",
                heading,
            )
        previous = heading.level


def first_heading_h1(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD002 - the first heading should be a top-level heading."""
    level = config.get_int("level", 1)
    if doc.has_front_matter_title():
        return
    headings = doc.headings()
    if headings and headings[0].level != level:
        yield _violation(
            doc, "MD002",
            f"First heading should be a top-level heading "
            f"[Expected: h{level}; Actual: h{headings[0].level}]",
            headings[0],
        )


def _style_fix(doc: Document, heading: Heading, expected: str):
    """Only conversions between the two ATX forms stay on one line."""
    text = doc.line_text(heading.start_line)
    if heading.style == "atx" and expected == "atx_closed":
        end = len(text.rstrip())
        return Fix(end, len(text), " " + "#" * heading.level)
    if heading.style == "atx_closed" and expected == "atx":
        return Fix(heading.text_end, len(text), "")
    return None


def heading_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD003 - heading style should be consistent.

    The ``setext_with_atx`` styles expect setext for levels 1-2 and the
    named ATX form for deeper levels, where setext is impossible.
    """
    style = config.get_str("style", STYLE_CONSISTENT)
    for heading in doc.headings():
        actual = heading.style
        if style == STYLE_CONSISTENT:
            style = actual
        expected = style
        if style in ("setext_with_atx", "setext_with_atx_closed"):
            if heading.level <= 2:
                expected = "setext"
            else:
                expected = "atx" if style == "setext_with_atx" else "atx_closed"
        if actual != expected:
            yield _violation(
                doc, "MD003",
                f"Heading style [Expected: {expected}; Actual: {actual}]",
                heading,
                fix=_style_fix(doc, heading, expected),
            )


def missing_space_atx_lines(doc: Document) -> Generator[tuple[int, re.Match], None, None]:
    """Paragraph lines that become ATX headings once a space follows the hashes."""
    for line in doc.lines:
        n = line.number
        if not doc.is_prose(n) or n not in doc.inline_lines:
            continue
        text = line.text
        match = MISSING_SPACE_ATX_RE.match(text)
        # Closed headings are the job of MD020.
        if match is None or text.rstrip().endswith("#"):
            continue
        yield n, match


def no_missing_space_atx(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD018 - ``#Heading`` is a paragraph, not a heading; insert the space."""
    for n, match in missing_space_atx_lines(doc):
        end = match.end(2)
        yield Violation(
            "MD018",
            "No space after hash on atx style heading",
            n,
            match.start(2),
            end + 1,
            fix=Fix(end, end, " "),
        )


def no_multiple_space_atx(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD019 - multiple spaces after hash on an open ATX heading."""
    for heading in doc.headings():
        if heading.style != "atx":
            continue
        text = doc.line_text(heading.start_line)
        match = MULTIPLE_SPACE_ATX_RE.match(text)
        if match:
            yield Violation(
                "MD019",
                "Multiple spaces after hash on atx style heading",
                heading.start_line,
                match.start(2),
                match.end(2),
                fix=Fix(match.start(2), match.end(2), " "),
            )


def no_missing_space_closed_atx(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD020 - closed ATX headings need spaces inside both hash runs."""
    for line in doc.lines:
        n = line.number
        if not doc.is_prose(n):
            continue
        text = line.text
        match = CLOSED_ATX_RE.match(text)
        if match is None:
            continue
        inner = match.group(3)
        if not inner.strip():
            continue
        left_missing = not inner[0].isspace()
        right_missing = not inner[-1].isspace() and not inner.endswith("\\")
        if not (left_missing or right_missing):
            continue
        rebuilt = (
            f"{match.group(1)}{match.group(2)} {inner.strip()} {match.group(4)}"
            f"{match.group(5)}"
        )
        yield Violation(
            "MD020",
            "No space inside hashes on closed atx style heading",
            n,
            len(match.group(1)),
            len(text.rstrip()),
            fix=Fix(0, len(text), rebuilt),
        )


def no_multiple_space_closed_atx(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD021 - multiple spaces inside hashes on a closed ATX heading."""
    for heading in doc.headings():
        if heading.style != "atx_closed":
            continue
        text = doc.line_text(heading.start_line)
        match = CLOSED_ATX_RE.match(text)
        if match is None:
            continue
        inner = match.group(3)
        leading = len(inner) - len(inner.lstrip())
        trailing = len(inner) - len(inner.rstrip())
        if leading < 2 and trailing < 2:
            continue
        rebuilt = f"{match.group(1)}{match.group(2)} {inner.strip()} {match.group(4)}"
        yield Violation(
            "MD021",
            "Multiple spaces inside hashes on closed atx style heading",
            heading.start_line,
            len(match.group(1)),
            len(text.rstrip()),
            fix=Fix(0, len(text.rstrip()), rebuilt),
        )


def _per_level(config: RuleConfig, name: str, level: int) -> int:
    value = config.parameters.get(name)
    if isinstance(value, (list, tuple)):
        try:
            return int(value[level - 1])
        except (IndexError, TypeError, ValueError):
            return 1
    return config.get_int(name, 1)


def blanks_around_headings(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD022 - headings should be surrounded by blank lines.

    ``lines_above`` and ``lines_below`` may be a single count or one count
    per heading level; a negative count disables that side. Lines that
    MD018 turns into headings are checked as headings too, so both fixes
    land in the same pass.
    """
    targets = [
        (heading, heading.level)
        for heading in doc.headings()
        if not is_quoted(doc, heading)
    ]
    targets.extend(
        (Block(n, n), len(match.group(2))) for n, match in missing_space_atx_lines(doc)
    )
    targets.sort(key=lambda target: target[0].start_line)

    for block, level in targets:
        yield from blank_line_violations(
            doc,
            "MD022",
            "Headings should be surrounded by blank lines",
            block,
            above=_per_level(config, "lines_above", level),
            below=_per_level(config, "lines_below", level),
        )


def heading_start_left(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD023 - headings must start at the beginning of the line."""
    for heading in doc.headings():
        if any(isinstance(a, ListItem) for a in doc.ancestors(heading)) or is_quoted(doc, heading):
            continue
        text = doc.line_text(heading.start_line)
        indent = len(text) - len(text.lstrip(" \t"))
        if indent:
            yield Violation(
                "MD023",
                "Headings must start at the beginning of the line",
                heading.start_line,
                0,
                len(text),
                fix=Fix(0, indent, ""),
            )


def _normalized(text: str) -> str:
    return " ".join(text.split())


def no_duplicate_heading(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD024 - multiple headings with the same content.

    With ``siblings_only`` a heading only clashes with headings that share
    its parent heading.
    """
    siblings_only = config.get_bool(
        "siblings_only", config.get_bool("allow_different_nesting", False)
    )
    seen = set()
    root_children: set[str] = set()
    stack: list[tuple[int, set[str]]] = []

    for heading in doc.headings():
        text = _normalized(heading.text)
        if siblings_only:
            while stack and stack[-1][0] >= heading.level:
                stack.pop()
            pool = stack[-1][1] if stack else root_children
            stack.append((heading.level, set()))
        else:
            pool = seen
        if text in pool:
            yield _violation(
                doc, "MD024",
                f'Multiple headings with the same content [Context: "{heading.text}"]',
                heading,
            )
        pool.add(text)


def single_title(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD025 - only one top-level heading per document."""
    level = config.get_int("level", 1)
    found = doc.has_front_matter_title(
        config.get_str("front_matter_title", r'^\s*"?title"?\s*[:=]')
    )
    for heading in doc.headings():
        if heading.level != level:
            continue
        if found:
            yield _violation(
                doc, "MD025",
                f'Multiple top-level headings in the same document [Context: "{heading.text}"]',
                heading,
            )
        found = True


def no_trailing_punctuation(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD026 - trailing punctuation in heading text."""
    punctuation = config.get_str("punctuation", DEFAULT_PUNCTUATION)
    if not punctuation:
        return
    for heading in doc.headings():
        if heading.style == "setext":
            line = heading.end_line - 1
            end = len(doc.line_text(line).rstrip())
        else:
            line = heading.start_line
            end = heading.text_end
        text = doc.line_text(line)[:end]
        if not text or text[-1] not in punctuation or ENTITY_END_RE.search(text):
            continue
        trimmed = text.rstrip(punctuation)
        yield Violation(
            "MD026",
            f"Trailing punctuation in heading [Punctuation: '{text[-1]}']",
            line,
            len(trimmed),
            end,
            fix=Fix(len(trimmed), end, ""),
        )


def first_line_heading(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD041 - the first line should be a top-level heading.

    Leading HTML comments are skipped, and an ``<h1>`` element counts.
    """
    level = config.get_int("level", 1)
    if doc.has_front_matter_title(
        config.get_str("front_matter_title", r'^\s*"?title"?\s*[:=]')
    ):
        return
    for block in doc.blocks:
        if isinstance(block, FrontMatter):
            continue
        if isinstance(block, HtmlBlock):
            first = doc.line_text(block.start_line)
            if first.lstrip().startswith("<!--"):
                continue
            if level == 1 and H1_HTML_RE.match(first):
                return
        if isinstance(block, Heading) and block.level == level:
            return
        yield Violation(
            "MD041",
            "First line in a file should be a top-level heading",
            block.start_line,
            0,
            line_end(doc, block.start_line),
        )
        return


def required_headings(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD043 - headings must follow the required structure.

    ``*`` matches zero or more unspecified headings, ``+`` one or more and
    ``?`` exactly one.
    """
    required = config.get_list("headings")
    if not required:
        return
    match_case = config.get_bool("match_case", False)

    def same(a: str, b: str) -> bool:
        return a == b if match_case else a.lower() == b.lower()

    index = 0
    match_any = False
    any_headings = False

    for heading in doc.headings():
        any_headings = True
        actual = "#" * heading.level + " " + heading.text
        expected = required[index] if index < len(required) else "[None]"
        index += 1
        if expected == "*":
            following = required[index] if index < len(required) else "[None]"
            index += 1
            if not same(following, actual):
                match_any = True
                index -= 1
        elif expected == "+":
            match_any = True
        elif expected == "?":
            pass
        elif same(expected, actual):
            match_any = False
        elif match_any:
            index -= 1
        else:
            yield _violation(
                doc, "MD043",
                f"Required heading structure [Expected: {expected}; Actual: {actual}]",
                heading,
            )
            return

    remaining = len(required) - index
    if (remaining > 1 or (remaining == 1 and required[index] != "*")) and (
        any_headings or not all(h == "*" for h in required)
    ):
        last = max(doc.line_count - 1, 0)
        yield Violation(
            "MD043",
            f'Required heading structure [Context: "{required[index]}"]',
            last,
            0,
            line_end(doc, last) if doc.lines else 0,
        )
