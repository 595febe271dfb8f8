"""Structural document model - block tree and per-line inline spans.

This is a lightweight parse: it recovers the constructs the rules inspect
(headings, lists, fences, blockquotes, tables, links, emphasis and so on)
with CommonMark block precedence, but it does not render anything and it
never raises on malformed input.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Generator, Iterable, NamedTuple, Optional

from .scanner import (
    ATX_RE,
    BLOCKQUOTE_RE,
    FENCE_CLOSE_RE,
    FENCE_RE,
    HTML_BLOCK_RE,
    HTML_TAG_LINE_RE,
    LIST_ITEM_RE,
    REFERENCE_DEFINITION_RE,
    SETEXT_RE,
    TABLE_DELIMITER_RE,
    THEMATIC_BREAK_RE,
    Line,
    indent_width,
    normalize_newlines,
    scan,
    strip_indent,
)

FRONT_MATTER_TITLE_RE = r'^\s*"?title"?\s*[:=]'


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


@dataclass
class Block:
    """A block-level node covering ``start_line..end_line`` inclusive."""
    start_line: int
    end_line: int

    @property
    def lines(self) -> range:
        return range(self.start_line, self.end_line + 1)


@dataclass
class FrontMatter(Block):
    pass


@dataclass
class Heading(Block):
    level: int
    style: str          # "atx", "atx_closed" or "setext"
    text: str
    text_start: int     # column of the heading text on start_line
    text_end: int


@dataclass
class Paragraph(Block):
    pass


@dataclass
class ListItem(Block):
    ordered: bool
    marker: str         # "-", "*", "+", "1.", "3)" ...
    number: Optional[int]
    indent: int         # column of the marker on start_line
    content_column: int
    spaces_after: int
    level: int
    children: list[Block] = field(default_factory=list)

    @property
    def marker_char(self) -> str:
        return self.marker[-1]


@dataclass
class ListBlock(Block):
    ordered: bool
    level: int
    items: list[ListItem] = field(default_factory=list)


@dataclass
class FencedCode(Block):
    info: str
    fence_char: str
    fence_length: int
    indent: int
    closed: bool = True

    @property
    def language(self) -> str:
        return self.info.split()[0] if self.info.strip() else ""


@dataclass
class IndentedCode(Block):
    pass


@dataclass
class Blockquote(Block):
    depth: int
    children: list[Block] = field(default_factory=list)


@dataclass
class Table(Block):
    column_count: int
    alignments: list[Optional[str]]
    delimiter_line: int


@dataclass
class ThematicBreak(Block):
    marker: str


@dataclass
class HtmlBlock(Block):
    pass


@dataclass
class ReferenceDefinition(Block):
    label: str
    destination: str


# ---------------------------------------------------------------------------
# Inline spans
# ---------------------------------------------------------------------------


class SpanKind(Enum):
    EMPHASIS = "emphasis"
    STRONG = "strong"
    CODE_SPAN = "code_span"
    LINK = "link"
    IMAGE = "image"
    BARE_URL = "bare_url"
    RAW_HTML = "raw_html"


@dataclass(frozen=True)
class InlineSpan:
    """
    An inline construct on one line, ``column_start..column_end`` half-open.

    ``text`` holds the link text, image alt text, code span content,
    emphasis content, URL or HTML tag name depending on the kind. For links
    and images ``style`` is one of inline, full, collapsed, shortcut or
    autolink.
    """
    kind: SpanKind
    line: int
    column_start: int
    column_end: int
    text: str = ""
    destination: Optional[str] = None
    label: Optional[str] = None
    style: Optional[str] = None
    marker: Optional[str] = None
    text_start: int = 0
    defined: bool = True

    @property
    def is_reference(self) -> bool:
        return self.style in ("full", "collapsed", "shortcut")


class InlineLine(NamedTuple):
    """Inline content of one line, ``masked`` blanks out code, URLs and HTML."""
    text: str
    masked: str
    column: int


def normalize_label(label: str) -> str:
    return " ".join(label.lower().split())


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass
class Document:
    """Scanned lines plus the block tree and inline spans built from them."""
    text: str
    lines: list[Line]
    newline: str = "\n"
    blocks: list[Block] = field(default_factory=list)
    spans: list[InlineSpan] = field(default_factory=list)
    inline_lines: dict[int, InlineLine] = field(default_factory=dict)
    definitions: dict[str, ReferenceDefinition] = field(default_factory=dict)
    front_matter: Optional[FrontMatter] = None
    code_lines: frozenset[int] = frozenset()
    html_lines: frozenset[int] = frozenset()
    _parents: dict[int, Block] = field(default_factory=dict, repr=False)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def ends_with_newline(self) -> bool:
        return self.text.endswith("\n")

    def line_text(self, number: int) -> str:
        return self.lines[number].text

    def is_blank(self, number: int) -> bool:
        if number < 0 or number >= len(self.lines):
            return True
        return self.lines[number].is_blank

    def in_front_matter(self, number: int) -> bool:
        fm = self.front_matter
        return fm is not None and fm.start_line <= number <= fm.end_line

    def is_prose(self, number: int) -> bool:
        """True for lines outside code, HTML blocks and front matter."""
        return (
            number not in self.code_lines
            and number not in self.html_lines
            and not self.in_front_matter(number)
        )

    def walk(self, blocks: Optional[Iterable[Block]] = None) -> Generator[Block, None, None]:
        """Yield every block depth-first in document order."""
        for block in self.blocks if blocks is None else blocks:
            yield block
            if isinstance(block, ListBlock):
                yield from self.walk(block.items)
            elif isinstance(block, (ListItem, Blockquote)):
                yield from self.walk(block.children)

    def blocks_of(self, *types: type) -> list:
        return [b for b in self.walk() if isinstance(b, types)]

    def headings(self) -> list[Heading]:
        return self.blocks_of(Heading)

    def parent(self, block: Block) -> Optional[Block]:
        return self._parents.get(id(block))

    def ancestors(self, block: Block) -> list[Block]:
        chain = []
        parent = self.parent(block)
        while parent is not None:
            chain.append(parent)
            parent = self.parent(parent)
        return chain

    def spans_of(self, *kinds: SpanKind) -> list[InlineSpan]:
        return [s for s in self.spans if s.kind in kinds]

    def spans_on(self, number: int) -> list[InlineSpan]:
        return [s for s in self.spans if s.line == number]

    def links(self, include_undefined: bool = False) -> list[InlineSpan]:
        """Link spans; bracketed text with no definition is plain text unless asked for."""
        return [
            s for s in self.spans
            if s.kind is SpanKind.LINK
            and (include_undefined or s.defined or s.style != "shortcut")
        ]

    def images(self, include_undefined: bool = False) -> list[InlineSpan]:
        return [
            s for s in self.spans
            if s.kind is SpanKind.IMAGE
            and (include_undefined or s.defined or s.style != "shortcut")
        ]

    def has_front_matter_title(self, pattern: str = FRONT_MATTER_TITLE_RE) -> bool:
        """Check whether front matter defines a title (counts as a top heading)."""
        if self.front_matter is None or not pattern:
            return False
        try:
            title_re = re.compile(pattern, re.IGNORECASE)
        except re.error:
            return False
        return any(
            title_re.search(self.lines[n].text)
            for n in range(self.front_matter.start_line + 1, self.front_matter.end_line)
        )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class _Src(NamedTuple):
    """A line as seen from inside its containers."""
    number: int
    text: str
    column: int


LIST_INTERRUPT_RE = re.compile(r'^ {0,3}(?:[-+*]|1[.)])[ \t]+\S')
HTML_COMMENT_START = "<!--"
# Containers nested deeper than this are read as paragraph text.
MAX_NESTING = 32


def _is_blank(text: str) -> bool:
    return not text.strip()


def split_cells(text: str) -> list[str]:
    """Split a table row into cells, honouring escaped pipes and code spans."""
    row = text.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    cells = []
    current = []
    in_code = False
    i = 0
    while i < len(row):
        ch = row[i]
        if ch == "\\" and i + 1 < len(row):
            current.append(row[i:i + 2])
            i += 2
            continue
        if ch == "`":
            in_code = not in_code
        if ch == "|" and not in_code:
            cells.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    cells.append("".join(current))
    return cells


def _alignment(cell: str) -> Optional[str]:
    cell = cell.strip()
    left = cell.startswith(":")
    right = cell.endswith(":")
    if left and right:
        return "center"
    if left:
        return "left"
    if right:
        return "right"
    return None


def _table_header_at(src: list[_Src], i: int) -> Optional[int]:
    """Return the column count if a table starts at src[i]."""
    if i + 1 >= len(src):
        return None
    header, delimiter = src[i].text, src[i + 1].text
    if "|" not in header or indent_width(header) >= 4:
        return None
    if "|" not in delimiter or not TABLE_DELIMITER_RE.match(delimiter):
        return None
    count = len(split_cells(header))
    if count != len(split_cells(delimiter)):
        return None
    return count


def _opens_fence(text: str) -> Optional[re.Match]:
    match = FENCE_RE.match(text)
    if match and match.group(2)[0] == "`" and "`" in match.group(3):
        return None
    return match


def _starts_block(text: str) -> bool:
    """True if the line starts a block that interrupts a paragraph."""
    return bool(
        _opens_fence(text)
        or ATX_RE.match(text)
        or THEMATIC_BREAK_RE.match(text)
        or BLOCKQUOTE_RE.match(text)
        or LIST_INTERRUPT_RE.match(text)
        or HTML_BLOCK_RE.match(text)
    )


class _BlockParser:
    """Recursive container parser over ``_Src`` lines."""

    def __init__(self):
        self.definitions: list[ReferenceDefinition] = []
        self.inline_sources: list[_Src] = []
        self.html_sources: list[_Src] = []
        self.code_lines: set[int] = set()
        self.html_lines: set[int] = set()

    def parse(self, src: list[_Src], list_level: int = 0, quote_depth: int = 0) -> list[Block]:
        blocks: list[Block] = []
        i = 0
        n = len(src)
        nested = list_level + quote_depth < MAX_NESTING

        while i < n:
            line = src[i]
            text = line.text

            if _is_blank(text):
                i += 1
                continue

            if indent_width(text) >= 4:
                i = self._indented_code(src, i, blocks)
                continue

            fence = _opens_fence(text)
            if fence:
                i = self._fenced_code(src, i, fence, blocks)
                continue

            atx = ATX_RE.match(text)
            if atx:
                blocks.append(self._atx_heading(line, atx))
                i += 1
                continue

            if THEMATIC_BREAK_RE.match(text):
                blocks.append(ThematicBreak(line.number, line.number, text.strip()))
                i += 1
                continue

            if nested and BLOCKQUOTE_RE.match(text):
                i = self._blockquote(src, i, blocks, list_level, quote_depth)
                continue

            if nested and LIST_ITEM_RE.match(text):
                i = self._list(src, i, blocks, list_level, quote_depth)
                continue

            if HTML_BLOCK_RE.match(text) or HTML_TAG_LINE_RE.match(text):
                i = self._html_block(src, i, blocks)
                continue

            columns = _table_header_at(src, i)
            if columns:
                i = self._table(src, i, columns, blocks)
                continue

            definition = REFERENCE_DEFINITION_RE.match(text)
            if definition and definition.group(2):
                label = definition.group(1)
                destination = definition.group(2).strip("<>")
                block = ReferenceDefinition(line.number, line.number, label, destination)
                self.definitions.append(block)
                blocks.append(block)
                i += 1
                continue

            i = self._paragraph(src, i, blocks)

        return blocks

    # -- leaf blocks --------------------------------------------------------

    def _indented_code(self, src: list[_Src], i: int, blocks: list[Block]) -> int:
        last = i
        j = i + 1
        while j < len(src):
            if not _is_blank(src[j].text):
                if indent_width(src[j].text) < 4:
                    break
                last = j
            j += 1
        block = IndentedCode(src[i].number, src[last].number)
        self.code_lines.update(block.lines)
        blocks.append(block)
        return last + 1

    def _fenced_code(self, src: list[_Src], i: int, fence: re.Match, blocks: list[Block]) -> int:
        indent = len(fence.group(1))
        run = fence.group(2)
        close = None
        for j in range(i + 1, len(src)):
            match = FENCE_CLOSE_RE.match(src[j].text)
            if match and match.group(1)[0] == run[0] and len(match.group(1)) >= len(run):
                close = j
                break
        end = close if close is not None else len(src) - 1
        block = FencedCode(
            src[i].number,
            src[end].number,
            info=fence.group(3).strip(),
            fence_char=run[0],
            fence_length=len(run),
            indent=indent,
            closed=close is not None,
        )
        self.code_lines.update(block.lines)
        blocks.append(block)
        return end + 1

    def _atx_heading(self, line: _Src, match: re.Match) -> Heading:
        text = line.text
        content_start = match.end()
        while content_start < len(text) and text[content_start] in " \t":
            content_start += 1
        content = text[content_start:].rstrip()
        style = "atx"
        closing = re.search(r'(?:^|[ \t]+)#+$', content)
        if content and closing:
            style = "atx_closed"
            content = content[:closing.start()].rstrip()
        heading = Heading(
            line.number,
            line.number,
            level=len(match.group(2)),
            style=style,
            text=content,
            text_start=line.column + content_start,
            text_end=line.column + content_start + len(content),
        )
        self.inline_sources.append(_Src(line.number, content, heading.text_start))
        return heading

    def _html_block(self, src: list[_Src], i: int, blocks: list[Block]) -> int:
        j = i
        if src[i].text.lstrip().startswith(HTML_COMMENT_START):
            while j < len(src) and "-->" not in src[j].text:
                j += 1
            j = min(j, len(src) - 1)
        else:
            while j + 1 < len(src) and not _is_blank(src[j + 1].text):
                j += 1
        block = HtmlBlock(src[i].number, src[j].number)
        self.html_lines.update(block.lines)
        self.html_sources.extend(src[i:j + 1])
        blocks.append(block)
        return j + 1

    def _table(self, src: list[_Src], i: int, columns: int, blocks: list[Block]) -> int:
        alignments = [_alignment(c) for c in split_cells(src[i + 1].text)]
        j = i + 2
        while j < len(src):
            text = src[j].text
            if _is_blank(text) or _starts_block(text) or "|" not in text:
                break
            j += 1
        blocks.append(Table(
            src[i].number,
            src[j - 1].number,
            column_count=columns,
            alignments=alignments,
            delimiter_line=src[i + 1].number,
        ))
        for k in range(i, j):
            if k != i + 1:
                self.inline_sources.append(src[k])
        return j

    def _paragraph(self, src: list[_Src], i: int, blocks: list[Block]) -> int:
        j = i + 1
        while j < len(src):
            text = src[j].text
            if _is_blank(text):
                break
            if SETEXT_RE.match(text):
                heading_text = " ".join(s.text.strip() for s in src[i:j])
                first = src[i]
                start = first.column + indent_width(first.text)
                blocks.append(Heading(
                    first.number,
                    src[j].number,
                    level=1 if text.strip()[0] == "=" else 2,
                    style="setext",
                    text=heading_text,
                    text_start=start,
                    text_end=first.column + len(first.text.rstrip()),
                ))
                self.inline_sources.extend(src[i:j])
                return j + 1
            if _starts_block(text) or _table_header_at(src, j):
                break
            j += 1
        blocks.append(Paragraph(src[i].number, src[j - 1].number))
        self.inline_sources.extend(src[i:j])
        return j

    # -- containers ---------------------------------------------------------

    def _blockquote(
        self, src: list[_Src], i: int, blocks: list[Block], list_level: int, quote_depth: int
    ) -> int:
        quoted: list[_Src] = []
        j = i
        while j < len(src):
            line = src[j]
            match = re.match(r'^ {0,3}> ?', line.text)
            if match:
                quoted.append(_Src(line.number, line.text[match.end():], line.column + match.end()))
                j += 1
                continue
            if _is_blank(line.text):
                break
            # Lazy continuation of a quoted paragraph.
            if quoted and not _is_blank(quoted[-1].text) and not _starts_block(line.text):
                quoted.append(line)
                j += 1
                continue
            break
        children = self.parse(quoted, list_level, quote_depth + 1)
        blocks.append(Blockquote(src[i].number, src[j - 1].number, quote_depth + 1, children))
        return j

    def _list(
        self, src: list[_Src], i: int, blocks: list[Block], list_level: int, quote_depth: int
    ) -> int:
        first = LIST_ITEM_RE.match(src[i].text)
        ordered = first.group(2)[-1] in ".)"
        kind = first.group(2)[-1]
        items: list[ListItem] = []
        j = i

        while j < len(src):
            match = LIST_ITEM_RE.match(src[j].text)
            if (
                match is None
                or indent_width(src[j].text) >= 4
                or match.group(2)[-1] != kind
                or THEMATIC_BREAK_RE.match(src[j].text)
            ):
                break
            item, next_index = self._list_item(src, j, match, list_level, quote_depth)
            items.append(item)

            # Blank lines between items keep the list going.
            k = next_index
            while k < len(src) and _is_blank(src[k].text):
                k += 1
            following = LIST_ITEM_RE.match(src[k].text) if k < len(src) else None
            if (
                following
                and following.group(2)[-1] == kind
                and indent_width(src[k].text) < 4
                and not THEMATIC_BREAK_RE.match(src[k].text)
            ):
                j = k
                continue
            j = next_index
            break

        block = ListBlock(items[0].start_line, items[-1].end_line, ordered, list_level, items)
        blocks.append(block)
        return j

    def _list_item(
        self, src: list[_Src], j: int, match: re.Match, list_level: int, quote_depth: int
    ) -> tuple[ListItem, int]:
        line = src[j]
        marker_col = len(match.group(1))
        marker = match.group(2)
        spacing = match.group(3)
        rest = line.text[match.end():]
        marker_end = marker_col + len(marker)

        spaces = indent_width(spacing) if spacing else 0
        if not rest.strip() or spaces > 4:
            content_offset = marker_end + 1
        else:
            content_offset = marker_end + len(spacing)

        first_text = line.text[content_offset:] if content_offset <= len(line.text) else ""
        item_src = [_Src(line.number, first_text, line.column + content_offset)]

        k = j + 1
        previous_blank = not first_text.strip()
        while k < len(src):
            text = src[k].text
            if _is_blank(text):
                item_src.append(_Src(src[k].number, "", src[k].column))
                previous_blank = True
                k += 1
                continue
            if indent_width(text) >= content_offset:
                stripped, removed = strip_indent(text, content_offset)
                item_src.append(_Src(src[k].number, stripped, src[k].column + removed))
                previous_blank = False
                k += 1
                continue
            if (
                not previous_blank
                and not _starts_block(text)
                and not LIST_ITEM_RE.match(text)
                and item_src[-1].text.strip()
                and _table_header_at(src, k) is None
            ):
                item_src.append(src[k])
                k += 1
                continue
            break

        while len(item_src) > 1 and not item_src[-1].text.strip():
            item_src.pop()
        # One source line per entry, so this is one past the item's last line.
        k = j + len(item_src)

        number = int(marker[:-1]) if marker[-1] in ".)" else None
        item = ListItem(
            line.number,
            item_src[-1].number,
            ordered=number is not None,
            marker=marker,
            number=number,
            indent=line.column + marker_col,
            content_column=line.column + content_offset,
            spaces_after=spaces,
            level=list_level,
        )
        item.children = self.parse(item_src, list_level + 1, quote_depth)
        return item, k


# ---------------------------------------------------------------------------
# Inline scanning
# ---------------------------------------------------------------------------

BACKTICK_RUN_RE = re.compile(r'`+')
AUTOLINK_RE = re.compile(r'<((?:https?|ftp)://[^\s<>]+|[\w.+-]+@[\w-]+(?:\.[\w-]+)+)>', re.IGNORECASE)
HTML_TAG_RE = re.compile(r'<(/?)([A-Za-z][A-Za-z0-9-]*)(?:\s[^<>]*?)?(/?)>')
HTML_COMMENT_RE = re.compile(r'<!--.*?-->')
LINK_TAIL_RE = re.compile(
    r'\(\s*(<[^>]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)'
    r'(?:\s+(?:"[^"]*"|\'[^\']*\'|\([^)]*\)))?\s*\)'
)
BRACKET_RE = re.compile(r'(!?)\[((?:[^\[\]\\]|\\.)*)\]')
LABEL_RE = re.compile(r'\[((?:[^\[\]\\]|\\.)*)\]')
BARE_URL_RE = re.compile(r'(?<![(<\[="\'/\w])(https?://[^\s)>\]]+)')
STRONG_RES = (
    re.compile(r'(?<![\\*])\*\*(?![\s*])(.+?)(?<![\s\\*])\*\*(?!\*)'),
    re.compile(r'(?<![\w\\_])__(?![\s_])(.+?)(?<![\s\\_])__(?![\w_])'),
)
EMPHASIS_RES = (
    re.compile(r'(?<![\\*])\*(?![\s*])(.+?)(?<![\s\\*])\*(?!\*)'),
    re.compile(r'(?<![\w\\_])_(?![\s_])(.+?)(?<![\s\\_])_(?![\w_])'),
)
MASK = "\x00"


def _mask(chars: list[str], start: int, end: int) -> None:
    for k in range(start, end):
        chars[k] = MASK


def _code_spans(text: str) -> list[tuple[int, int, int]]:
    """Find code spans as (start, end, run_length); unmatched runs stay text."""
    spans = []
    runs = [m for m in BACKTICK_RUN_RE.finditer(text) if not _escaped(text, m.start())]
    used = set()
    for a, run in enumerate(runs):
        if a in used:
            continue
        for b in range(a + 1, len(runs)):
            if b not in used and len(runs[b].group()) == len(run.group()):
                spans.append((run.start(), runs[b].end(), len(run.group())))
                used.update(range(a, b + 1))
                break
    return spans


def _escaped(text: str, index: int) -> bool:
    count = 0
    while index - count - 1 >= 0 and text[index - count - 1] == "\\":
        count += 1
    return count % 2 == 1


class _InlineScanner:
    """Finds inline spans on a single line of inline content."""

    def __init__(self, definitions: set[str]):
        self.definitions = definitions

    def scan(self, src: _Src, spans: list[InlineSpan]) -> InlineLine:
        text = src.text
        col = src.column
        chars = list(text)

        for start, end, run in _code_spans(text):
            spans.append(InlineSpan(
                SpanKind.CODE_SPAN, src.number, col + start, col + end,
                text=text[start + run:end - run], marker="`" * run,
            ))
            _mask(chars, start, end)

        masked = "".join(chars)
        for match in HTML_COMMENT_RE.finditer(masked):
            _mask(chars, match.start(), match.end())

        masked = "".join(chars)
        for match in AUTOLINK_RE.finditer(masked):
            spans.append(InlineSpan(
                SpanKind.LINK, src.number, col + match.start(), col + match.end(),
                text=match.group(1), destination=match.group(1), style="autolink",
                text_start=col + match.start() + 1,
            ))
            _mask(chars, match.start(), match.end())

        masked = "".join(chars)
        for match in HTML_TAG_RE.finditer(masked):
            spans.append(InlineSpan(
                SpanKind.RAW_HTML, src.number, col + match.start(), col + match.end(),
                text=match.group(2).lower(), marker=match.group(1) or None,
            ))
            _mask(chars, match.start(), match.end())

        first_link = len(spans)
        self._links(src, chars, spans)
        link_texts = [
            (s.text_start - col, s.text_start - col + len(s.text)) for s in spans[first_link:]
        ]

        masked = "".join(chars)
        for match in BARE_URL_RE.finditer(masked):
            url = match.group(1).rstrip(".,;:!?'\"*_")
            end = match.start(1) + len(url)
            if any(a <= match.start(1) and end <= b for a, b in link_texts):
                continue
            spans.append(InlineSpan(
                SpanKind.BARE_URL, src.number, col + match.start(1), col + end,
                text=url, destination=url,
            ))
            _mask(chars, match.start(1), end)

        self._emphasis(src, chars, spans)
        return InlineLine(text, "".join(chars), col)

    def _links(self, src: _Src, chars: list[str], spans: list[InlineSpan]) -> None:
        text = src.text
        col = src.column
        # Images first so that images nested in link text are not links.
        for pass_images in (True, False):
            masked = "".join(chars)
            for match in BRACKET_RE.finditer(masked):
                is_image = match.group(1) == "!"
                if is_image != pass_images or _escaped(masked, match.start()):
                    continue
                if not is_image and match.start() > 0 and masked[match.start() - 1] == "]":
                    continue
                start = match.start()
                label_text = text[match.start(2):match.end(2)]
                after = match.end()
                style = None
                destination = None
                label = None
                end = after

                tail = LINK_TAIL_RE.match(masked, after)
                ref = LABEL_RE.match(masked, after)
                if tail:
                    style = "inline"
                    destination = text[tail.start(1):tail.end(1)].strip("<>")
                    end = tail.end()
                elif ref:
                    end = ref.end()
                    if ref.group(1).strip():
                        style = "full"
                        label = text[ref.start(1):ref.end(1)]
                    else:
                        style = "collapsed"
                        label = label_text
                elif after < len(masked) and masked[after] == ":":
                    continue
                else:
                    style = "shortcut"
                    label = label_text

                if style == "shortcut" and (
                    label_text.startswith("^") or label_text.strip().lower() in ("", "x")
                ):
                    continue

                defined = True
                if label is not None:
                    defined = normalize_label(label) in self.definitions

                spans.append(InlineSpan(
                    SpanKind.IMAGE if is_image else SpanKind.LINK,
                    src.number,
                    col + start,
                    col + end,
                    text=label_text,
                    destination=destination,
                    label=label,
                    style=style,
                    text_start=col + match.start(2),
                    defined=defined,
                ))
                # Keep link text visible for emphasis scanning, hide the rest.
                _mask(chars, start, match.start(2))
                _mask(chars, match.end(2), end)
                if is_image:
                    for k in range(start, end):
                        chars[k] = "x"

    def _emphasis(self, src: _Src, chars: list[str], spans: list[InlineSpan]) -> None:
        col = src.column
        for kind, patterns, width in (
            (SpanKind.STRONG, STRONG_RES, 2),
            (SpanKind.EMPHASIS, EMPHASIS_RES, 1),
        ):
            for pattern in patterns:
                masked = "".join(chars)
                for match in pattern.finditer(masked):
                    spans.append(InlineSpan(
                        kind, src.number, col + match.start(), col + match.end(),
                        text=src.text[match.start(1):match.end(1)],
                        marker=masked[match.start()] * width,
                        text_start=col + match.start(1),
                    ))
                    _mask(chars, match.start(), match.start() + width)
                    _mask(chars, match.end() - width, match.end())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _front_matter(lines: list[Line]) -> Optional[FrontMatter]:
    if not lines or lines[0].text.rstrip() != "---":
        return None
    for line in lines[1:]:
        if line.text.rstrip() in ("---", "..."):
            return FrontMatter(0, line.number)
    return None


def _index_parents(blocks: Iterable[Block], parent: Optional[Block], index: dict[int, Block]) -> None:
    for block in blocks:
        if parent is not None:
            index[id(block)] = parent
        if isinstance(block, ListBlock):
            _index_parents(block.items, block, index)
        elif isinstance(block, (ListItem, Blockquote)):
            _index_parents(block.children, block, index)


def build_document(text: str) -> Document:
    """
    Scan text and build its document model.

    Args:
        text: Markdown source in any newline convention

    Returns:
        Document with lines, blocks and inline spans
    """
    lines, newline = scan(text)
    normalized = normalize_newlines(text)

    front_matter = _front_matter(lines)
    first_line = front_matter.end_line + 1 if front_matter else 0

    parser = _BlockParser()
    src = [_Src(line.number, line.text, 0) for line in lines[first_line:]]
    blocks = parser.parse(src)
    if front_matter:
        blocks.insert(0, front_matter)

    definitions: dict[str, ReferenceDefinition] = {}
    for definition in parser.definitions:
        definitions.setdefault(normalize_label(definition.label), definition)

    spans: list[InlineSpan] = []
    inline_lines: dict[int, InlineLine] = {}
    scanner = _InlineScanner(set(definitions))
    for source in parser.inline_sources:
        inline_lines[source.number] = scanner.scan(source, spans)
    for source in parser.html_sources:
        for match in HTML_TAG_RE.finditer(source.text):
            spans.append(InlineSpan(
                SpanKind.RAW_HTML, source.number,
                source.column + match.start(), source.column + match.end(),
                text=match.group(2).lower(), marker=match.group(1) or None,
            ))
    spans.sort(key=lambda s: (s.line, s.column_start))

    parents: dict[int, Block] = {}
    _index_parents(blocks, None, parents)

    return Document(
        text=normalized,
        lines=lines,
        newline=newline,
        blocks=blocks,
        spans=spans,
        inline_lines=inline_lines,
        definitions=definitions,
        front_matter=front_matter,
        code_lines=frozenset(parser.code_lines),
        html_lines=frozenset(parser.html_lines),
        _parents=parents,
    )
