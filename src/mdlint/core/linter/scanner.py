"""Line scanner - splits text into lines and classifies their raw shape.

The shape is a cheap, context-free guess made from a single line. The
document builder refines it with context (a ``---`` line may be a setext
underline or a thematic break, an indented line may be code or a list
continuation), so rules that need certainty should use the document model.
"""
import re
from dataclasses import dataclass
from enum import Enum

NEWLINE_RE = re.compile(r'\r\n|\r|\n')

ATX_RE = re.compile(r'^( {0,3})(#{1,6})(?=[ \t]|$)')
FENCE_RE = re.compile(r'^( {0,3})(`{3,}|~{3,})(.*)$')
FENCE_CLOSE_RE = re.compile(r'^ {0,3}(`{3,}|~{3,})[ \t]*$')
BLOCKQUOTE_RE = re.compile(r'^ {0,3}>')
LIST_ITEM_RE = re.compile(r'^( *)([-+*]|\d{1,9}[.)])([ \t]+|$)')
THEMATIC_BREAK_RE = re.compile(r'^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$')
SETEXT_RE = re.compile(r'^ {0,3}(=+|-+)[ \t]*$')
TABLE_DELIMITER_RE = re.compile(
    r'^[ \t]*\|?[ \t]*:?-+:?[ \t]*(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$'
)
REFERENCE_DEFINITION_RE = re.compile(
    r'^ {0,3}\[((?:[^\]\\]|\\.)+)\]:[ \t]*(<[^>]*>|\S+)?'
)
HTML_BLOCK_RE = re.compile(
    r'^ {0,3}(?:<!--|<\?|<![A-Za-z]|<!\[CDATA\[|'
    r'</?(?:address|article|aside|blockquote|body|center|details|dialog|dir|div|'
    r'dl|dd|dt|fieldset|figcaption|figure|footer|form|h[1-6]|head|header|hr|'
    r'html|iframe|li|main|menu|nav|ol|p|pre|script|section|style|summary|'
    r'table|tbody|td|tfoot|th|thead|title|tr|ul)(?:[ \t/>]|$))',
    re.IGNORECASE
)
HTML_TAG_LINE_RE = re.compile(
    r'^ {0,3}</?[A-Za-z][A-Za-z0-9-]*(?:\s[^<>]*)?/?>[ \t]*$'
)


class LineShape(Enum):
    """Raw shape of a single physical line."""
    BLANK = "blank"
    ATX_HEADING = "atx_heading"
    SETEXT_UNDERLINE = "setext_underline"
    FENCE = "fence"
    BLOCKQUOTE = "blockquote"
    LIST_ITEM = "list_item"
    TABLE_ROW = "table_row"
    INDENTED = "indented"
    THEMATIC_BREAK = "thematic_break"
    HTML = "html"
    TEXT = "text"


@dataclass(frozen=True)
class Line:
    """One physical line of the document."""
    number: int
    text: str
    offset: int
    shape: LineShape

    @property
    def is_blank(self) -> bool:
        return self.shape is LineShape.BLANK

    @property
    def indent(self) -> int:
        return indent_width(self.text)


def detect_newline(text: str) -> str:
    """Return the first line terminator used in text, defaulting to LF."""
    match = NEWLINE_RE.search(text)
    return match.group() if match else "\n"


def normalize_newlines(text: str) -> str:
    return NEWLINE_RE.sub("\n", text)


def split_lines(text: str) -> list[str]:
    """
    Split normalized text into lines.

    A terminating newline does not produce a trailing empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def indent_width(text: str) -> int:
    """Width of leading whitespace, with tabs advancing to the next stop of 4."""
    width = 0
    for ch in text:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4 - (width % 4)
        else:
            break
    return width


def strip_indent(text: str, columns: int) -> tuple[str, int]:
    """
    Remove up to ``columns`` columns of leading whitespace.

    Returns:
        Tuple of (remaining_text, characters_removed)
    """
    width = 0
    index = 0
    while index < len(text) and width < columns:
        ch = text[index]
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4 - (width % 4)
        else:
            break
        index += 1
    return text[index:], index


def classify(text: str) -> LineShape:
    """Classify the raw shape of one line without any context."""
    if not text.strip():
        return LineShape.BLANK
    if indent_width(text) >= 4:
        return LineShape.INDENTED
    if FENCE_RE.match(text):
        return LineShape.FENCE
    if ATX_RE.match(text):
        return LineShape.ATX_HEADING
    if THEMATIC_BREAK_RE.match(text):
        return LineShape.THEMATIC_BREAK
    if SETEXT_RE.match(text):
        return LineShape.SETEXT_UNDERLINE
    if BLOCKQUOTE_RE.match(text):
        return LineShape.BLOCKQUOTE
    if LIST_ITEM_RE.match(text):
        return LineShape.LIST_ITEM
    if HTML_BLOCK_RE.match(text) or HTML_TAG_LINE_RE.match(text):
        return LineShape.HTML
    if "|" in text:
        return LineShape.TABLE_ROW
    return LineShape.TEXT


def scan(text: str) -> tuple[list[Line], str]:
    """
    Build the line table for a text.

    Args:
        text: Raw text in any line-ending convention

    Returns:
        Tuple of (lines, original_newline). Line offsets refer to the
        text after newline normalization.
    """
    newline = detect_newline(text)
    normalized = normalize_newlines(text)

    lines: list[Line] = []
    offset = 0
    for number, line_text in enumerate(split_lines(normalized)):
        lines.append(Line(number, line_text, offset, classify(line_text)))
        offset += len(line_text) + 1

    return lines, newline
