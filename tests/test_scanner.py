"""Tests for the line scanner and the document model."""
from mdlint.core.linter.document import (
    MAX_NESTING,
    Blockquote,
    FencedCode,
    Heading,
    ListBlock,
    Paragraph,
    ReferenceDefinition,
    SpanKind,
    Table,
    build_document,
)
from mdlint.core.linter.scanner import (
    LineShape,
    classify,
    detect_newline,
    indent_width,
    scan,
    split_lines,
    strip_indent,
)


# ----------------------------------------------------------------------------
# Scanner
# ----------------------------------------------------------------------------

def test_split_lines_drops_terminating_newline():
    """A trailing newline does not create an extra empty line."""
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\nb") == ["a", "b"]
    assert split_lines("a\n\n") == ["a", ""]
    assert split_lines("") == []


def test_detect_newline():
    assert detect_newline("a\r\nb\r\n") == "\r\n"
    assert detect_newline("a\nb") == "\n"
    assert detect_newline("no newline") == "\n"


def test_indent_width_expands_tabs():
    assert indent_width("    x") == 4
    assert indent_width("\tx") == 4
    assert indent_width(" \tx") == 4
    assert indent_width("\t x") == 5


def test_strip_indent():
    assert strip_indent("    code", 2) == ("  code", 2)
    assert strip_indent("  x", 4) == ("x", 2)


def test_scan_normalizes_crlf():
    """Line offsets refer to the normalized text."""
    lines, newline = scan("# T\r\n\r\ntext\r\n")

    assert newline == "\r\n"
    assert [line.text for line in lines] == ["# T", "", "text"]
    assert [line.offset for line in lines] == [0, 4, 5]
    assert [line.shape for line in lines] == [
        LineShape.ATX_HEADING, LineShape.BLANK, LineShape.TEXT
    ]


def test_classify_shapes():
    assert classify("    code") == LineShape.INDENTED
    assert classify("```py") == LineShape.FENCE
    assert classify("---") == LineShape.THEMATIC_BREAK
    assert classify("===") == LineShape.SETEXT_UNDERLINE
    assert classify("> quote") == LineShape.BLOCKQUOTE
    assert classify("- item") == LineShape.LIST_ITEM
    assert classify("1. item") == LineShape.LIST_ITEM
    assert classify("| a | b |") == LineShape.TABLE_ROW
    assert classify("<div>") == LineShape.HTML
    assert classify("#hashtag") == LineShape.TEXT


# ----------------------------------------------------------------------------
# Block structure
# ----------------------------------------------------------------------------

def test_atx_heading():
    doc = build_document("# Title\n\nPara text\n")
    heading = doc.headings()[0]

    assert heading.level == 1
    assert heading.style == "atx"
    assert heading.text == "Title"
    assert (heading.text_start, heading.text_end) == (2, 7)
    assert isinstance(doc.blocks[1], Paragraph)


def test_closed_atx_heading():
    heading = build_document("## Section ##\n").headings()[0]

    assert heading.style == "atx_closed"
    assert heading.text == "Section"


def test_setext_heading():
    heading = build_document("Title\n=====\n").headings()[0]

    assert heading.style == "setext"
    assert heading.level == 1
    assert (heading.start_line, heading.end_line) == (0, 1)


def test_hash_without_space_is_a_paragraph():
    doc = build_document("#Heading\n")

    assert doc.headings() == []
    assert isinstance(doc.blocks[0], Paragraph)


def test_fenced_code():
    doc = build_document("```py\ncode\n```\n")
    fence = doc.blocks[0]

    assert isinstance(fence, FencedCode)
    assert fence.language == "py"
    assert fence.closed
    assert doc.code_lines == {0, 1, 2}


def test_unclosed_fence_runs_to_end():
    fence = build_document("```\ncode\nmore\n").blocks[0]

    assert not fence.closed
    assert fence.end_line == 2


def test_nested_lists():
    doc = build_document("- a\n  - b\n- c\n")
    outer, inner = doc.blocks_of(ListBlock)

    assert len(outer.items) == 2
    assert outer.level == 0
    assert inner.level == 1
    assert inner.items[0].indent == 2
    assert doc.parent(inner) is outer.items[0]


def test_deep_list_nesting_is_capped():
    doc = build_document("- " * 700 + "x\n")
    lists = doc.blocks_of(ListBlock)

    assert len(lists) == MAX_NESTING
    assert lists[-1].level == MAX_NESTING - 1
    assert len(doc.blocks_of(Paragraph)) == 1


def test_deep_blockquote_nesting_is_capped():
    doc = build_document(">" * 1200 + " x\n")
    quotes = doc.blocks_of(Blockquote)

    assert len(quotes) == MAX_NESTING
    assert quotes[-1].depth == MAX_NESTING
    assert len(doc.blocks_of(Paragraph)) == 1


def test_ordered_list_numbers():
    block = build_document("1. a\n2. b\n").blocks[0]

    assert block.ordered
    assert [item.number for item in block.items] == [1, 2]


def test_blockquote_children():
    quote = build_document("> a\n> b\n").blocks[0]

    assert isinstance(quote, Blockquote)
    assert quote.depth == 1
    assert isinstance(quote.children[0], Paragraph)
    assert (quote.children[0].start_line, quote.children[0].end_line) == (0, 1)


def test_table():
    table = build_document("| a | b |\n| --- | :-: |\n| 1 | 2 |\n").blocks[0]

    assert isinstance(table, Table)
    assert table.column_count == 2
    assert table.delimiter_line == 1
    assert table.end_line == 2
    assert table.alignments == [None, "center"]


def test_front_matter():
    doc = build_document("---\ntitle: X\n---\n# H\n")

    assert doc.front_matter is not None
    assert doc.front_matter.end_line == 2
    assert doc.has_front_matter_title()
    assert doc.headings()[0].start_line == 3


def test_reference_definition():
    doc = build_document("[a][Ref]\n\n[ref]: http://example.com\n")

    assert isinstance(doc.blocks[1], ReferenceDefinition)
    assert doc.definitions["ref"].destination == "http://example.com"
    link = doc.links()[0]
    assert link.style == "full"
    assert link.defined


# ----------------------------------------------------------------------------
# Inline spans
# ----------------------------------------------------------------------------

def test_inline_spans():
    doc = build_document("See [docs](http://x.com) and `code` and https://example.com now\n")
    kinds = [s.kind for s in doc.spans]

    assert kinds == [SpanKind.LINK, SpanKind.CODE_SPAN, SpanKind.BARE_URL]
    assert doc.spans[0].destination == "http://x.com"
    assert doc.spans[0].text == "docs"
    assert doc.spans[1].text == "code"
    assert doc.spans[2].text == "https://example.com"


def test_url_link_text_is_not_a_bare_url():
    doc = build_document("[https://a.com](https://a.com)\n")

    assert doc.spans_of(SpanKind.BARE_URL) == []


def test_code_span_masks_markup():
    doc = build_document("`<b>` and `*x*`\n")

    assert doc.spans_of(SpanKind.RAW_HTML) == []
    assert doc.spans_of(SpanKind.EMPHASIS) == []


def test_emphasis_and_strong():
    doc = build_document("*a* and __b__\n")

    emphasis = doc.spans_of(SpanKind.EMPHASIS)[0]
    strong = doc.spans_of(SpanKind.STRONG)[0]
    assert (emphasis.text, emphasis.marker) == ("a", "*")
    assert (strong.text, strong.marker) == ("b", "__")


def test_undefined_shortcut_is_not_a_link():
    doc = build_document("Some [bracketed] text\n")

    assert doc.links() == []
    assert len(doc.links(include_undefined=True)) == 1


def test_heading_parent_index():
    doc = build_document("> # Quoted\n")
    heading = doc.headings()[0]

    assert isinstance(heading, Heading)
    assert isinstance(doc.parent(heading), Blockquote)
