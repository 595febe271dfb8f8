"""Tests for whitespace and line-shape rules."""


# ----------------------------------------------------------------------------
# MD009 no-trailing-spaces
# ----------------------------------------------------------------------------

def test_trailing_spaces_reported_and_fixed(lint, fix):
    violations = lint("hello   \n", "MD009")

    assert len(violations) == 1
    v = violations[0]
    assert (v.line, v.column_start, v.column_end) == (0, 5, 8)
    assert "Actual: 3" in v.message
    assert fix("hello   \n", "MD009") == "hello\n"


def test_trailing_spaces_without_final_newline(fix):
    assert fix("hello   ", "MD009") == "hello"


def test_hard_break_allowed(lint):
    assert lint("line  \nnext\n", "MD009") == []


def test_hard_break_strict(lint):
    parameters = {"MD009": {"strict": True}}

    assert lint("line  \nnext\n", "MD009", parameters=parameters) == []
    assert len(lint("text  \n", "MD009", parameters=parameters)) == 1


def test_trailing_spaces_in_code_block_ignored(lint):
    assert lint("```text\ncode   \n```\n", "MD009") == []


# ----------------------------------------------------------------------------
# MD010 no-hard-tabs
# ----------------------------------------------------------------------------

def test_hard_tab(lint, fix):
    violations = lint("a\tb\n", "MD010")

    assert [(v.column_start, v.column_end) for v in violations] == [(1, 2)]
    assert fix("a\tb\n", "MD010") == "a b\n"


def test_hard_tab_spaces_per_tab(fix):
    parameters = {"MD010": {"spaces_per_tab": 4}}

    assert fix("a\tb\n", "MD010", parameters=parameters) == "a    b\n"


def test_hard_tab_code_blocks_option(lint):
    text = "```text\n\tindented\n```\n"

    assert len(lint(text, "MD010")) == 1
    assert lint(text, "MD010", parameters={"MD010": {"code_blocks": False}}) == []


# ----------------------------------------------------------------------------
# MD012 no-multiple-blanks
# ----------------------------------------------------------------------------

def test_multiple_blanks(lint, fix, lines_of):
    text = "a\n\n\n\nb\n"

    assert lines_of(lint(text, "MD012")) == [2, 3]
    assert fix(text, "MD012") == "a\n\nb\n"


def test_multiple_blanks_maximum(lint):
    assert lint("a\n\n\nb\n", "MD012", parameters={"MD012": {"maximum": 2}}) == []


def test_multiple_blanks_in_code_ignored(lint):
    assert lint("```\na\n\n\n\nb\n```\n", "MD012") == []


# ----------------------------------------------------------------------------
# MD013 line-length
# ----------------------------------------------------------------------------

LONG_PROSE = "word " * 19 + "word"


def test_line_length(lint):
    violations = lint(LONG_PROSE + "\n", "MD013")

    assert len(violations) == 1
    v = violations[0]
    assert v.message == "Line length [Expected: 80; Actual: 99]"
    assert (v.column_start, v.column_end) == (80, 99)


def test_line_length_override(lint):
    assert lint(LONG_PROSE + "\n", "MD013", overrides={"md_line_length": "120"}) == []


def test_line_length_unbreakable_tail_allowed(lint):
    text = "See " + "x" * 100 + "\n"

    assert lint(text, "MD013") == []
    assert len(lint(text, "MD013", parameters={"MD013": {"strict": True}})) == 1


def test_line_length_reference_definition_exempt(lint):
    text = "[ref]: https://example.com/" + "a " * 50 + "\n"

    assert lint(text, "MD013") == []


def test_line_length_code_blocks_option(lint):
    text = "```text\n" + LONG_PROSE + "\n```\n"

    assert len(lint(text, "MD013")) == 1
    assert lint(text, "MD013", parameters={"MD013": {"code_blocks": False}}) == []


# ----------------------------------------------------------------------------
# MD047 single-trailing-newline
# ----------------------------------------------------------------------------

def test_missing_final_newline(lint, fix):
    violations = lint("text", "MD047")

    assert len(violations) == 1
    assert fix("text", "MD047") == "text\n"
    assert lint("text\n", "MD047") == []
