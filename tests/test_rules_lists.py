"""Tests for list rules."""


def test_ul_style_consistent(lint, fix, lines_of):
    text = "* a\n- b\n"
    violations = lint(text, "MD004")

    assert lines_of(violations) == [1]
    assert violations[0].message == "Unordered list style [Expected: asterisk; Actual: dash]"
    assert fix(text, "MD004") == "* a\n* b\n"


def test_ul_style_fixed(lint):
    assert len(lint("* a\n", "MD004", parameters={"MD004": {"style": "dash"}})) == 1
    assert lint("- a\n", "MD004", parameters={"MD004": {"style": "dash"}}) == []


def test_ul_style_sublist(lint):
    parameters = {"MD004": {"style": "sublist"}}

    assert lint("- a\n  * b\n- c\n", "MD004", parameters=parameters) == []
    assert len(lint("- a\n  - b\n", "MD004", parameters=parameters)) == 1


def test_list_indent(lint, fix, lines_of):
    text = "- a\n - b\n"

    assert lines_of(lint(text, "MD005")) == [1]
    assert fix(text, "MD005") == "- a\n- b\n"


def test_list_indent_prefers_home_column(lint, lines_of):
    """The list's home column wins over the first item's indentation."""
    violations = lint("  - c\n- a\n", "MD005")

    assert lines_of(violations) == [0]
    assert "Expected: 0; Actual: 2" in violations[0].message
    assert violations[0].fix is not None


def test_list_indent_no_fix_away_from_home(lint):
    violations = lint("- a\n\n   - b\n    - c\n", "MD005")

    assert len(violations) == 1
    assert violations[0].fix is None


def test_fix_all_keeps_siblings(fix, lint):
    text = "# T\n\n  - c\n- a\n"
    fixed = fix(text)

    assert fixed == "# T\n\n- c\n- a\n"
    assert lint(fixed) == []


def test_list_indent_right_aligned_numbers(lint):
    assert lint(" 9. a\n10. b\n", "MD005") == []


def test_ul_start_left(lint, fix):
    assert len(lint(" - a\n", "MD006")) == 1
    assert fix(" - a\n", "MD006") == "- a\n"


def test_ul_indent(lint, fix):
    text = "- a\n   - b\n"
    violations = lint(text, "MD007")

    assert len(violations) == 1
    assert "Expected: 2; Actual: 3" in violations[0].message
    assert fix(text, "MD007") == "- a\n  - b\n"


def test_ul_indent_uses_indent_size(lint):
    text = "- a\n    - b\n"

    assert len(lint(text, "MD007")) == 1
    assert lint(text, "MD007", overrides={"indent_size": "4"}) == []


def test_ul_indent_skips_ordered_parents(lint):
    assert lint("1. a\n   - b\n", "MD007") == []


def test_ol_prefix_ordered(lint, fix):
    text = "1. a\n2. b\n4. c\n"
    violations = lint(text, "MD029")

    assert len(violations) == 1
    assert violations[0].message == (
        "Ordered list item prefix should be '3' [Expected: 3; Actual: 4; Style: 1/2/3]"
    )
    assert fix(text, "MD029") == "1. a\n2. b\n3. c\n"


def test_ol_prefix_one(lint, fix):
    assert lint("1. a\n1. b\n1. c\n", "MD029") == []
    assert fix("1. a\n1. b\n3. c\n", "MD029") == "1. a\n1. b\n1. c\n"


def test_ol_prefix_zero_based(lint):
    assert lint("0. a\n1. b\n2. c\n", "MD029") == []


def test_list_marker_space(lint, fix):
    assert len(lint("-  a\n", "MD030")) == 1
    assert fix("-  a\n", "MD030") == "- a\n"
    assert lint("- a\n", "MD030") == []


def test_list_marker_space_multi(lint):
    parameters = {"MD030": {"ul_multi": 3}}
    text = "-   a\n\n    para\n"

    assert lint(text, "MD030", parameters=parameters) == []


def test_blanks_around_lists(lint, fix):
    text = "text\n- a\n"

    assert len(lint(text, "MD032")) == 1
    assert fix(text, "MD032") == "text\n\n- a\n"


def test_blanks_around_lists_and_headings_share_fix(fix):
    """MD022 and MD032 insert the same blank line once."""
    assert fix("- a\n# H\n", "MD022", "MD032") == "- a\n\n# H\n"
