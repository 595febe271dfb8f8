"""Tests for inline suppression directives."""
from mdlint.core.linter import DirectiveKind, parse_suppression_directive
from mdlint.core.linter.suppression import build_suppression_mask


# ----------------------------------------------------------------------------
# Directive parsing
# ----------------------------------------------------------------------------

def test_parse_directive_with_rules():
    directive = parse_suppression_directive(
        "<!-- markdownlint-disable MD013 no-bare-urls -->"
    )

    assert directive.kind == DirectiveKind.DISABLE
    assert directive.rule_ids == {"MD013", "MD034"}
    assert directive.to_dict() == {"kind": "disable", "rule_ids": ["MD013", "MD034"]}


def test_parse_directive_without_rules_means_all():
    directive = parse_suppression_directive("<!-- markdownlint-enable -->")

    assert directive.kind == DirectiveKind.ENABLE
    assert directive.rule_ids is None


def test_parse_directive_kinds():
    kinds = {
        "disable-next-line": DirectiveKind.DISABLE_NEXT_LINE,
        "disable-line": DirectiveKind.DISABLE_LINE,
        "disable-file": DirectiveKind.DISABLE_FILE,
        "capture": DirectiveKind.CAPTURE,
        "restore": DirectiveKind.RESTORE,
    }
    for word, kind in kinds.items():
        assert parse_suppression_directive(f"<!-- markdownlint-{word} -->").kind == kind


def test_parse_directive_is_case_insensitive():
    directive = parse_suppression_directive("<!-- MARKDOWNLINT-DISABLE md013 -->")

    assert directive.kind == DirectiveKind.DISABLE
    assert directive.rule_ids == {"MD013"}


def test_parse_directive_unknown_rule_names_nothing():
    directive = parse_suppression_directive("<!-- markdownlint-disable MD999 -->")

    assert directive.rule_ids == frozenset()


def test_parse_non_directive():
    assert parse_suppression_directive("plain text") is None
    assert parse_suppression_directive("<!-- a comment -->") is None


# ----------------------------------------------------------------------------
# Mask
# ----------------------------------------------------------------------------

def test_disable_enable_range():
    mask = build_suppression_mask([
        "a",
        "<!-- markdownlint-disable MD012 -->",
        "b",
        "<!-- markdownlint-enable MD012 -->",
        "c",
    ])

    assert [mask.is_suppressed("MD012", n) for n in range(5)] == [
        False, True, True, False, False
    ]
    assert not mask.is_suppressed("MD013", 2)


def test_disable_file_applies_to_earlier_lines():
    mask = build_suppression_mask(["x", "<!-- markdownlint-disable-file MD013 -->"])

    assert mask.is_suppressed("MD013", 0)
    assert not mask.is_suppressed("MD009", 0)


def test_disable_line():
    mask = build_suppression_mask(["long line <!-- markdownlint-disable-line -->", "next"])

    assert mask.is_suppressed("MD013", 0)
    assert not mask.is_suppressed("MD013", 1)


def test_disable_next_line_skips_comment_lines():
    mask = build_suppression_mask([
        "<!-- markdownlint-disable-next-line MD034 -->",
        "<!-- another comment -->",
        "http://example.com",
    ])

    assert not mask.is_suppressed("MD034", 1)
    assert mask.is_suppressed("MD034", 2)


def test_capture_restore():
    mask = build_suppression_mask([
        "<!-- markdownlint-capture -->",
        "<!-- markdownlint-disable MD013 -->",
        "long",
        "<!-- markdownlint-restore -->",
        "long",
    ])

    assert mask.is_suppressed("MD013", 2)
    assert not mask.is_suppressed("MD013", 3)
    assert not mask.is_suppressed("MD013", 4)


def test_restore_without_capture_is_noop():
    mask = build_suppression_mask([
        "<!-- markdownlint-disable MD013 -->",
        "<!-- markdownlint-restore -->",
        "x",
    ])

    assert mask.is_suppressed("MD013", 2)


def test_enable_one_rule_after_disable_all():
    mask = build_suppression_mask([
        "<!-- markdownlint-disable -->",
        "<!-- markdownlint-enable MD013 -->",
        "x",
    ])

    assert not mask.is_suppressed("MD013", 2)
    assert mask.is_suppressed("MD009", 2)


# ----------------------------------------------------------------------------
# End to end
# ----------------------------------------------------------------------------

def test_analyze_honours_disable_file(lint):
    text = "# T\n\nhello   \n"
    assert [v.rule_id for v in lint(text, "MD009")] == ["MD009"]

    text += "\n<!-- markdownlint-disable-file MD009 -->\n"
    assert lint(text, "MD009") == []


def test_analyze_disable_enable_boundaries(lint, lines_of):
    text = (
        "# T\n"
        "\n"
        "<!-- markdownlint-disable MD012 -->\n"
        "\n"
        "\n"
        "<!-- markdownlint-enable MD012 -->\n"
        "\n"
        "\n"
        "text\n"
    )

    assert lines_of(lint(text, "MD012")) == [7]
