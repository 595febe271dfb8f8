"""Tests for fix computation, composition and application."""
import pytest

from mdlint.core.linter import (
    Edit,
    Fix,
    Violation,
    analyze,
    apply_edits,
    compose_fix_all,
    compute_fix,
)


def make(rule_id, line, start, end, replacement, line_delta=0):
    """Helper to create a violation carrying a fix."""
    return Violation(
        rule_id, "message", line, start, end,
        fix=Fix(start, end, replacement, line_delta),
    )


# ----------------------------------------------------------------------------
# compute_fix
# ----------------------------------------------------------------------------

def test_compute_fix_same_line():
    assert compute_fix(make("MD009", 2, 5, 8, "")) == Edit(2, 5, 8, "")


def test_compute_fix_line_delta():
    violation = make("MD022", 0, 0, 0, "\n", line_delta=1)

    assert compute_fix(violation) == Edit(1, 0, 0, "\n")


def test_compute_fix_rejects_bad_payloads():
    assert compute_fix(Violation("MD013", "m", 0, 0, 1)) is None
    assert compute_fix(make("MD022", 0, 0, 0, "\n", line_delta=2)) is None
    assert compute_fix(make("MD022", 0, 0, 0, "\n", line_delta=-1)) is None
    assert compute_fix(make("MD009", 0, 5, 3, "")) is None


# ----------------------------------------------------------------------------
# compose_fix_all
# ----------------------------------------------------------------------------

def test_compose_drops_overlapping_edits():
    edits = compose_fix_all([make("MD001", 0, 0, 5, "x"), make("MD002", 0, 3, 8, "y")])

    assert list(edits) == [Edit(0, 0, 5, "x")]
    assert edits.dropped == (Edit(0, 3, 8, "y"),)
    assert edits.rules == {"MD001"}


def test_compose_keeps_adjacent_edits():
    edits = compose_fix_all([make("MD001", 0, 3, 5, "b"), make("MD002", 0, 0, 3, "a")])

    assert list(edits) == [Edit(0, 0, 3, "a"), Edit(0, 3, 5, "b")]


def test_compose_collapses_identical_edits():
    edits = compose_fix_all([
        make("MD022", 0, 0, 0, "\n", line_delta=1),
        make("MD032", 1, 0, 0, "\n"),
    ])

    assert list(edits) == [Edit(1, 0, 0, "\n")]
    assert edits.dropped == ()
    assert edits.rules == {"MD022", "MD032"}


def test_compose_conflicting_insertions():
    """Two different insertions at one point: the first in input order wins."""
    edits = compose_fix_all([make("MD001", 0, 2, 2, "a"), make("MD002", 0, 2, 2, "b")])

    assert list(edits) == [Edit(0, 2, 2, "a")]
    assert len(edits.dropped) == 1


def test_compose_filters_rules():
    violations = [make("MD009", 0, 5, 8, ""), make("MD010", 1, 0, 1, " ")]
    edits = compose_fix_all(violations, ["MD010"])

    assert list(edits) == [Edit(1, 0, 1, " ")]


# ----------------------------------------------------------------------------
# apply_edits
# ----------------------------------------------------------------------------

def test_apply_edits_right_to_left():
    text = "abcdef\n"
    edits = [Edit(0, 0, 1, "X"), Edit(0, 3, 4, "YY")]

    assert apply_edits(text, edits) == "XbcYYef\n"


def test_apply_edit_past_line_end_removes_newline():
    assert apply_edits("a\n\nb\n", [Edit(1, 0, 1, "")]) == "a\nb\n"


def test_apply_edits_keeps_crlf():
    assert apply_edits("a  \r\nb\r\n", [Edit(0, 1, 3, "")]) == "a\r\nb\r\n"
    assert apply_edits("# A\r\ntext\r\n", [Edit(1, 0, 0, "\n")]) == "# A\r\n\r\ntext\r\n"


def test_apply_edits_keeps_mixed_terminators():
    text = "a  \r\nb\nc  \r\n"

    assert apply_edits(text, [Edit(0, 1, 3, "")]) == "a\r\nb\nc  \r\n"
    assert apply_edits(text, [Edit(1, 1, 1, "!")]) == "a  \r\nb!\nc  \r\n"


def test_apply_edits_removes_whole_crlf_line():
    assert apply_edits("a\r\n\r\n\r\nb\r\n", [Edit(2, 0, 1, "")]) == "a\r\n\r\nb\r\n"


def test_apply_no_edits_returns_text():
    assert apply_edits("unchanged", []) == "unchanged"


# ----------------------------------------------------------------------------
# Fix-all over real documents
# ----------------------------------------------------------------------------

FIXABLE_DOCUMENTS = [
    ("# Title\n\nhello   \n", "# Title\n\nhello\n"),
    ("#Title\n\ntext\n", "# Title\n\ntext\n"),
    ("# T\n\n\n\na\tb\n", "# T\n\na b\n"),
    ("# T\n## U\ntext\n", "# T\n\n## U\n\ntext\n"),
    ("# T\n\nSee https://example.com\n", "# T\n\nSee <https://example.com>\n"),
    ("# T\n\n```\ncode\n```\n", "# T\n\n```text\ncode\n```\n"),
    ("# T\n\ntext", "# T\n\ntext\n"),
]


@pytest.mark.parametrize("text,expected", FIXABLE_DOCUMENTS)
def test_fix_all_cleans_document(text, expected):
    """Fix-all reaches a clean document and introduces nothing new."""
    violations = analyze(text)
    assert violations

    fixed = apply_edits(text, compose_fix_all(violations))

    assert fixed == expected
    assert analyze(fixed) == []


def test_fix_all_on_clean_document_is_noop():
    text = "# Title\n\nSome text.\n"

    edits = compose_fix_all(analyze(text))

    assert len(edits) == 0
    assert apply_edits(text, edits) == text


MIXED_DOCUMENTS = [
    "# Title\n## Section\nSome text   \n\n* one\n* two\n\n```\ncode\n```\n\n"
    "| a | b |\n|---|---|\n| 1 | 2 |\n\nSee https://example.com and `code`.\n",
    "#Intro\nText with *emphasis* and ** spaced **.\n- a\n   - b\n- c\n> quote   \n",
    "# T\n\n1. one\n3. three\n\n| a | b |\n|---|---|\n| 1 |\nAfter table\n",
    "# T\n\n#A\ntext\n#B\nmore\n## U\nbody\n",
    "# T\n\n  - c\n- a\n",
]


def _counts(violations):
    counts = {}
    for v in violations:
        counts[v.rule_id] = counts.get(v.rule_id, 0) + 1
    return counts


@pytest.mark.parametrize("text", MIXED_DOCUMENTS)
def test_fix_all_never_adds_violations(text):
    """No rule whose fixes were applied reports more violations afterwards."""
    violations = analyze(text)
    edits = compose_fix_all(violations)
    assert edits.rules

    before = _counts(violations)
    after = _counts(analyze(apply_edits(text, edits)))

    for rule_id in edits.rules:
        assert after.get(rule_id, 0) <= before[rule_id], rule_id
