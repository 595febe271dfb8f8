"""Tests for the lint engine."""
import logging

import pytest

from mdlint.core.linter import Severity, analyze, engine, get_available_rules
from mdlint.core.linter.registry import RULE_INFOS
from mdlint.core.linter.rules import FIXABLE_RULES, RULES

SAMPLE = """#Title
Intro paragraph with trailing spaces
and a hard\ttab.



* item one
- item two
   * nested badly
1. first
3. third

## Section ##
```
code without language
```
Visit https://example.com or [click here](https://example.com).
[ spaced ](#nowhere) and **bold heading?**

| a | b
|---|---|
| 1 |
> quote

> another quote
Some text with <b>html</b> and ** spaced ** emphasis"""


def test_empty_text():
    assert analyze("") == []


def test_all_rules_disabled():
    enablement = {info.id: False for info in RULE_INFOS}

    assert analyze(SAMPLE, global_enablement=enablement) == []


def test_registry_covers_every_rule():
    assert len(RULES) == 55
    assert set(RULES) == {info.id for info in RULE_INFOS}
    assert FIXABLE_RULES <= set(RULES)
    assert len(get_available_rules()) == 55


def test_default_off_rules():
    defaults_off = {info.id for info in RULE_INFOS if not info.enabled_by_default}

    assert defaults_off == {"MD002", "MD006", "MD043", "MD044"}


def test_violations_stay_in_bounds():
    lines = SAMPLE.split("\n")
    violations = analyze(SAMPLE)

    assert violations
    for v in violations:
        assert 0 <= v.line < len(lines), v
        assert 0 <= v.column_start <= v.column_end <= len(lines[v.line]) + 1, v


def test_violations_are_sorted():
    violations = analyze(SAMPLE)
    keys = [(v.line, v.column_start, v.rule_id) for v in violations]

    assert keys == sorted(keys)


def test_parallel_matches_serial():
    assert analyze(SAMPLE, max_workers=4) == analyze(SAMPLE)


def test_newline_conventions_agree():
    crlf = SAMPLE.replace("\n", "\r\n")

    assert analyze(crlf) == analyze(SAMPLE)


# ----------------------------------------------------------------------------
# Severity and overrides
# ----------------------------------------------------------------------------

@pytest.mark.parametrize("value", ["none", "false", "2:none"])
def test_override_silences_rule(value):
    text = "# T\n\nhello   \n"

    assert analyze(text, {"md_no_trailing_spaces": value}) == []


def test_override_severity_applies():
    text = "# T\n\nhello   \n"
    violations = analyze(text, {"md_no_trailing_spaces": "error"})

    assert [v.rule_id for v in violations] == ["MD009"]
    assert violations[0].severity == Severity.ERROR


def test_default_severity_is_warning():
    violations = analyze("# T\n\nhello   \n")

    assert {v.severity for v in violations} == {Severity.WARNING}


def test_override_enables_default_off_rule():
    text = "# Title\n\nUse javascript here.\n"

    assert analyze(text) == []
    violations = analyze(text, {"md_proper_names": "JavaScript"})
    assert [v.rule_id for v in violations] == ["MD044"]


# ----------------------------------------------------------------------------
# Isolation
# ----------------------------------------------------------------------------

def test_failing_rule_is_isolated(monkeypatch, caplog):
    def boom(doc, config):
        raise RuntimeError("kaboom")
        yield

    monkeypatch.setitem(RULES, "MD009", boom)

    with caplog.at_level(logging.ERROR):
        violations = analyze("# T\n\ntext   \nlast")

    assert [v.rule_id for v in violations] == ["MD047"]
    assert "Rule MD009 failed" in caplog.text


def test_suppressions_are_applied():
    text = "# T\n\n<!-- markdownlint-disable-next-line MD009 -->\nhello   \n"

    assert analyze(text) == []


@pytest.mark.parametrize("text", ["- " * 700 + "x\n", ">" * 1200 + " x\n"])
def test_deep_nesting_still_analyzes(text):
    violations = analyze(text)

    assert isinstance(violations, list)
    for v in violations:
        assert v.line == 0


def test_document_failure_degrades(monkeypatch, caplog):
    def broken(text):
        raise RuntimeError("unparseable")

    monkeypatch.setattr(engine, "build_document", broken)

    with caplog.at_level(logging.ERROR):
        assert analyze("# T\n\ntext   \n") == []

    assert "Document model failed" in caplog.text
