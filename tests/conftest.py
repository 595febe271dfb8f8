"""Shared fixtures for linter tests."""
import pytest

from mdlint.core.linter import analyze, apply_edits, compose_fix_all
from mdlint.core.linter.registry import RULE_INFOS


def only(*rule_ids):
    """Enablement map that turns on exactly the given rules."""
    return {info.id: info.id in rule_ids for info in RULE_INFOS}


@pytest.fixture
def lint():
    """Lint text, optionally restricted to some rules."""
    def run(text, *rule_ids, overrides=None, parameters=None):
        enablement = only(*rule_ids) if rule_ids else None
        return analyze(text, overrides, enablement, parameters=parameters)
    return run


@pytest.fixture
def fix(lint):
    """Apply every compatible fix from the given rules in one pass."""
    def run(text, *rule_ids, overrides=None, parameters=None):
        violations = lint(text, *rule_ids, overrides=overrides, parameters=parameters)
        return apply_edits(text, compose_fix_all(violations))
    return run


@pytest.fixture
def lines_of():
    """Line numbers of violations, optionally for one rule."""
    def run(violations, rule_id=None):
        return [v.line for v in violations if rule_id is None or v.rule_id == rule_id]
    return run
