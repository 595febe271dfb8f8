"""Tests for rule configuration resolution."""
from mdlint.core.linter.models import Severity
from mdlint.core.linter.registry import all_rules, get_rule_info
from mdlint.core.linter.resolver import parse_override_value, resolve_configs


# ----------------------------------------------------------------------------
# Override values
# ----------------------------------------------------------------------------

def test_parse_override_value_words():
    assert parse_override_value("false").enabled is False
    assert parse_override_value("none").enabled is False
    assert parse_override_value("true").enabled is True


def test_parse_override_value_severity():
    override = parse_override_value("error")

    assert override.enabled is True
    assert override.severity == Severity.ERROR
    assert override.value is None


def test_parse_override_value_with_severity_suffix():
    override = parse_override_value("atx:warning")

    assert override.value == "atx"
    assert override.severity == Severity.WARNING

    override = parse_override_value("120:error")
    assert override.value == "120"
    assert override.severity == Severity.ERROR


def test_parse_override_value_plain():
    assert parse_override_value("120").value == "120"
    assert parse_override_value("").value is None


# ----------------------------------------------------------------------------
# Layering
# ----------------------------------------------------------------------------

def test_defaults():
    configs = resolve_configs()

    assert len(configs) == len(all_rules())
    assert configs["MD013"].active
    assert configs["MD013"].severity == Severity.WARNING
    assert not configs["MD043"].enabled
    assert not configs["MD002"].enabled


def test_file_override_sets_parameter_and_severity():
    config = resolve_configs({"md_line_length": "120:error"})["MD013"]

    assert config.enabled
    assert config.severity == Severity.ERROR
    assert config.parameters == {"line_length": 120}


def test_file_override_disables():
    configs = resolve_configs({"md_no_trailing_spaces": "false", "md_MD010": "none"})

    assert not configs["MD009"].active
    assert not configs["MD010"].active


def test_severity_none_makes_rule_inactive():
    config = resolve_configs({"md_no_trailing_spaces": "2:none"})["MD009"]

    assert config.enabled
    assert config.severity == Severity.NONE
    assert not config.active


def test_rule_id_key_wins_over_name():
    overrides = {"md_line_length": "100", "md_MD013": "120"}
    assert resolve_configs(overrides)["MD013"].parameters["line_length"] == 120

    overrides = {"md_MD013": "120", "md_line_length": "100"}
    assert resolve_configs(overrides)["MD013"].parameters["line_length"] == 120


def test_invalid_value_keeps_default():
    config = resolve_configs({"md_heading_style": "bogus"})["MD003"]

    assert config.enabled
    assert "style" not in config.parameters


def test_global_enablement_and_override_value():
    assert not resolve_configs(global_enablement={"MD013": False})["MD013"].enabled

    # A value in the file override turns the rule back on
    config = resolve_configs({"md_line_length": "100"}, {"line-length": False})["MD013"]
    assert config.enabled


def test_global_parameters():
    parameters = {"MD013": {"line_length": 100, "severity": "error"}}
    config = resolve_configs(parameters=parameters)["MD013"]

    assert config.severity == Severity.ERROR
    assert config.parameters == {"line_length": 100}


def test_indent_size_fallback():
    configs = resolve_configs({"indent_size": "4"})

    assert configs["MD007"].indent_size == 4


def test_unknown_keys_ignored():
    configs = resolve_configs({"md_bogus": "1", "charset": "utf-8", "md_root_path": "x"})

    assert configs == resolve_configs()


# ----------------------------------------------------------------------------
# Registry
# ----------------------------------------------------------------------------

def test_get_rule_info_lookups():
    assert get_rule_info("MD013").name == "line-length"
    assert get_rule_info("md013").id == "MD013"
    assert get_rule_info("line-length").id == "MD013"
    assert get_rule_info("no_trailing_spaces").id == "MD009"
    assert get_rule_info("bogus") is None
    assert get_rule_info("") is None


def test_rule_catalogue():
    ids = [info.id for info in all_rules()]

    assert len(ids) == 55
    assert len(set(ids)) == 55
    assert "MD008" not in ids
    assert get_rule_info("MD001").documentation_url.endswith("/md001.md")
