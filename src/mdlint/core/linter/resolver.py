"""Configuration resolver - merges defaults, global options and file overrides."""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .models import RuleConfig, RuleInfo, Severity
from .registry import RULE_INFOS, get_rule_info

logger = logging.getLogger(__name__)

OVERRIDE_PREFIX = "md_"
INDENT_SIZE_KEY = "indent_size"
RESERVED_KEYS = {"root_path"}

DISABLE_WORDS = {"false", "off", "none", "disable", "disabled"}
ENABLE_WORDS = {"true", "on", "enable", "enabled"}

INT_PARAMETERS = {
    "level", "indent", "br_spaces", "spaces_per_tab", "maximum", "line_length",
    "lines_above", "ul_single",
}


@dataclass(frozen=True)
class RuleOverride:
    """A parsed ``md_<rule> = value[:severity]`` entry."""
    enabled: Optional[bool] = None
    severity: Optional[Severity] = None
    value: Optional[str] = None


def parse_override_value(raw: str) -> RuleOverride:
    """
    Parse the value half of a file override.

    Examples:
        "false"        -> disabled
        "error"        -> enabled, severity error
        "atx:warning"  -> value "atx", severity warning
        "120"          -> value "120"
    """
    text = (raw or "").strip()
    lowered = text.lower()

    if lowered in DISABLE_WORDS:
        return RuleOverride(enabled=False)
    if lowered in ENABLE_WORDS:
        return RuleOverride(enabled=True)

    severity = Severity.parse(lowered)
    if severity is not None:
        return RuleOverride(enabled=True, severity=severity)

    if ":" in text:
        head, _, tail = text.rpartition(":")
        severity = Severity.parse(tail)
        if severity is not None:
            inner = parse_override_value(head)
            if inner.severity is None:
                return RuleOverride(inner.enabled, severity, inner.value)
            return inner

    return RuleOverride(value=text) if text else RuleOverride()


def coerce_parameter(info: RuleInfo, token: Any) -> Optional[Any]:
    """Validate a primary parameter token for a rule; None if it is not valid."""
    if info.parameter is None:
        return None
    if info.parameter in INT_PARAMETERS:
        try:
            return int(str(token).strip())
        except ValueError:
            return None
    if info.choices:
        lowered = str(token).strip().lower()
        return lowered if lowered in info.choices else None
    return token


def _key_rank(key: str, info: RuleInfo) -> int:
    """Lookup priority of an override key: ID, then name, then alias."""
    if key.upper() == info.id:
        return 0
    if key.lower() == info.name:
        return 1
    return 2


def parse_overrides(
    overrides: Mapping[str, str],
) -> tuple[dict[str, RuleOverride], Optional[int]]:
    """
    Turn a raw override mapping into per-rule overrides.

    Args:
        overrides: Ordered ``md_<rule>`` entries (plus ``indent_size``)

    Returns:
        Tuple of (overrides by rule ID, indent_size fallback)
    """
    parsed: dict[str, tuple[int, RuleOverride]] = {}
    indent_size = None

    for key, value in overrides.items():
        key = key.strip()
        if key.lower() == INDENT_SIZE_KEY:
            try:
                indent_size = int(str(value).strip())
            except ValueError:
                logger.debug(f"Ignoring non-numeric indent_size: {value!r}")
            continue
        if not key.lower().startswith(OVERRIDE_PREFIX):
            continue

        rule_key = key[len(OVERRIDE_PREFIX):]
        if rule_key.lower() in RESERVED_KEYS:
            continue
        info = get_rule_info(rule_key)
        if info is None:
            logger.debug(f"Ignoring override for unknown rule: {key}")
            continue

        rank = _key_rank(rule_key, info)
        current = parsed.get(info.id)
        if current is None or rank <= current[0]:
            parsed[info.id] = (rank, parse_override_value(str(value)))

    return {rule_id: override for rule_id, (_, override) in parsed.items()}, indent_size


def _by_rule_id(mapping: Mapping[str, Any], source: str) -> dict[str, Any]:
    resolved = {}
    for key, value in mapping.items():
        info = get_rule_info(key)
        if info is None:
            logger.debug(f"Ignoring unknown rule in {source}: {key}")
            continue
        resolved[info.id] = value
    return resolved


def resolve_configs(
    overrides: Optional[Mapping[str, str]] = None,
    global_enablement: Optional[Mapping[str, bool]] = None,
    parameters: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> dict[str, RuleConfig]:
    """
    Resolve the effective configuration of every rule for one file.

    Layers, lowest first: compiled defaults, global options (enablement and
    parameters), then per-file overrides. Invalid values fall back to the
    lower layer and never fail the resolution.

    Args:
        overrides: File override entries, e.g. {"md_line_length": "120:error"}
        global_enablement: Rule key -> enabled from the options store
        parameters: Rule key -> parameter mapping from the options store

    Returns:
        Dict mapping rule ID to its RuleConfig
    """
    enablement = _by_rule_id(global_enablement or {}, "global enablement")
    rule_parameters = _by_rule_id(parameters or {}, "rule parameters")
    file_overrides, indent_size = parse_overrides(overrides or {})

    configs: dict[str, RuleConfig] = {}
    for info in RULE_INFOS:
        enabled = bool(enablement.get(info.id, info.enabled_by_default))
        severity = info.default_severity
        params: dict[str, Any] = {}

        for name, value in dict(rule_parameters.get(info.id) or {}).items():
            if name == "severity":
                parsed = Severity.parse(str(value))
                if parsed is None:
                    logger.debug(f"Ignoring invalid severity for {info.id}: {value!r}")
                else:
                    severity = parsed
            elif name == "enabled":
                enabled = bool(value)
            else:
                params[name] = value

        override = file_overrides.get(info.id)
        if override is not None:
            if override.enabled is not None:
                enabled = override.enabled
            severity = override.severity or Severity.WARNING
            if override.value is not None:
                coerced = coerce_parameter(info, override.value)
                if coerced is None:
                    logger.debug(
                        f"Invalid value {override.value!r} for {info.id}, keeping default"
                    )
                else:
                    params[info.parameter] = coerced
                enabled = True

        configs[info.id] = RuleConfig(enabled, severity, params, indent_size)

    return configs
