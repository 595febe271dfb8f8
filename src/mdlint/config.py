"""Configuration management with environment variable overrides."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import logging
import os

import yaml

from mdlint import __version__
from mdlint.core.linter.registry import RULE_INFOS, get_rule_info
from mdlint.errors import ConfigError

logger = logging.getLogger(__name__)

OPTIONS_FILE_NAMES = (".markdownlint.yaml", ".markdownlint.yml")

# Rules the store turns off until an options file says otherwise
STORE_DEFAULTS = {
    "MD013": False,
    "MD033": False,
    "MD036": False,
    "MD041": False,
    "MD052": False,
}


def _env_flag(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Global options store for the linter."""

    # Options file the store was loaded from, if any
    options_path: Path | None = None

    # Enablement of rules not listed in the options file (None: rule defaults)
    default_enabled: bool | None = None

    # Rule ID -> enabled, from boolean entries in the options file
    enablement: dict = field(default_factory=dict)

    # Rule ID -> parameter mapping, from mapping entries in the options file
    parameters: dict = field(default_factory=dict)

    # Rule evaluation
    max_workers: int = 1

    # Per-file overrides from .editorconfig
    use_editorconfig: bool = True

    # Versioning
    version: str = __version__

    @classmethod
    def load(cls, options_path: Path | None = None) -> "Config":
        """
        Load config with environment variable overrides.

        The options file is, in order: ``options_path``, ``MDLINT_CONFIG``,
        then ``.markdownlint.yaml`` / ``.markdownlint.yml`` in the working
        directory.

        Raises:
            ConfigError: If the options file is unreadable or malformed
        """
        config = cls()

        if options_path is None:
            if val := os.environ.get("MDLINT_CONFIG"):
                options_path = Path(val).expanduser()
            else:
                options_path = next(
                    (Path(name) for name in OPTIONS_FILE_NAMES if Path(name).is_file()),
                    None,
                )
        if options_path is not None:
            config.load_options(options_path)

        if val := os.environ.get("MDLINT_MAX_WORKERS"):
            try:
                config.max_workers = max(1, int(val))
            except ValueError:
                logger.warning(f"Ignoring non-numeric MDLINT_MAX_WORKERS: {val!r}")
        if val := os.environ.get("MDLINT_USE_EDITORCONFIG"):
            config.use_editorconfig = _env_flag(val)
        if val := os.environ.get("MDLINT_DEFAULT_ENABLED"):
            config.default_enabled = _env_flag(val)

        return config

    def load_options(self, path: Path) -> None:
        """
        Read a ``.markdownlint.yaml`` style options file into the store.

        Args:
            path: Path to the YAML file

        Raises:
            ConfigError: If the file cannot be read or is not a mapping
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read options file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed options file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Options file {path} must contain a mapping")

        self.options_path = Path(path)
        self.apply_options(data)
        logger.debug(f"Loaded options from {path}")

    def apply_options(self, data: dict[str, Any]) -> None:
        """Merge an options mapping (``default``, rule keys) into the store."""
        for key, value in data.items():
            if key == "default":
                self.default_enabled = bool(value)
                continue
            info = get_rule_info(str(key))
            if info is None:
                logger.debug(f"Ignoring unknown rule in options: {key}")
                continue
            if isinstance(value, bool):
                self.enablement[info.id] = value
            elif isinstance(value, dict):
                self.enablement[info.id] = bool(value.get("enabled", True))
                self.parameters[info.id] = {k: v for k, v in value.items() if k != "enabled"}
            else:
                logger.warning(f"Ignoring options for {key}: expected a boolean or a mapping")

    def global_enablement(self) -> dict[str, bool]:
        """
        Rule ID -> enabled for every rule the store has an opinion on.

        Starts from ``STORE_DEFAULTS``. A ``default`` entry replaces them for
        every rule, and per-rule entries win over both.
        """
        enablement = dict(STORE_DEFAULTS)
        if self.default_enabled is not None:
            enablement = {info.id: self.default_enabled for info in RULE_INFOS}
        enablement.update(self.enablement)
        return enablement
