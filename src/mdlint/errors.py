"""Exceptions raised by the outer layers (config loading, CLI, tools)."""


class MdlintError(Exception):
    """Base class for mdlint errors."""


class ConfigError(MdlintError):
    """The options file could not be read or is malformed."""
