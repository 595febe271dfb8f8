"""Per-file overrides discovered from .editorconfig files."""
import logging
from pathlib import Path

from editorconfig import EditorConfigError, get_properties

logger = logging.getLogger(__name__)

OVERRIDE_PREFIX = "md_"
INDENT_SIZE_KEY = "indent_size"


def load_overrides(path: Path) -> dict[str, str]:
    """
    Collect the override entries that apply to a file.

    EditorConfig sections are resolved from the nearest ``.editorconfig``
    up to the one marked ``root = true``, later sections winning.

    Args:
        path: The Markdown file being linted

    Returns:
        Ordered mapping of ``md_*`` keys (plus ``indent_size``) to raw values,
        empty if the configuration cannot be parsed
    """
    try:
        properties = get_properties(str(Path(path).resolve()))
    except EditorConfigError as e:
        logger.warning(f"Ignoring .editorconfig for {path}: {e}")
        return {}

    overrides = {
        key: value
        for key, value in properties.items()
        if key.startswith(OVERRIDE_PREFIX) or key == INDENT_SIZE_KEY
    }
    if overrides:
        logger.debug(f"{len(overrides)} overrides for {path}")
    return overrides
