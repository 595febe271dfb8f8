"""mdlint - markdownlint-compatible Markdown linter."""
__version__ = "1.0.0"
