"""Lint tool implementations."""
import asyncio
import logging
from pathlib import Path

from mdlint.config import Config
from mdlint.core.linter import (
    analyze,
    fix_content,
    lint_file,
    parse_suppression_directive,
)
from mdlint.core.linter.registry import all_rules
from mdlint.core.linter.registry import get_rule_info as lookup_rule
from mdlint.core.linter.rules import FIXABLE_RULES
from mdlint.overrides import load_overrides

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdx"}


def register(mcp, config: Config):
    """Register lint tools with MCP server."""

    @mcp.tool()
    async def lint_markdown(
        path: str,
        fix: bool = False,
        rules: list[str] | None = None
    ) -> dict:
        """
        Lint a Markdown file with markdownlint-compatible rules.

        Per-file overrides come from .editorconfig (md_<rule> = value[:severity])
        and inline <!-- markdownlint-... --> comments are honoured.

        Args:
            path: Path to the Markdown file
            fix: Apply every compatible fix and write the file back (default: False)
            rules: Rule IDs or names to run (default: all enabled rules)

        Returns:
            Dictionary with:
            - path (str): Path that was linted
            - total_issues (int): Total violations found
            - fixable (int): Violations carrying a fix
            - errors / warnings / suggestions (int): Counts by severity
            - violations (list): Individual violations, 1-based line and column
            - fixed (list): Rules whose fixes were applied (if fix=True)

        Example:
            {
                "path": "docs/README.md",
                "fix": true
            }
        """
        file_path = Path(path).expanduser()

        if not file_path.exists():
            return {"error": f"File not found: {file_path}"}

        if file_path.suffix.lower() not in MARKDOWN_SUFFIXES:
            return {"error": f"Expected a Markdown file, got: {file_path.suffix}"}

        logger.info(f"Linting {file_path} (fix={fix}, rules={rules})")

        try:
            overrides = load_overrides(file_path) if config.use_editorconfig else {}
            report = await lint_file(
                file_path,
                fix=fix,
                rules=rules,
                overrides=overrides,
                global_enablement=config.global_enablement(),
                parameters=config.parameters,
                max_workers=config.max_workers,
            )

            logger.info(
                f"Lint complete: {report.total_issues} issues "
                f"({report.fixable} fixable, {report.errors} errors)"
            )

            if fix and report.fixed:
                logger.info(f"Fixed: {', '.join(report.fixed)}")

            return report.to_dict()

        except Exception as e:
            logger.error(f"Lint failed: {e}", exc_info=True)
            return {"error": str(e)}

    @mcp.tool()
    async def lint_text(
        text: str,
        overrides: dict[str, str] | None = None
    ) -> dict:
        """
        Lint Markdown text without touching the file system.

        Args:
            text: Markdown source
            overrides: Optional md_<rule> entries, e.g. {"md_line_length": "120:error"}

        Returns:
            Dictionary with:
            - total_issues (int): Total violations found
            - violations (list): Individual violations, 1-based line and column
        """
        try:
            violations = await asyncio.to_thread(
                analyze,
                text,
                overrides,
                config.global_enablement(),
                parameters=config.parameters,
                max_workers=config.max_workers,
            )
            return {
                "total_issues": len(violations),
                "violations": [v.to_dict() for v in violations],
            }
        except Exception as e:
            logger.error(f"Lint failed: {e}", exc_info=True)
            return {"error": str(e)}

    @mcp.tool()
    async def fix_text(
        text: str,
        rules: list[str] | None = None
    ) -> dict:
        """
        Apply every compatible fix to Markdown text in one pass.

        Overlapping fixes keep the first in document order; run again to pick
        up the rest.

        Args:
            text: Markdown source
            rules: Only apply fixes from these rules (default: all)

        Returns:
            Dictionary with:
            - text (str): The fixed text
            - fixed (list): Rules whose fixes were applied
            - remaining (int): Violations left after the pass
        """
        try:
            violations = await asyncio.to_thread(
                analyze,
                text,
                None,
                config.global_enablement(),
                parameters=config.parameters,
                max_workers=config.max_workers,
            )
            fixed_text, fixed_rules = fix_content(text, violations, rules)
            remaining = await asyncio.to_thread(
                analyze,
                fixed_text,
                None,
                config.global_enablement(),
                parameters=config.parameters,
                max_workers=config.max_workers,
            )
            return {
                "text": fixed_text,
                "fixed": fixed_rules,
                "remaining": len(remaining),
            }
        except Exception as e:
            logger.error(f"Fix failed: {e}", exc_info=True)
            return {"error": str(e)}

    @mcp.tool()
    async def get_lint_rules() -> dict:
        """
        Get list of available lint rules.

        Returns:
            Dictionary with a "rules" list of {id, name, aliases, description,
            documentation_url, default_enabled, default_severity, fixable}.
        """
        return {
            "rules": [
                {**info.to_dict(), "fixable": info.id in FIXABLE_RULES}
                for info in all_rules()
            ]
        }

    @mcp.tool()
    async def get_rule_info(id_or_name: str) -> dict:
        """
        Look up one rule by ID ("MD013"), name ("line-length") or alias ("line_length").

        Args:
            id_or_name: Rule identifier

        Returns:
            The rule's metadata, or an error if no rule matches
        """
        info = lookup_rule(id_or_name)
        if info is None:
            return {"error": f"Unknown rule: {id_or_name}"}
        return {**info.to_dict(), "fixable": info.id in FIXABLE_RULES}

    @mcp.tool()
    async def parse_suppression(line_text: str) -> dict:
        """
        Recognize a <!-- markdownlint-... --> suppression directive.

        Args:
            line_text: One line of Markdown

        Returns:
            {"directive": {kind, rule_ids}} or {"directive": null}; rule_ids
            is null when the directive applies to all rules
        """
        directive = parse_suppression_directive(line_text)
        return {"directive": directive.to_dict() if directive else None}
