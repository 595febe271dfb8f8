"""CLI for mdlint.

Provides direct terminal access to linting without MCP.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from mdlint import __version__
from mdlint.config import Config
from mdlint.core.linter import lint_file, parse_suppression_directive
from mdlint.core.linter.models import LintReport, Severity
from mdlint.core.linter.registry import all_rules, get_rule_info
from mdlint.core.linter.rules import FIXABLE_RULES
from mdlint.errors import ConfigError
from mdlint.overrides import load_overrides

MARKDOWN_SUFFIXES = (".md", ".markdown", ".mdx")

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.SUGGESTION: "cyan",
    Severity.SILENT: "dim",
}

console = Console()


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="mdlint",
        description="Lint and fix Markdown with markdownlint-compatible rules"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log rule evaluation details to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # lint command
    lint = subparsers.add_parser("lint", help="Lint Markdown files")
    lint.add_argument(
        "paths", type=Path, nargs="+",
        help="Markdown files or directories to search for them"
    )
    lint.add_argument(
        "--fix", action="store_true",
        help="Apply every compatible fix and write files back"
    )
    lint.add_argument(
        "-r", "--rule", action="append", dest="rules",
        help="Only run this rule (ID or name, repeatable)"
    )
    lint.add_argument(
        "-c", "--config", type=Path,
        help="Options file (default: MDLINT_CONFIG or .markdownlint.yaml)"
    )
    lint.add_argument(
        "--no-editorconfig", action="store_true",
        help="Ignore md_* entries in .editorconfig files"
    )
    lint.add_argument(
        "--format", choices=["text", "json"], default="text",
        help="Output format (default: text)"
    )

    # rules command
    subparsers.add_parser("rules", help="List available rules")

    # rule command
    r = subparsers.add_parser("rule", help="Show one rule")
    r.add_argument("id_or_name", help="Rule ID, name or alias (e.g. MD013, line-length)")

    # directive command
    d = subparsers.add_parser(
        "directive", help="Show how a line parses as a suppression directive"
    )
    d.add_argument("line", help="Line text, e.g. '<!-- markdownlint-disable MD013 -->'")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    if args.command == "lint":
        sys.exit(asyncio.run(lint_command(args)))
    elif args.command == "rules":
        rules_command()
    elif args.command == "rule":
        sys.exit(rule_command(args))
    elif args.command == "directive":
        directive_command(args)


def collect_files(paths: list[Path]) -> list[Path]:
    """Expand directories into the Markdown files below them."""
    files = []
    for path in paths:
        path = path.expanduser()
        if path.is_dir():
            files.extend(
                sorted(p for p in path.rglob("*") if p.suffix.lower() in MARKDOWN_SUFFIXES)
            )
        else:
            files.append(path)
    return files


async def lint_command(args) -> int:
    """Execute the lint command. Returns the process exit code."""
    try:
        config = Config.load(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.no_editorconfig:
        config.use_editorconfig = False

    files = collect_files(args.paths)
    if not files:
        print("Error: No Markdown files found", file=sys.stderr)
        return 2

    reports = []
    failed = False
    for path in files:
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            failed = True
            continue

        options = dict(
            rules=args.rules,
            overrides=load_overrides(path) if config.use_editorconfig else {},
            global_enablement=config.global_enablement(),
            parameters=config.parameters,
            max_workers=config.max_workers,
        )
        try:
            report = await lint_file(path, fix=args.fix, **options)
            if report.fixed:
                # Report what is left after the fixes were written
                fixed = report.fixed
                report = await lint_file(path, **options)
                report.fixed = fixed
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: Cannot lint {path}: {e}", file=sys.stderr)
            failed = True
            continue

        reports.append(report)
        if report.errors or report.warnings:
            failed = True

    if args.format == "json":
        print(json.dumps([report.to_dict() for report in reports], indent=2))
    else:
        for report in reports:
            print_report(report)
        print_totals(reports)

    return 1 if failed else 0


def print_report(report: LintReport) -> None:
    """Print one file's violations as path:line:column lines."""
    if report.fixed:
        console.print(f"[green]Fixed[/green] {report.path}: {', '.join(report.fixed)}")

    for v in report.violations:
        line = Text(f"{report.path}:{v.line + 1}:{v.column_start + 1} ")
        line.append(v.rule_id, style=SEVERITY_STYLES.get(v.severity, ""))
        line.append(f" {v.message}")
        if v.fixable:
            line.append(" (fixable)", style="dim")
        console.print(line, highlight=False)


def print_totals(reports: list[LintReport]) -> None:
    total = sum(r.total_issues for r in reports)
    fixable = sum(r.fixable for r in reports)
    if total == 0:
        console.print(f"[green]{len(reports)} file(s) clean[/green]")
        return
    console.print(
        f"\n{total} issue(s) in {sum(1 for r in reports if r.total_issues)} "
        f"of {len(reports)} file(s), {fixable} fixable"
    )


def rules_command():
    """Execute the rules command."""
    table = Table(title=f"mdlint v{__version__} rules")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Default")
    table.add_column("Fix")
    table.add_column("Description")

    for info in all_rules():
        table.add_row(
            info.id,
            info.name,
            "on" if info.enabled_by_default else "off",
            "yes" if info.id in FIXABLE_RULES else "",
            info.description,
        )

    console.print(table)


def rule_command(args) -> int:
    """Execute the rule command."""
    info = get_rule_info(args.id_or_name)
    if info is None:
        print(f"Error: Unknown rule: {args.id_or_name}", file=sys.stderr)
        return 1

    console.print(f"[bold]{info.id}[/bold] {info.name}")
    console.print(f"  {info.description}")
    console.print(f"  Aliases: {', '.join(info.aliases)}")
    console.print(f"  Enabled by default: {info.enabled_by_default}")
    console.print(f"  Default severity: {info.default_severity.value}")
    console.print(f"  Fixable: {info.id in FIXABLE_RULES}")
    if info.parameter:
        choices = f" ({', '.join(info.choices)})" if info.choices else ""
        console.print(f"  Override value: {info.parameter}{choices}")
    console.print(f"  Docs: {info.documentation_url}")
    return 0


def directive_command(args):
    """Execute the directive command."""
    directive = parse_suppression_directive(args.line)
    if directive is None:
        console.print("Not a suppression directive")
        return

    console.print(f"Kind: {directive.kind.value}")
    if directive.rule_ids is None:
        console.print("Rules: all")
    else:
        console.print(f"Rules: {', '.join(sorted(directive.rule_ids)) or 'none recognized'}")


if __name__ == "__main__":
    main()
