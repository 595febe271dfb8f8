"""Code block and code fence rules."""
import re
from typing import Generator

from ..document import Document, FencedCode, IndentedCode, ListItem
from ..models import Fix, RuleConfig, Violation
from ..registry import STYLE_CONSISTENT
from .common import blank_line_violations, is_quoted, line_end

DOLLAR_PROMPT_RE = re.compile(r'^(\s*)(\$\s+)')
FENCE_RUN_RE = re.compile(r'`{3,}|~{3,}')

FENCE_STYLES = {"`": "backtick", "~": "tilde"}


def _content_lines(fence: FencedCode) -> range:
    return range(fence.start_line + 1, fence.end_line if fence.closed else fence.end_line + 1)


def commands_show_output(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD014 - dollar signs before commands without showing output.

    Only reported when every non-blank line of the block is a ``$`` prompt.
    """
    for block in doc.blocks_of(FencedCode, IndentedCode):
        if isinstance(block, FencedCode):
            lines = _content_lines(block)
        else:
            lines = block.lines
        content = [n for n in lines if not doc.is_blank(n)]
        if not content:
            continue
        matches = [(n, DOLLAR_PROMPT_RE.match(doc.line_text(n))) for n in content]
        if not all(match for _, match in matches):
            continue
        for n, match in matches:
            yield Violation(
                "MD014",
                "Dollar signs used before commands without showing output",
                n,
                match.start(2),
                match.end(2),
                fix=Fix(match.start(2), match.end(2), ""),
            )


def blanks_around_fences(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD031 - fenced code blocks should be surrounded by blank lines."""
    list_items = config.get_bool("list_items", True)
    for fence in doc.blocks_of(FencedCode):
        if is_quoted(doc, fence):
            continue
        if not list_items and any(isinstance(a, ListItem) for a in doc.ancestors(fence)):
            continue
        yield from blank_line_violations(
            doc,
            "MD031",
            "Fenced code blocks should be surrounded by blank lines",
            fence,
            below=1 if fence.closed else 0,
        )


def fenced_code_language(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD040 - fenced code blocks should have a language specified.

    A missing language is fixed by tagging the fence as ``text``.
    """
    allowed = config.get_list("allowed_languages")
    language_only = config.get_bool("language_only", False)

    for fence in doc.blocks_of(FencedCode):
        text = doc.line_text(fence.start_line)
        if not fence.info:
            run = FENCE_RUN_RE.search(text)
            yield Violation(
                "MD040",
                "Fenced code blocks should have a language specified",
                fence.start_line,
                0,
                len(text),
                fix=Fix(run.end(), len(text), "text") if run else None,
            )
            continue
        if allowed and fence.language not in allowed:
            yield Violation(
                "MD040",
                f'Fenced code blocks should have a language specified '
                f'[Context: "{fence.language}" is not allowed]',
                fence.start_line,
                0,
                len(text),
            )
        elif language_only and fence.info != fence.language:
            yield Violation(
                "MD040",
                f'Fenced code blocks should have a language specified '
                f'[Context: "{fence.info}" has more than a language]',
                fence.start_line,
                0,
                len(text),
            )


def code_block_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD046 - code blocks should be consistently fenced or indented."""
    style = config.get_str("style", STYLE_CONSISTENT)
    for block in doc.blocks_of(FencedCode, IndentedCode):
        actual = "fenced" if isinstance(block, FencedCode) else "indented"
        if style == STYLE_CONSISTENT:
            style = actual
        if actual != style:
            yield Violation(
                "MD046",
                f"Code block style [Expected: {style}; Actual: {actual}]",
                block.start_line,
                0,
                line_end(doc, block.start_line),
            )


def code_fence_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD048 - code fence style.

    Both delimiter lines are reported so that a bulk fix rewrites the
    opening and the closing fence together.
    """
    style = config.get_str("style", STYLE_CONSISTENT)
    for fence in doc.blocks_of(FencedCode):
        actual = FENCE_STYLES[fence.fence_char]
        if style == STYLE_CONSISTENT:
            style = actual
        if actual == style:
            continue
        char = "`" if style == "backtick" else "~"
        delimiters = [fence.start_line] + ([fence.end_line] if fence.closed else [])
        for n in delimiters:
            text = doc.line_text(n)
            run = FENCE_RUN_RE.search(text)
            if run is None:
                continue
            yield Violation(
                "MD048",
                f"Code fence style [Expected: {style}; Actual: {actual}]",
                n,
                run.start(),
                run.end(),
                fix=Fix(run.start(), run.end(), char * len(run.group())),
            )
