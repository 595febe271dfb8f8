"""GFM table rules."""
from typing import Generator, Optional

from ..document import Document, Table, split_cells
from ..models import Fix, RuleConfig, Violation
from ..registry import STYLE_CONSISTENT
from .common import blank_line_violations, is_quoted

PIPE_STYLES = {
    (True, True): "leading_and_trailing",
    (True, False): "leading_only",
    (False, True): "trailing_only",
    (False, False): "no_leading_or_trailing",
}


def _row_column(doc: Document, table: Table) -> int:
    inline = doc.inline_lines.get(table.start_line)
    return inline.column if inline else 0


def _rows(doc: Document, table: Table) -> Generator[tuple[int, str, int], None, None]:
    """Yield (line, row text, column of the row) for every row of a table."""
    column = _row_column(doc, table)
    for n in table.lines:
        yield n, doc.line_text(n)[column:], column


def _edges(row: str) -> tuple[bool, bool]:
    stripped = row.strip()
    leading = stripped.startswith("|")
    trailing = (
        len(stripped) > 1 and stripped.endswith("|") and not stripped.endswith("\\|")
    )
    return leading, trailing


def _pipes(row: str) -> list[int]:
    """Columns of the cell separators, skipping escaped pipes and code spans."""
    pipes = []
    in_code = False
    i = 0
    while i < len(row):
        ch = row[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "`":
            in_code = not in_code
        elif ch == "|" and not in_code:
            pipes.append(i)
        i += 1
    return pipes


def table_pipe_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD055 - leading and trailing pipes should be used consistently."""
    style = config.get_str("style", STYLE_CONSISTENT)
    for table in doc.blocks_of(Table):
        for n, row, column in _rows(doc, table):
            actual = _edges(row)
            if style == STYLE_CONSISTENT:
                style = PIPE_STYLES[actual]
            expected = next((k for k, v in PIPE_STYLES.items() if v == style), actual)
            if actual == expected:
                continue

            first = column + len(row) - len(row.lstrip())
            last = column + len(row.rstrip())
            text = doc.line_text(n)
            message = f"Table pipe style [Expected: {style}; Actual: {PIPE_STYLES[actual]}; "

            if expected[0] != actual[0]:
                if expected[0]:
                    fix = Fix(first, first, "| ")
                    detail = "Missing leading pipe"
                else:
                    end = first + 1
                    if end < len(text) and text[end] == " ":
                        end += 1
                    fix = Fix(first, end, "")
                    detail = "Unexpected leading pipe"
                yield Violation("MD055", message + detail + "]", n, first, first + 1, fix=fix)

            if expected[1] != actual[1]:
                if expected[1]:
                    fix = Fix(last, last, " |")
                    detail = "Missing trailing pipe"
                else:
                    start = last - 1
                    if start > first and text[start - 1] == " ":
                        start -= 1
                    fix = Fix(start, last, "")
                    detail = "Unexpected trailing pipe"
                yield Violation("MD055", message + detail + "]", n, max(last - 1, 0), last, fix=fix)


def table_column_count(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD056 - every row should have as many cells as the header.

    Rows with too few cells are padded when they end with a pipe; rows
    with too many cells are only reported.
    """
    for table in doc.blocks_of(Table):
        expected = table.column_count
        for n, row, column in _rows(doc, table):
            if n <= table.delimiter_line:
                continue
            actual = len(split_cells(row))
            if actual == expected:
                continue
            end = column + len(row.rstrip())
            fix: Optional[Fix] = None
            if actual < expected:
                detail = "Too few cells, row will be expanded"
                if _edges(row)[1]:
                    fix = Fix(end, end, " |" * (expected - actual))
            else:
                detail = "Too many cells, extra data will be missing"
            yield Violation(
                "MD056",
                f"Table column count [Expected: {expected}; Actual: {actual}; {detail}]",
                n,
                column,
                end,
                fix=fix,
            )


def blanks_around_tables(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD058 - tables should be surrounded by blank lines."""
    for table in doc.blocks_of(Table):
        if is_quoted(doc, table):
            continue
        yield from blank_line_violations(
            doc, "MD058", "Tables should be surrounded by blank lines", table,
        )


def _cells_with_edges(row: str) -> list[tuple[str, bool, bool]]:
    """Cells as (raw text, has pipe on the left, has pipe on the right)."""
    stripped = row.rstrip()
    pipes = _pipes(stripped)
    bounds = [-1] + pipes + [len(stripped)]
    cells = []
    for left, right in zip(bounds, bounds[1:]):
        raw = stripped[left + 1:right]
        if left == -1 and not raw.strip():
            continue
        if right == len(stripped) and not raw.strip():
            continue
        cells.append((raw, left != -1, right != len(stripped)))
    return cells


def _is_compact(row: str) -> bool:
    for raw, left_pipe, right_pipe in _cells_with_edges(row):
        if raw == " ":
            continue
        if left_pipe and (not raw.startswith(" ") or raw.startswith("  ")):
            return False
        if right_pipe and (not raw.endswith(" ") or raw.endswith("  ")):
            return False
    return True


def _is_tight(row: str) -> bool:
    for raw, left_pipe, right_pipe in _cells_with_edges(row):
        if left_pipe and raw[:1].isspace():
            return False
        if right_pipe and raw[-1:].isspace():
            return False
    return True


def table_column_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD060 - cell padding style within a table.

    ``aligned`` needs the pipes of every row in the same columns,
    ``compact`` one space around each cell and ``tight`` none. With
    ``any`` a table passes when it is aligned, and otherwise its header row
    picks compact or tight for the remaining rows.
    """
    style = config.get_str("style", "any")
    checks = {"compact": _is_compact, "tight": _is_tight}

    for table in doc.blocks_of(Table):
        rows = list(_rows(doc, table))
        aligned = len({tuple(_pipes(row.rstrip())) for _, row, _ in rows}) == 1

        table_style = style
        if style == "any":
            if aligned:
                continue
            header = rows[0][1]
            table_style = next((name for name, check in checks.items() if check(header)), None)
            if table_style is None:
                yield Violation(
                    "MD060",
                    "Table column style [Expected: aligned, compact or tight]",
                    rows[0][0],
                    rows[0][2],
                    rows[0][2] + len(header.rstrip()),
                )
                continue

        if table_style == "aligned":
            if aligned:
                continue
            reference = _pipes(rows[0][1].rstrip())
            for n, row, column in rows[1:]:
                if _pipes(row.rstrip()) != reference:
                    yield Violation(
                        "MD060",
                        "Table column style [Expected: aligned]",
                        n,
                        column,
                        column + len(row.rstrip()),
                    )
            continue

        check = checks.get(table_style)
        if check is None:
            continue
        for n, row, column in rows:
            if not check(row):
                yield Violation(
                    "MD060",
                    f"Table column style [Expected: {table_style}]",
                    n,
                    column,
                    column + len(row.rstrip()),
                )
