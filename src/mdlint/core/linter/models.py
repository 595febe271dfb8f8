"""Data models for the linter."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(Enum):
    """Severity levels for violations, highest first."""
    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"
    SILENT = "silent"
    NONE = "none"

    @classmethod
    def parse(cls, text: str) -> Optional["Severity"]:
        """Parse a severity word, returning None if it is not one."""
        return _SEVERITY_WORDS.get(text.strip().lower())


_SEVERITY_WORDS = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "suggestion": Severity.SUGGESTION,
    "info": Severity.SUGGESTION,
    "information": Severity.SUGGESTION,
    "hint": Severity.SUGGESTION,
    "silent": Severity.SILENT,
    "refactoring": Severity.SILENT,
    "none": Severity.NONE,
}


@dataclass(frozen=True)
class Fix:
    """
    Fix payload attached to a violation.

    Columns address the line at ``violation.line + line_delta``. A
    ``column_end`` one past the end of the line also removes its line
    terminator.
    """
    column_start: int
    column_end: int
    replacement: str
    line_delta: int = 0


@dataclass(frozen=True)
class Edit:
    """A single text substitution on one line."""
    line: int
    column_start: int
    column_end: int
    replacement: str

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "column_start": self.column_start,
            "column_end": self.column_end,
            "replacement": self.replacement,
        }


@dataclass(frozen=True)
class EditSet:
    """Edits composed for a bulk fix, plus the ones dropped on overlap."""
    edits: tuple[Edit, ...] = ()
    dropped: tuple[Edit, ...] = ()
    rules: frozenset[str] = frozenset()

    def __len__(self) -> int:
        return len(self.edits)

    def __iter__(self):
        return iter(self.edits)


@dataclass(frozen=True)
class Violation:
    """A single rule violation found in the document."""
    rule_id: str
    message: str
    line: int
    column_start: int
    column_end: int
    severity: Severity = Severity.WARNING
    fix: Optional[Fix] = None

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> dict:
        return {
            "rule": self.rule_id,
            "severity": self.severity.value,
            "line": self.line + 1,
            "column": self.column_start + 1,
            "column_end": self.column_end + 1,
            "message": self.message,
            "fixable": self.fixable,
        }


@dataclass(frozen=True)
class RuleInfo:
    """Static metadata for one rule."""
    id: str
    name: str
    aliases: tuple[str, ...]
    description: str
    enabled_by_default: bool = True
    default_severity: Severity = Severity.WARNING
    parameter: Optional[str] = None
    choices: Optional[tuple[str, ...]] = None

    @property
    def documentation_url(self) -> str:
        return (
            "https://github.com/DavidAnson/markdownlint/blob/main/doc/"
            f"{self.id.lower()}.md"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "aliases": list(self.aliases),
            "description": self.description,
            "documentation_url": self.documentation_url,
            "default_enabled": self.enabled_by_default,
            "default_severity": self.default_severity.value,
        }


@dataclass(frozen=True)
class RuleConfig:
    """Effective configuration of one rule for one file."""
    enabled: bool = True
    severity: Severity = Severity.WARNING
    parameters: dict[str, Any] = field(default_factory=dict)
    indent_size: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.enabled and self.severity is not Severity.NONE

    def get_int(self, name: str, default: int) -> int:
        value = self.parameters.get(name)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_str(self, name: str, default: str) -> str:
        value = self.parameters.get(name)
        return default if value is None else str(value)

    def get_bool(self, name: str, default: bool) -> bool:
        value = self.parameters.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ("true", "1", "yes", "on")

    def get_list(self, name: str, default: Optional[list[str]] = None) -> list[str]:
        """Read a list parameter given either as a sequence or a comma list."""
        value = self.parameters.get(name)
        if value is None:
            return list(default or [])
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [part.strip() for part in str(value).split(",") if part.strip()]


@dataclass
class LintReport:
    """Complete lint report for a document."""
    path: str
    total_issues: int = 0
    fixable: int = 0
    errors: int = 0
    warnings: int = 0
    suggestions: int = 0
    violations: list[Violation] = field(default_factory=list)
    fixed: list[str] = field(default_factory=list)

    def add_violation(self, violation: Violation) -> None:
        """Add a violation to the report and update counts."""
        self.violations.append(violation)
        self.total_issues += 1

        if violation.fixable:
            self.fixable += 1
        if violation.severity == Severity.ERROR:
            self.errors += 1
        elif violation.severity == Severity.WARNING:
            self.warnings += 1
        elif violation.severity == Severity.SUGGESTION:
            self.suggestions += 1

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "total_issues": self.total_issues,
            "fixable": self.fixable,
            "errors": self.errors,
            "warnings": self.warnings,
            "suggestions": self.suggestions,
            "violations": [v.to_dict() for v in self.violations],
            "fixed": self.fixed,
        }
