"""
Core data models for AliasLint analysis.

This module defines the small immutable records that flow between the
visitors, the per-module context and the resolver:

1. Source positions and ranges (libcst convention: 1-based lines, 0-based columns)
2. Violation records produced while visiting imports
3. Usage sites produced while visiting qualified references
4. Diagnostics and their text edits, produced by the resolver
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import libcst.metadata as meta

# Canonical module identity, e.g. ("json", "decoder")
ModuleName = Tuple[str, ...]


def parse_module_name(dotted: str) -> ModuleName:
    """Split a dotted module name into its segments."""
    return tuple(part.strip() for part in dotted.split(".") if part.strip())


def format_module_name(module_name: ModuleName) -> str:
    """Render a canonical module name in dotted form."""
    return ".".join(module_name)


@dataclass(frozen=True, order=True)
class Position:
    """A point in the source text."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True, order=True)
class SourceRange:
    """Half-open span of source text between two positions."""

    start: Position
    end: Position

    @classmethod
    def from_code_range(cls, code_range: meta.CodeRange) -> "SourceRange":
        return cls(
            start=Position(code_range.start.line, code_range.start.column),
            end=Position(code_range.end.line, code_range.end.column),
        )

    def overlaps(self, other: "SourceRange") -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": {"line": self.start.line, "column": self.start.column},
            "end": {"line": self.end.line, "column": self.end.column},
        }


class ErrorCategory(Enum):
    """Diagnostic categories emitted by the alias rule."""

    INCORRECT_ALIAS = "IncorrectAlias"
    INCORRECT_ALIAS_COLLISION = "IncorrectAliasCollision"
    MISSING_ALIAS = "MissingAlias"
    MISSING_ALIAS_COLLISION = "MissingAliasCollision"

    @property
    def fixable(self) -> bool:
        return self in (ErrorCategory.INCORRECT_ALIAS, ErrorCategory.MISSING_ALIAS)


@dataclass(frozen=True)
class AliasViolation:
    """An import that has an alias which may not be the preferred one."""

    actual_alias: str
    module_name: ModuleName
    expected_aliases: Tuple[str, ...]
    alias_range: SourceRange


@dataclass(frozen=True)
class MissingAliasViolation:
    """An import without alias for a module the policy wants aliased."""

    module_name: ModuleName
    expected_aliases: Tuple[str, ...]
    module_name_range: SourceRange


@dataclass(frozen=True)
class UsageSite:
    """
    One reference to an imported module.

    `member` is the referenced function/value name (``jd.scanstring`` ->
    ``scanstring``), or None for a bare use of the alias itself.
    """

    module_name: ModuleName
    qualifier: str
    member: Optional[str]
    range: SourceRange

    def rewritten(self, alias: str) -> str:
        """Source text of this reference once qualified by `alias`."""
        if self.member is None:
            return alias
        return f"{alias}.{self.member}"


@dataclass(frozen=True)
class ReplaceEdit:
    """Replace the text covered by `range`."""

    range: SourceRange
    replacement: str

    @property
    def start(self) -> Position:
        return self.range.start

    @property
    def end(self) -> Position:
        return self.range.end

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "replace", "range": self.range.to_dict(), "replacement": self.replacement}


@dataclass(frozen=True)
class InsertEdit:
    """Insert `text` at `position`."""

    position: Position
    text: str

    @property
    def start(self) -> Position:
        return self.position

    @property
    def end(self) -> Position:
        return self.position

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "insert",
            "position": {"line": self.position.line, "column": self.position.column},
            "text": self.text,
        }


TextEdit = Union[ReplaceEdit, InsertEdit]


@dataclass(frozen=True)
class Diagnostic:
    """
    A reported alias problem.

    `fix` is either None or a complete, atomic list of edits covering the
    import itself and every affected reference in the module.
    """

    category: ErrorCategory
    message: str
    details: List[str]
    range: SourceRange
    module_name: ModuleName
    target_alias: str
    fix: Optional[List[TextEdit]] = None
    file_path: Optional[str] = field(default=None, compare=False)

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category.value,
            "message": self.message,
            "details": list(self.details),
            "range": self.range.to_dict(),
            "module": format_module_name(self.module_name),
            "target_alias": self.target_alias,
            "fix": [edit.to_dict() for edit in self.fix] if self.fix is not None else None,
            "file_path": self.file_path,
        }
