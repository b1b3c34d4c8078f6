"""Application of diagnostic fixes to source text.

A fix is a list of edits that must be applied together: the renamed (or newly
inserted) alias plus every rewritten reference. Positions follow the LibCST
convention (1-based lines, 0-based columns) and are converted to string
offsets before editing, last edit first so earlier offsets stay valid.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..analysis.models import Diagnostic, InsertEdit, Position, TextEdit

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r\n|\r|\n")


class FixError(ValueError):
    """Raised when a fix cannot be applied to the given source."""

    pass


class FixConflictError(FixError):
    """Raised when edits of a single fix overlap each other."""

    pass


def _line_starts(source: str) -> List[int]:
    starts = [0]
    starts.extend(m.end() for m in _NEWLINE.finditer(source))
    return starts


def _offset(line_starts: Sequence[int], source: str, position: Position) -> int:
    if position.line < 1 or position.line > len(line_starts):
        raise FixError(f"position {position} is outside the source")
    offset = line_starts[position.line - 1] + position.column
    line_end = line_starts[position.line] if position.line < len(line_starts) else len(source)
    if position.column < 0 or offset > line_end:
        raise FixError(f"position {position} is outside the source")
    return offset


def _spans(source: str, edits: Sequence[TextEdit]) -> List[Tuple[int, int, str]]:
    line_starts = _line_starts(source)
    spans = []
    for edit in edits:
        start = _offset(line_starts, source, edit.start)
        end = _offset(line_starts, source, edit.end)
        text = edit.text if isinstance(edit, InsertEdit) else edit.replacement
        spans.append((start, end, text))
    return spans


def _conflicts(a: Tuple[int, int, str], b: Tuple[int, int, str]) -> bool:
    if a[0] == a[1] == b[0] == b[1]:
        # two insertions at the same point have no defined order
        return True
    return a[0] < b[1] and b[0] < a[1]


def _check_disjoint(spans: Sequence[Tuple[int, int, str]]) -> None:
    for i, a in enumerate(spans):
        for b in spans[i + 1:]:
            if _conflicts(a, b):
                raise FixConflictError(f"edits overlap at offsets {a[:2]} and {b[:2]}")


def _apply_spans(source: str, spans: Sequence[Tuple[int, int, str]]) -> str:
    result = source
    for start, end, text in sorted(spans, key=lambda s: (s[0], s[1]), reverse=True):
        result = result[:start] + text + result[end:]
    return result


def apply_fix(source: str, edits: Sequence[TextEdit]) -> str:
    """
    Apply one atomic fix to `source`.

    Raises:
        FixConflictError: If two edits of the fix overlap.
        FixError: If an edit points outside the source.
    """
    spans = _spans(source, edits)
    _check_disjoint(spans)
    return _apply_spans(source, spans)


@dataclass
class FixOutcome:
    """Result of applying several diagnostics' fixes to one source."""

    source: str
    applied: List[Diagnostic] = field(default_factory=list)
    skipped: List[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def apply_fixes(source: str, diagnostics: Sequence[Diagnostic]) -> FixOutcome:
    """
    Apply every fixable diagnostic to `source`.

    Fixes are accepted in order; a fix that would touch text already edited by
    an accepted fix is skipped as a whole, never partially applied.
    """
    accepted: List[Tuple[int, int, str]] = []
    outcome = FixOutcome(source=source)

    for diagnostic in diagnostics:
        if diagnostic.fix is None:
            continue
        try:
            spans = _spans(source, diagnostic.fix)
            _check_disjoint(spans)
        except FixError as e:
            logger.warning(f"Skipping fix for {diagnostic.message} ({e})")
            outcome.skipped.append(diagnostic)
            continue

        if any(_conflicts(new, old) for new in spans for old in accepted):
            logger.info(f"Skipping fix overlapping an earlier fix: {diagnostic.message}")
            outcome.skipped.append(diagnostic)
            continue

        accepted.extend(spans)
        outcome.applied.append(diagnostic)

    outcome.source = _apply_spans(source, accepted)
    return outcome
