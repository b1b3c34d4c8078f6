"""
Main API interface for AliasLint

Provides a unified facade over the alias rule: checking single sources,
files and whole projects, and applying the fixes it proposes.
"""

import concurrent.futures
import difflib
import fnmatch
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import libcst as cst

from .analysis.alias_rule import RULE_NAME, check_source
from .analysis.models import Diagnostic
from .analysis.policy import AliasPolicy
from .config import AliasLintConfig
from .refactoring.fix_applier import apply_fixes

logger = logging.getLogger(__name__)


DEFAULT_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".tox",
    "node_modules",
}


@dataclass
class FileReport:
    """Diagnostics found in one file."""

    file_path: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def fixable_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.fixable)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "error": self.error,
        }


@dataclass
class AnalysisResult:
    """Standardized analysis result structure."""

    success: bool
    reports: List[FileReport]
    errors: List[str]
    metadata: Dict[str, Any]

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [d for report in self.reports for d in report.diagnostics]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "reports": [r.to_dict() for r in self.reports if r.diagnostics or r.error],
            "errors": list(self.errors),
            "metadata": dict(self.metadata),
        }


@dataclass
class RefactoringResult:
    """Standardized fix result structure."""

    success: bool
    files_changed: int
    fixes_applied: int
    fixes_skipped: int
    changes_made: List[Dict[str, Any]]
    errors: List[str]
    metadata: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "files_changed": self.files_changed,
            "fixes_applied": self.fixes_applied,
            "fixes_skipped": self.fixes_skipped,
            "changes_made": list(self.changes_made),
            "errors": list(self.errors),
            "metadata": dict(self.metadata),
        }


def iter_python_files(
    root: Path,
    include: Iterable[str] = ("*.py",),
    exclude: Iterable[str] = (),
) -> Iterable[Path]:
    """Yield the Python files under `root` that are not excluded."""
    root = root.resolve()
    if root.is_file():
        yield root
        return

    inc = list(include) or ["*.py"]
    exc = [e.replace("\\", "/") for e in exclude]

    for p in sorted(root.rglob("*")):
        if not p.is_file():
            continue
        rel_path = p.relative_to(root)
        if set(rel_path.parts).intersection(DEFAULT_SKIP_DIRS):
            continue
        rel = rel_path.as_posix()
        if not any(fnmatch.fnmatch(p.name, pat) or fnmatch.fnmatch(rel, pat) for pat in inc):
            continue
        if exc and any(fnmatch.fnmatch(rel, pat) for pat in exc):
            continue
        yield p


def _read_source(path: Path) -> str:
    # newline="" keeps CRLF line endings intact through a fix
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _write_source(path: Path, source: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(source)


class AliasLint:
    """
    Main API class for AliasLint.

    Wraps configuration, the alias policy and the rule driver behind a
    small facade used by the CLI and by library callers.
    """

    def __init__(
        self,
        config: Optional[AliasLintConfig] = None,
        policy: Optional[AliasPolicy] = None,
    ):
        """
        Initialize AliasLint with optional configuration.

        Args:
            config: Optional configuration object. If None, uses default configuration.
            policy: Optional explicit policy overriding the configured aliases.
        """
        self.config = config or AliasLintConfig.default()
        self.policy = policy or self.config.build_policy()
        logger.debug(f"AliasLint initialized with {len(self.policy.entries)} governed module(s)")

    # Checking

    def check_source(self, source: str, file_path: Optional[str] = None) -> List[Diagnostic]:
        """
        Check one module's source text.

        Raises:
            libcst.ParserSyntaxError: If source is not valid Python syntax.
        """
        return check_source(source, self.policy, file_path)

    def check_file(self, file_path: Union[str, Path]) -> FileReport:
        """Check one file; read and syntax errors are reported, not raised."""
        path = Path(file_path)
        report = FileReport(file_path=str(path))

        try:
            size = path.stat().st_size
            if size > self.config.analysis_settings.max_file_size:
                logger.info(f"Skipping {path}: {size} bytes exceeds max_file_size")
                return report
            source = _read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            report.error = f"Cannot read file: {e}"
            logger.warning(f"{path}: {report.error}")
            return report

        try:
            report.diagnostics = self.check_source(source, str(path))
        except cst.ParserSyntaxError as e:
            report.error = f"Syntax error: {e.message} (line {e.raw_line}, column {e.raw_column})"
            logger.warning(f"{path}: {report.error}")
        return report

    def _collect_files(self, path: Path, exclude: Iterable[str] = ()) -> List[Path]:
        settings = self.config.analysis_settings
        return list(
            iter_python_files(
                path,
                include=settings.include_patterns,
                exclude=list(settings.exclude_patterns) + list(exclude),
            )
        )

    def _check_files(self, files: List[Path]) -> List[FileReport]:
        jobs = self.config.analysis_settings.jobs
        if jobs <= 1 or len(files) <= 1:
            return [self.check_file(f) for f in files]

        logger.debug(f"Checking {len(files)} files with {jobs} workers")
        with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
            return list(executor.map(self.check_file, files))

    def check_project(
        self, project_path: Union[str, Path], exclude: Iterable[str] = ()
    ) -> AnalysisResult:
        """Check every Python file under `project_path`."""
        path = Path(project_path)
        if not path.exists():
            return AnalysisResult(
                success=False,
                reports=[],
                errors=[f"Path does not exist: {path}"],
                metadata={"project_path": str(path)},
            )

        files = self._collect_files(path, exclude)
        reports = self._check_files(files)
        errors = [f"{r.file_path}: {r.error}" for r in reports if r.error]
        diagnostics = [d for r in reports for d in r.diagnostics]

        logger.info(
            f"Checked {len(files)} file(s) under {path}: {len(diagnostics)} diagnostic(s), "
            f"{len(errors)} error(s)"
        )
        return AnalysisResult(
            success=not errors,
            reports=reports,
            errors=errors,
            metadata={
                "project_path": str(path),
                "rule": RULE_NAME,
                "files_checked": len(files),
                "diagnostics": len(diagnostics),
                "fixable": sum(1 for d in diagnostics if d.fixable),
                "timestamp": datetime.now().isoformat(),
            },
        )

    # Fixing

    def fix_source(self, source: str, file_path: Optional[str] = None) -> str:
        """Return `source` with every safe fix applied."""
        return apply_fixes(source, self.check_source(source, file_path)).source

    def fix_file(self, file_path: Union[str, Path], write: bool = False) -> Dict[str, Any]:
        """Apply all safe fixes to one file. Dry-run unless `write`."""
        path = Path(file_path)
        report = self.check_file(path)
        change: Dict[str, Any] = {
            "file_path": str(path),
            "applied": 0,
            "skipped": 0,
            "changed": False,
            "error": report.error,
        }
        if report.error or not report.fixable_count:
            return change

        source = _read_source(path)
        outcome = apply_fixes(source, report.diagnostics)
        change["applied"] = len(outcome.applied)
        change["skipped"] = len(outcome.skipped)
        change["changed"] = outcome.source != source
        change["fixes"] = [d.message for d in outcome.applied]
        change["diff"] = "".join(
            difflib.unified_diff(
                source.splitlines(keepends=True),
                outcome.source.splitlines(keepends=True),
                fromfile=f"a/{path.name}",
                tofile=f"b/{path.name}",
            )
        )

        if change["changed"] and write:
            _write_source(path, outcome.source)
            logger.info(f"Applied {len(outcome.applied)} fix(es) to {path}")
        return change

    def fix_project(
        self,
        project_path: Union[str, Path],
        write: bool = False,
        exclude: Iterable[str] = (),
    ) -> RefactoringResult:
        """Apply all safe fixes under `project_path`. Dry-run unless `write`."""
        path = Path(project_path)
        if not path.exists():
            return RefactoringResult(
                success=False,
                files_changed=0,
                fixes_applied=0,
                fixes_skipped=0,
                changes_made=[],
                errors=[f"Path does not exist: {path}"],
                metadata={"project_path": str(path), "write": write},
            )

        changes = [self.fix_file(f, write=write) for f in self._collect_files(path, exclude)]
        errors = [f"{c['file_path']}: {c['error']}" for c in changes if c["error"]]
        changed = [c for c in changes if c["changed"]]

        return RefactoringResult(
            success=not errors,
            files_changed=len(changed),
            fixes_applied=sum(c["applied"] for c in changes),
            fixes_skipped=sum(c["skipped"] for c in changes),
            changes_made=changed,
            errors=errors,
            metadata={
                "project_path": str(path),
                "write": write,
                "timestamp": datetime.now().isoformat(),
            },
        )
