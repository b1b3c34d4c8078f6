"""
Output formatters for CLI commands.

Provides formatting for check and fix results in text (through the rich
output manager) and JSON.
"""

import json
from typing import Dict, List

from aliaslint.analysis.models import Diagnostic
from aliaslint.api import AnalysisResult, FileReport, RefactoringResult
from aliaslint.cli.rich_output import RichOutputManager


def format_check_json(result: AnalysisResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def format_fix_json(result: RefactoringResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str)


def format_diagnostic_line(diagnostic: Diagnostic) -> str:
    """One-line summary: ``path:line:col: Category message``."""
    start = diagnostic.range.start
    location = f"{diagnostic.file_path or '<source>'}:{start.line}:{start.column + 1}"
    suffix = " [fixable]" if diagnostic.fixable else ""
    return f"{location}: {diagnostic.category.value} {diagnostic.message}{suffix}"


def _group_by_file(reports: List[FileReport]) -> Dict[str, FileReport]:
    return {r.file_path: r for r in reports if r.diagnostics or r.error}


def render_check_report(result: AnalysisResult, output: RichOutputManager, show_details: bool = True) -> None:
    """Render a check result as text."""
    output.print_header("AliasLint check", result.metadata.get("project_path"))
    by_file = _group_by_file(result.reports)

    for file_path in sorted(by_file):
        report = by_file[file_path]
        output.print_section(file_path)
        if report.error:
            output.print_error(report.error)
        for diagnostic in report.diagnostics:
            output.print_plain(format_diagnostic_line(diagnostic))
            if show_details:
                for line in diagnostic.details:
                    output.print_plain(f"    {line}")

    for error in result.errors:
        if not any(error.startswith(f"{fp}:") for fp in by_file):
            output.print_error(error)

    metadata = result.metadata
    diagnostics = result.diagnostics
    table = output.create_table("Alias check summary", ["Metric", "Value"])
    output.add_table_row(table, "Files checked", metadata.get("files_checked", 0))
    output.add_table_row(table, "Diagnostics", len(diagnostics))
    output.add_table_row(table, "Fixable", sum(1 for d in diagnostics if d.fixable))
    output.add_table_row(table, "Errors", len(result.errors))
    output.print_table(table)

    if not diagnostics and not result.errors:
        output.print_success("All imports use their preferred aliases")


def render_fix_report(result: RefactoringResult, output: RichOutputManager, show_diff: bool = False) -> None:
    """Render a fix result as text."""
    write = result.metadata.get("write", False)
    output.print_header("AliasLint fix", result.metadata.get("project_path"))
    for change in result.changes_made:
        output.print_section(change["file_path"])
        for message in change.get("fixes", []):
            output.print_plain(f"  {message}")
        if show_diff and change.get("diff"):
            output.print_code(change["diff"], language="diff")

    for error in result.errors:
        output.print_error(error)

    verb = "Fixed" if write else "Would fix"
    output.print_info(
        f"{verb} {result.fixes_applied} import(s) in {result.files_changed} file(s)"
        f"; {result.fixes_skipped} fix(es) skipped"
    )
    if not write and result.files_changed:
        output.print_warning("Dry run: re-run with --write to apply the changes")
