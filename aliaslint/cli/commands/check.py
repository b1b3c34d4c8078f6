"""
Check and fix command handlers for the AliasLint CLI.
"""

from typing import Any

from aliaslint.api import AliasLint
from aliaslint.cli.formatters import (
    format_check_json,
    format_fix_json,
    render_check_report,
    render_fix_report,
)
from aliaslint.cli.rich_output import get_rich_output


def cmd_check(args: Any, aliaslint: AliasLint) -> int:
    """Handle check command. Exit code 1 when diagnostics or errors were found."""
    result = aliaslint.check_project(args.path, exclude=args.exclude)

    if args.format == "json":
        print(format_check_json(result))
    else:
        render_check_report(result, get_rich_output(), show_details=not args.quiet)

    return 1 if (result.diagnostics or not result.success) else 0


def cmd_fix(args: Any, aliaslint: AliasLint) -> int:
    """Handle fix command. Dry-run unless --write is given."""
    result = aliaslint.fix_project(args.path, write=bool(args.write), exclude=args.exclude)

    if args.format == "json":
        print(format_fix_json(result))
    else:
        render_fix_report(result, get_rich_output(), show_diff=args.diff)

    return 0 if result.success else 1
