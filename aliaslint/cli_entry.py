"""
Command-line interface for AliasLint

Checks Python projects for imports that do not use their preferred aliases
and applies the safe fixes.
"""

import argparse
import logging
import sys
from typing import List, Optional

from aliaslint import __version__
from aliaslint.api import AliasLint
from aliaslint.config import ConfigurationError, load_config
from aliaslint.cli.commands import cmd_check, cmd_config, cmd_fix
from aliaslint.cli.rich_output import set_rich_enabled

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", nargs="?", default=".", help="Project directory or file")
    parser.add_argument("--format", choices=["text", "json"], default="text")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Exclude glob (relative posix). Can repeat.",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="aliaslint",
        description="AliasLint - consistent import aliases for Python projects",
        epilog='Use "aliaslint <command> --help" for detailed command help.',
    )

    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output and debug logging",
    )
    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich terminal output (use plain text)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Report imports with inconsistent aliases")
    _add_scan_arguments(check_parser)
    check_parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only print one line per diagnostic"
    )

    fix_parser = subparsers.add_parser("fix", help="Apply safe alias fixes (dry-run by default)")
    _add_scan_arguments(fix_parser)
    fix_parser.add_argument("--write", action="store_true", help="Write changes to disk")
    fix_parser.add_argument("--diff", action="store_true", help="Show a unified diff per file")

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_action")

    config_subparsers.add_parser("show", help="Show current configuration")

    init_parser = config_subparsers.add_parser("init", help="Initialize configuration file")
    init_parser.add_argument("--path", default="aliaslint.json", help="Configuration file path")
    init_parser.add_argument("--format", choices=["json", "yaml"], default="json")

    validate_parser = config_subparsers.add_parser("validate", help="Validate configuration file")
    validate_parser.add_argument("config_file", help="Configuration file to validate")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    set_rich_enabled(not args.no_rich)

    if not args.command:
        parser.print_help()
        return 2

    try:
        if args.command == "config":
            return cmd_config(args, args.config)

        config = load_config(args.config)
        aliaslint = AliasLint(config)

        if args.command == "check":
            return cmd_check(args, aliaslint)
        if args.command == "fix":
            return cmd_fix(args, aliaslint)

    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
