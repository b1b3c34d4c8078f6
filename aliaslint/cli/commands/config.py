"""
Configuration management commands for the AliasLint CLI.

- show: print the effective configuration
- init: write a starter configuration file
- validate: check a configuration file
"""

import sys
from typing import Any, Optional

from aliaslint.config import AliasLintConfig, ConfigurationError

# Starter policy written by `config init`
DEFAULT_ALIASES = {
    "numpy": ["np"],
    "pandas": ["pd"],
    "matplotlib.pyplot": ["plt"],
}


def cmd_config(args: Any, config_path: Optional[str] = None) -> int:
    """Handle config command."""
    if args.config_action == "show":
        config = AliasLintConfig.load(config_path)
        print("Current AliasLint Configuration:")
        print(config.get_config_summary())
        return 0

    if args.config_action == "init":
        config = AliasLintConfig.default()
        config.aliases = {module: list(aliases) for module, aliases in DEFAULT_ALIASES.items()}
        try:
            config.to_file(args.path, args.format)
        except ConfigurationError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        print(f"Default configuration file created at {args.path}")
        print("Edit the file to customize your preferred aliases.")
        return 0

    if args.config_action == "validate":
        try:
            AliasLintConfig.load(args.config_file, use_env=False, validate=True)
        except ConfigurationError as e:
            print(f"Error: Configuration file is invalid: {e}", file=sys.stderr)
            return 2
        print(f"Configuration file {args.config_file} is valid")
        return 0

    print("Error: missing config action (show, init, validate)", file=sys.stderr)
    return 2
