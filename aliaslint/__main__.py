"""Entry point for running aliaslint as a module."""

from aliaslint.cli_entry import main

if __name__ == "__main__":
    raise SystemExit(main())
