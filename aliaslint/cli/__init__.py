"""Command-line interface package for AliasLint."""
