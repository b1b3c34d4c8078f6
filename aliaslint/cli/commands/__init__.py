"""
CLI command handlers.

Organized by functional domain:
- check.py: check and fix commands
- config.py: configuration commands
"""

from .check import cmd_check, cmd_fix
from .config import cmd_config

__all__ = ["cmd_check", "cmd_fix", "cmd_config"]
