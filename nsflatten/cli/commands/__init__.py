"""
CLI command handlers.

Organized by functional domain:
- convert.py: Converting files and directories
- config.py: Configuration display and initialization
"""

from .convert import cmd_convert, apply_cli_overrides
from .config import cmd_config

__all__ = ["cmd_convert", "apply_cli_overrides", "cmd_config"]
