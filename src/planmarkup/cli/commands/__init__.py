"""CLI command implementations for the planmarkup application.

This package contains subcommands for the planmarkup CLI, including:
- validate: Validate a floor-plan document
"""

from planmarkup.cli.commands.validate import validate_command

__all__ = ["validate_command"]
