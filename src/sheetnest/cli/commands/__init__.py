"""CLI command implementations for the sheetnest application.

- nest: Pack a job file onto sheets
- validate: Validate a job file
"""

from sheetnest.cli.commands.nest import nest_command
from sheetnest.cli.commands.validate import validate_command

__all__ = ["nest_command", "validate_command"]
