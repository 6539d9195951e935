"""Command list parsing

Command inputs can be given in three forms:

1. A single command string: ``npm install``
2. A JSON array: ``["npm install", "npm run build"]``
3. A multiline script, one command per line. Blank lines and lines
   starting with ``#`` are dropped.
"""

import json
from typing import List, Optional

from ..api.exceptions import ConfigError


def parse_command_input(value: Optional[str], input_name: str) -> Optional[List[str]]:
    """
    Parse a command input string into a list of commands

    Args:
        value: Raw input
        input_name: Name of the input, used in error messages

    Returns:
        List of commands, or None if the input is empty

    Raises:
        ConfigError: If a JSON input is not an array of strings
    """
    if value is None or not value.strip():
        return None

    trimmed = value.strip()

    if trimmed.startswith('[') or trimmed.startswith('{'):
        try:
            parsed = json.loads(trimmed)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse {input_name} as JSON: {e}")

        if not isinstance(parsed, list):
            raise ConfigError(f"Failed to parse {input_name} as JSON: {input_name} must be a JSON array")
        if any(not isinstance(cmd, str) for cmd in parsed):
            raise ConfigError(
                f"Failed to parse {input_name} as JSON: {input_name} array must contain only strings"
            )

        return [cmd for cmd in parsed if cmd.strip()]

    if '\n' in trimmed:
        commands = [
            line.strip() for line in trimmed.splitlines()
            if line.strip() and not line.strip().startswith('#')
        ]
        return commands or None

    return [trimmed]
