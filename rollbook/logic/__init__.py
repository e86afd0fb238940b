"""
Command layer initialization.
"""

from rollbook.logic.commands import ALL_COMMANDS, Command, CommandResult
from rollbook.logic.parser import command_words, parse_command

__all__ = ["ALL_COMMANDS", "Command", "CommandResult", "command_words", "parse_command"]
