"""
Interface layer for DAS.

The dispatcher routes directive text; the CLI and headless runner are
thin transports over it.
"""

from .command_registry import Command, CommandCategory, CommandRegistry
from .commands import build_registry
from .dispatcher import CommandDispatcher, tokenize

__all__ = [
    "Command",
    "CommandCategory",
    "CommandRegistry",
    "build_registry",
    "CommandDispatcher",
    "tokenize",
]
