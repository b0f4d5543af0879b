"""Messaging channel support: command grammar, pairing and reply dispatch."""

from .commands import CommandKind, ParsedCommand, parse_command
from .dispatcher import MessageDispatcher
from .pairing import PairingService, generate_code

__all__ = [
    "CommandKind",
    "ParsedCommand",
    "parse_command",
    "MessageDispatcher",
    "PairingService",
    "generate_code",
]
