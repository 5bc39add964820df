"""Moderation: authorization policy, command processing and actions."""

from .actions import ModerationAction, ModerationActions, ModerationOutcome  # noqa: F401
from .commands import (  # noqa: F401
    Command,
    CommandKind,
    CommandProcessor,
    DispatchOutcome,
    contains_link,
    parse_command,
)
from .policy import ModeratorPolicy  # noqa: F401

__all__ = [
    "Command",
    "CommandKind",
    "CommandProcessor",
    "DispatchOutcome",
    "ModerationAction",
    "ModerationActions",
    "ModerationOutcome",
    "ModeratorPolicy",
    "contains_link",
    "parse_command",
]
