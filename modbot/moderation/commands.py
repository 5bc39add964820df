"""Command parsing and authorization-checked dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..constants import COMMAND_PREFIX, NOT_A_MOD_MESSAGE
from ..logs.logger import logger
from .actions import (
    ChatSender,
    ModerationAction,
    ModerationActions,
    ModerationOutcome,
)
from .policy import ModeratorPolicy


class CommandKind(Enum):
    TIMEOUT = "timeout"
    BAN = "ban"
    UNBAN = "unban"
    QUIT = "quit"


_ACTIONS = {
    CommandKind.TIMEOUT: ModerationAction.TIMEOUT,
    CommandKind.BAN: ModerationAction.BAN,
    CommandKind.UNBAN: ModerationAction.UNBAN,
}


@dataclass(frozen=True, slots=True)
class Command:
    kind: CommandKind
    target: str | None = None


class DispatchOutcome(Enum):
    EXECUTED = "executed"
    DENIED = "denied"
    REFUSED_PRIVILEGED_TARGET = "refused_privileged_target"
    QUIT = "quit"


def parse_command(raw_text: str, *, allow_quit: bool = False) -> Command | None:
    """Parse ``!keyword target`` into a Command.

    A single leading ':' (the protocol's trailing-parameter marker) is
    accepted. The keyword is matched case-insensitively; the target keeps
    its case. Unknown keywords and commands missing their target give None.
    Any keyword starting with ``quit`` (``!quit``, ``!quitnow``) means quit,
    and only when ``allow_quit`` is set (console input).
    """
    text = raw_text.strip()
    if text.startswith(":"):
        text = text[1:]
    if not text.startswith(COMMAND_PREFIX):
        return None
    tokens = text[len(COMMAND_PREFIX) :].split()
    if not tokens:
        return None
    if tokens[0].lower().startswith(CommandKind.QUIT.value):
        return Command(CommandKind.QUIT) if allow_quit else None
    try:
        kind = CommandKind(tokens[0].lower())
    except ValueError:
        return None
    if len(tokens) < 2:
        logger.log_event(
            "command", "malformed", level=logging.DEBUG, command=kind.value
        )
        return None
    return Command(kind, tokens[1].lstrip("@"))


def contains_link(text: str, suffixes: tuple[str, ...] | list[str]) -> bool:
    """Return True if ``text`` contains any of the link suffixes."""
    lowered = text.lower()
    return any(suffix in lowered for suffix in suffixes)


class CommandProcessor:
    """Checks the issuer's privilege and routes commands to actions."""

    def __init__(
        self,
        policy: ModeratorPolicy,
        actions: ModerationActions,
        send: ChatSender,
    ) -> None:
        self.policy = policy
        self.actions = actions
        self.send = send

    async def dispatch(self, issuer: str, command: Command) -> DispatchOutcome:
        if not self.policy.is_moderator(issuer):
            logger.log_event(
                "command",
                "denied",
                level=logging.WARNING,
                issuer=issuer,
                command=command.kind.value,
            )
            await self.send(NOT_A_MOD_MESSAGE.format(user=issuer))
            return DispatchOutcome.DENIED

        if command.kind is CommandKind.QUIT:
            return DispatchOutcome.QUIT

        logger.log_event(
            "command",
            "accepted",
            issuer=issuer,
            command=command.kind.value,
            target=command.target,
        )
        outcome = await self.actions.apply(
            _ACTIONS[command.kind], command.target or "", issuer
        )
        if outcome is ModerationOutcome.REFUSED_PRIVILEGED_TARGET:
            return DispatchOutcome.REFUSED_PRIVILEGED_TARGET
        return DispatchOutcome.EXECUTED

    async def handle_text(
        self, issuer: str, raw_text: str, *, allow_quit: bool = False
    ) -> DispatchOutcome | None:
        """Parse and dispatch; None when the text is not a usable command."""
        command = parse_command(raw_text, allow_quit=allow_quit)
        if command is None:
            return None
        return await self.dispatch(issuer, command)
