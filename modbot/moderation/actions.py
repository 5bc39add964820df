"""Moderation actions: timeout, ban and unban directives."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from ..constants import PRIVILEGED_TARGET_MESSAGE
from ..logs.logger import logger
from .policy import ModeratorPolicy

ChatSender = Callable[[str], Awaitable[bool]]


class ModerationOutcome(Enum):
    APPLIED = "applied"
    REFUSED_PRIVILEGED_TARGET = "refused_privileged_target"


class ModerationAction(Enum):
    TIMEOUT = ("timeout", "Timed out user: {user}")
    BAN = ("ban", "Banned user: {user}")
    UNBAN = ("unban", "Unbanned user: {user}")

    def __init__(self, directive: str, confirmation: str) -> None:
        self.directive = directive
        self.confirmation = confirmation


class ModerationActions:
    """Emits moderation directives through the rate-limited chat sender.

    Privileged users (moderators and the owner) cannot be punished through
    the bot; such requests are refused and nothing is sent to the server.
    """

    def __init__(self, policy: ModeratorPolicy, send: ChatSender) -> None:
        self.policy = policy
        self.send = send

    async def timeout(self, target: str, issuer: str | None = None) -> ModerationOutcome:
        return await self.apply(ModerationAction.TIMEOUT, target, issuer)

    async def ban(self, target: str, issuer: str | None = None) -> ModerationOutcome:
        return await self.apply(ModerationAction.BAN, target, issuer)

    async def unban(self, target: str, issuer: str | None = None) -> ModerationOutcome:
        return await self.apply(ModerationAction.UNBAN, target, issuer)

    async def apply(
        self, action: ModerationAction, target: str, issuer: str | None = None
    ) -> ModerationOutcome:
        """Run one action against ``target``.

        Args:
            action: Which directive to emit.
            target: The user being acted on.
            issuer: Who asked for it. When set, a refusal is announced in
                chat; automatic actions (no issuer) are refused quietly.
        """
        if self.policy.is_moderator(target):
            logger.log_event(
                "moderation",
                "refused_privileged_target",
                level=logging.WARNING,
                moderation_action=action.directive,
                target=target,
                issuer=issuer or "auto",
            )
            if issuer is not None:
                await self.send(PRIVILEGED_TARGET_MESSAGE.format(user=target))
            return ModerationOutcome.REFUSED_PRIVILEGED_TARGET

        await self.send(f"/{action.directive} {target}")
        await self.send(action.confirmation.format(user=target))
        logger.log_event(
            "moderation",
            "applied",
            moderation_action=action.directive,
            target=target,
            issuer=issuer or "auto",
        )
        return ModerationOutcome.APPLIED
