"""Moderator authorization policy."""

from __future__ import annotations

from collections.abc import Iterable

from ..config.model import SessionConfig, normalize_username


class ModeratorPolicy:
    """Decides who may issue moderation commands.

    A user is privileged when listed as a moderator or when it is the channel
    owner. Membership is fixed for the lifetime of the session.
    """

    def __init__(self, moderators: Iterable[str], owner: str) -> None:
        self.owner = normalize_username(owner)
        self.moderators = frozenset(
            n for n in (normalize_username(m) for m in moderators) if n
        )

    @classmethod
    def from_config(cls, config: SessionConfig) -> ModeratorPolicy:
        return cls(config.moderators, config.owner)

    def is_moderator(self, username: str) -> bool:
        name = normalize_username(username)
        return name == self.owner or name in self.moderators
