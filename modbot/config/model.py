from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    CONNECT_BACKOFF_BASE_SECONDS,
    CONNECT_BACKOFF_MAX_SECONDS,
    CONNECT_MAX_ATTEMPTS,
    CONNECT_TIMEOUT_SECONDS,
    DEFAULT_AUTO_MESSAGE,
    DEFAULT_AUTO_MESSAGE_INTERVAL_MINUTES,
    DEFAULT_FAREWELL_MESSAGE,
    DEFAULT_LINK_SUFFIXES,
    DEFAULT_PORT,
    DEFAULT_SERVER,
    MIN_SEND_INTERVAL_SECONDS,
)


def normalize_username(name: str) -> str:
    """Lowercase a username and strip whitespace and a leading '#' or '@'."""
    return name.strip().lstrip("#@").lower()


class SessionConfig(BaseModel):
    """Immutable settings for one chat session.

    Attributes:
        server: Chat server host.
        port: Chat server port.
        nickname: The bot's login name.
        channel: Channel to join, always stored as '#name'.
        token: OAuth credential, always stored with the 'oauth:' prefix.
        auto_message: Text broadcast periodically.
        auto_message_interval: Minutes between broadcasts; 0 disables them.
        moderators: Usernames allowed to issue moderation commands.
        link_suffixes: Substrings that mark a chat message as a link.
        min_send_interval: Minimum seconds between two chat sends.
        connect_timeout: Seconds allowed for one dial attempt.
        connect_max_attempts: Dial attempt ceiling; None retries forever.
        connect_backoff_base: First retry delay in seconds.
        connect_backoff_max: Cap on the retry delay in seconds.
        request_membership: Ask the server for JOIN/PART notifications.
        farewell_message: Chat text sent before a console quit.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    server: str = Field(default=DEFAULT_SERVER, min_length=1)
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    nickname: str = Field(min_length=1)
    channel: str = Field(min_length=2)
    token: str = Field(min_length=7)
    auto_message: str = DEFAULT_AUTO_MESSAGE
    auto_message_interval: float = Field(
        default=DEFAULT_AUTO_MESSAGE_INTERVAL_MINUTES, ge=0
    )
    moderators: tuple[str, ...] = ()
    link_suffixes: tuple[str, ...] = DEFAULT_LINK_SUFFIXES
    min_send_interval: float = Field(default=MIN_SEND_INTERVAL_SECONDS, ge=0)
    connect_timeout: float = Field(default=CONNECT_TIMEOUT_SECONDS, gt=0)
    connect_max_attempts: int | None = (
        CONNECT_MAX_ATTEMPTS if CONNECT_MAX_ATTEMPTS > 0 else None
    )
    connect_backoff_base: float = Field(default=CONNECT_BACKOFF_BASE_SECONDS, ge=0)
    connect_backoff_max: float = Field(default=CONNECT_BACKOFF_MAX_SECONDS, ge=0)
    request_membership: bool = True
    farewell_message: str = DEFAULT_FAREWELL_MESSAGE

    @field_validator("nickname", mode="before")
    @classmethod
    def validate_nickname(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("nickname must be a string")
        return normalize_username(v)

    @field_validator("channel", mode="before")
    @classmethod
    def validate_channel(cls, v: Any) -> str:
        """Store the channel lowercased with exactly one leading '#'."""
        if not isinstance(v, str):
            raise ValueError("channel must be a string")
        name = normalize_username(v)
        if not name:
            raise ValueError("channel must not be empty")
        return f"#{name}"

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("token must be a non-empty string")
        token = v.strip()
        return token if token.startswith("oauth:") else f"oauth:{token}"

    @field_validator("moderators", mode="before")
    @classmethod
    def validate_moderators(cls, v: Any) -> tuple[str, ...]:
        """Accept a list or a comma-separated string; dedup and sort."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list | tuple | set | frozenset):
            raise ValueError("moderators must be a list")
        names = (normalize_username(m) for m in v if isinstance(m, str))
        return tuple(sorted(dict.fromkeys(n for n in names if n)))

    @field_validator("link_suffixes", mode="before")
    @classmethod
    def validate_link_suffixes(cls, v: Any) -> tuple[str, ...]:
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list | tuple):
            raise ValueError("link_suffixes must be a list")
        return tuple(s.strip().lower() for s in v if isinstance(s, str) and s.strip())

    @field_validator("connect_max_attempts", mode="before")
    @classmethod
    def validate_max_attempts(cls, v: Any) -> int | None:
        # 0 or a negative ceiling means "retry forever"
        if v is None:
            return None
        attempts = int(v)
        return attempts if attempts > 0 else None

    @property
    def owner(self) -> str:
        """The channel owner's username (channel name without '#')."""
        return self.channel[1:]

    @property
    def auto_message_seconds(self) -> float:
        return self.auto_message_interval * 60

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionConfig:
        """Create a SessionConfig from a dictionary.

        Args:
            data: Dictionary containing session configuration data.

        Returns:
            SessionConfig instance.

        Raises:
            pydantic.ValidationError: If a field is missing or invalid.
        """
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary with the credential redacted."""
        data = self.model_dump()
        data["token"] = "oauth:***"
        return data
