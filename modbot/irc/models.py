"""Shared IRC data models: session states and inbound events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ConnectionState(Enum):
    IDLE = auto()
    CONNECTING = auto()
    AUTHENTICATING = auto()
    RUNNING = auto()
    CLOSING = auto()
    CLOSED = auto()


@dataclass(frozen=True, slots=True)
class Ping:
    token: str


@dataclass(frozen=True, slots=True)
class UserJoined:
    username: str


@dataclass(frozen=True, slots=True)
class UserLeft:
    username: str


@dataclass(frozen=True, slots=True)
class ChatLine:
    username: str
    text: str
    is_command: bool = False


@dataclass(frozen=True, slots=True)
class Unrecognized:
    raw: str


InboundEvent = Ping | UserJoined | UserLeft | ChatLine | Unrecognized
