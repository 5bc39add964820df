"""IRC subsystem package.

Contains line parsing/formatting, inbound event models and the session
connection for Twitch IRC.
"""

from .connection import SessionConnection  # noqa: F401
from .models import (  # noqa: F401
    ChatLine,
    ConnectionState,
    InboundEvent,
    Ping,
    Unrecognized,
    UserJoined,
    UserLeft,
)
from .parser import (  # noqa: F401
    IRCMessage,
    format_outbound,
    format_pong,
    parse_irc_message,
    parse_line,
)

__all__ = [
    "ChatLine",
    "ConnectionState",
    "InboundEvent",
    "IRCMessage",
    "Ping",
    "SessionConnection",
    "Unrecognized",
    "UserJoined",
    "UserLeft",
    "format_outbound",
    "format_pong",
    "parse_irc_message",
    "parse_line",
]
