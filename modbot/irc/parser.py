"""IRC line parsing and formatting for a single joined channel."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import COMMAND_PREFIX, LINE_TERMINATOR
from .models import ChatLine, InboundEvent, Ping, Unrecognized, UserJoined, UserLeft


@dataclass
class IRCMessage:
    raw: str
    prefix: str | None
    command: str | None
    params: list[str]
    trailing: str | None
    tags: dict[str, str]


def parse_irc_message(raw_line: str) -> IRCMessage:
    """Split a raw line into tags, prefix, command, params and trailing text.

    Never raises; a line with the wrong shape comes back with ``command``
    set to None.
    """
    tags: dict[str, str] = {}
    prefix: str | None = None
    trailing: str | None = None
    original = raw_line
    line = raw_line.rstrip("\r\n")

    if line.startswith("@"):
        if " " not in line:
            return IRCMessage(original, None, None, [], None, {})
        tags_part, line = line.split(" ", 1)
        tags = _parse_tags(tags_part[1:])
        line = line.lstrip(" ")

    if line.startswith(":"):
        remainder = line[1:]
        if " " not in remainder:
            # malformed; prefix with nothing after it
            return IRCMessage(original, remainder, None, [], None, tags)
        prefix, line = remainder.split(" ", 1)
    else:
        # Tolerate a missing ':' before a user prefix (nick@host COMMAND ...)
        head, _, rest = line.partition(" ")
        if "@" in head and rest:
            prefix, line = head, rest

    if " :" in line:
        line, trailing = line.split(" :", 1)
    elif line.startswith(":"):
        line, trailing = "", line[1:]

    parts = line.split()
    command = parts[0].upper() if parts else None
    params = parts[1:]
    return IRCMessage(
        raw=original,
        prefix=prefix,
        command=command,
        params=params,
        trailing=trailing,
        tags=tags,
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags


def username_from_prefix(prefix: str | None) -> str | None:
    """Return the user part of ``nick!user@host`` or ``user@host``.

    Server prefixes (no '!' and no '@') carry no username.
    """
    if not prefix:
        return None
    if "!" in prefix:
        name = prefix.split("!", 1)[0]
    elif "@" in prefix:
        name = prefix.split("@", 1)[0]
    else:
        return None
    name = name.strip().lower()
    return name or None


def _same_channel(token: str | None, channel: str) -> bool:
    if not token:
        return False
    return token.lstrip("#").lower() == channel.lstrip("#").lower()


def parse_line(raw: str, channel: str) -> InboundEvent:
    """Classify one raw inbound line for the configured channel.

    First match wins: keep-alive, join, part, chat. Anything else, including
    traffic for other channels, is Unrecognized.
    """
    line = raw.rstrip("\r\n")
    if line.startswith("PING ") or line == "PING":
        token = line[4:].strip()
        return Ping(token) if token else Unrecognized(raw)

    msg = parse_irc_message(line)
    username = username_from_prefix(msg.prefix)
    if not msg.command or not username:
        return Unrecognized(raw)

    # JOIN/PART carry the channel either as a middle param or as trailing text
    target = msg.params[0] if msg.params else msg.trailing
    if msg.command == "JOIN" and _same_channel(target, channel):
        return UserJoined(username)
    if msg.command == "PART" and _same_channel(target, channel):
        return UserLeft(username)
    if (
        msg.command == "PRIVMSG"
        and msg.params
        and _same_channel(msg.params[0], channel)
        and msg.trailing is not None
    ):
        text = msg.trailing
        return ChatLine(username, text, is_command=text.startswith(COMMAND_PREFIX))
    return Unrecognized(raw)


def sanitize_text(text: str) -> str:
    """Collapse line terminators so one message is always one wire line."""
    return text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def format_outbound(channel: str, text: str) -> str:
    """Wrap chat text in the PRIVMSG envelope (without the line terminator)."""
    return f"PRIVMSG {channel} :{sanitize_text(text)}"


def format_pong(token: str) -> str:
    return f"PONG {token}"


def encode_line(line: str) -> bytes:
    return f"{line}{LINE_TERMINATOR}".encode()
