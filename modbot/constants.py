"""
Configuration constants for the Twitch moderation bot

This module contains the tunable defaults used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Server endpoint
DEFAULT_SERVER = os.getenv("MODBOT_DEFAULT_SERVER", "irc.chat.twitch.tv")
DEFAULT_PORT = _get_env_int("MODBOT_DEFAULT_PORT", 6667)

# Config file location (JSON)
DEFAULT_CONFIG_FILE = "modbot.conf"

# Outbound chat cooldown (seconds between two chat sends)
MIN_SEND_INTERVAL_SECONDS = _get_env_float("MIN_SEND_INTERVAL_SECONDS", 3.0)

# Auto-broadcast defaults
DEFAULT_AUTO_MESSAGE = "This is an automessage message"
DEFAULT_AUTO_MESSAGE_INTERVAL_MINUTES = _get_env_float(
    "DEFAULT_AUTO_MESSAGE_INTERVAL_MINUTES", 5.0
)

# Connection establishment
CONNECT_TIMEOUT_SECONDS = _get_env_float("CONNECT_TIMEOUT_SECONDS", 10.0)
CONNECT_MAX_ATTEMPTS = _get_env_int(
    "CONNECT_MAX_ATTEMPTS", 10
)  # <= 0 means retry forever
CONNECT_BACKOFF_BASE_SECONDS = _get_env_float("CONNECT_BACKOFF_BASE_SECONDS", 1.0)
CONNECT_BACKOFF_MAX_SECONDS = _get_env_float("CONNECT_BACKOFF_MAX_SECONDS", 60.0)

# Shutdown: how long tasks get to unwind after quit before being abandoned
SHUTDOWN_GRACE_SECONDS = _get_env_float("SHUTDOWN_GRACE_SECONDS", 5.0)

# Inbound events waiting for the dispatch worker. Join/part announcements
# are skipped past the backlog limit; anything past the queue size is dropped.
ANNOUNCE_BACKLOG_LIMIT = _get_env_int("ANNOUNCE_BACKLOG_LIMIT", 25)
MAX_PENDING_EVENTS = _get_env_int("MAX_PENDING_EVENTS", 500)

# Link filter: message bodies containing any of these are treated as links
DEFAULT_LINK_SUFFIXES = (".com", ".net", ".org", ".tv", ".fm", ".gg")

# Chat texts
JOIN_ANNOUNCEMENT = "PogChamp User Joined: {user}"
PART_ANNOUNCEMENT = "BibleThump User Left: {user}"
NOT_A_MOD_MESSAGE = "You are not a mod {user}"
PRIVILEGED_TARGET_MESSAGE = "Unmod {user} before punishing"
DEFAULT_FAREWELL_MESSAGE = "Shutting down bot :("

# Protocol markers
COMMAND_PREFIX = "!"
LINE_TERMINATOR = "\r\n"
MEMBERSHIP_CAPABILITY = "twitch.tv/membership"
