"""Configuration loading: defaults, JSON file, environment, command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..constants import DEFAULT_CONFIG_FILE
from ..errors.internal import ConfigError
from .model import SessionConfig

# Environment variable -> SessionConfig field
ENV_OVERRIDES: dict[str, str] = {
    "MODBOT_SERVER": "server",
    "MODBOT_PORT": "port",
    "MODBOT_NICKNAME": "nickname",
    "MODBOT_CHANNEL": "channel",
    "MODBOT_TOKEN": "token",
    "MODBOT_AUTO_MESSAGE": "auto_message",
    "MODBOT_AUTO_MESSAGE_INTERVAL": "auto_message_interval",
    "MODBOT_MODERATORS": "moderators",
    "MODBOT_MIN_SEND_INTERVAL": "min_send_interval",
    "MODBOT_CONNECT_MAX_ATTEMPTS": "connect_max_attempts",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Twitch chat moderation bot with console control"
    )
    parser.add_argument("--config", help="Path to the JSON config file")
    parser.add_argument("--channel", help="The channel for the bot to go to")
    parser.add_argument("--nickname", help="The bot's username")
    parser.add_argument("--automessage", help="The automatic timed message")
    parser.add_argument(
        "--automessage-interval",
        type=float,
        help="Minutes between automatic messages (0 disables)",
    )
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Validate the configuration and exit",
    )
    return parser


def load_config_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Load raw settings from a JSON config file.

    A missing file yields an empty mapping so environment and flags alone
    can configure the bot.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    file_path = Path(path)
    try:
        with file_path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logging.debug(f"📁 Config file not found path={file_path}")
        return {}
    except (OSError, ValueError) as e:
        raise ConfigError(
            f"Cannot read config file {file_path}: {e}", data={"path": str(file_path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {file_path} must contain a JSON object",
            data={"path": str(file_path)},
        )
    return data


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    return {
        field: env[name]
        for name, field in ENV_OVERRIDES.items()
        if env.get(name, "").strip()
    }


def cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    mapping = {
        "channel": args.channel,
        "nickname": args.nickname,
        "auto_message": args.automessage,
        "auto_message_interval": args.automessage_interval,
    }
    return {k: v for k, v in mapping.items() if v is not None}


def load_session_config(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[SessionConfig, argparse.Namespace]:
    """Build the SessionConfig from all configuration layers.

    Precedence (later wins): model defaults, JSON file, environment, flags.

    Returns:
        Tuple of (config, parsed command-line arguments).

    Raises:
        ConfigError: If the merged settings are invalid.
    """
    args = build_arg_parser().parse_args(argv)
    env = os.environ if environ is None else environ
    config_file = args.config or env.get("MODBOT_CONF_FILE", DEFAULT_CONFIG_FILE)

    merged: dict[str, Any] = {}
    merged.update(load_config_file(config_file))
    merged.update(env_overrides(env))
    merged.update(cli_overrides(args))

    try:
        config = SessionConfig.from_dict(merged)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigError(
            f"Invalid configuration ({', '.join(fields)})",
            data={"config_file": str(config_file)},
        ) from e
    logging.debug(f"✅ Configuration loaded file={config_file}")
    return config, args
