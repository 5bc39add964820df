#!/usr/bin/env python3
"""
Main entry point for the Twitch moderation bot
"""

import asyncio
import logging
import sys

from modbot.bot.runner import run_bot
from modbot.config.loader import load_session_config
from modbot.errors.handling import log_error
from modbot.errors.internal import ConfigError
from modbot.logging_config import LoggerConfigurator


def main(argv: list[str] | None = None) -> int:
    """Load configuration, then run the bot or the health check."""
    LoggerConfigurator().configure()
    try:
        config, args = load_session_config(argv)
    except ConfigError as e:
        log_error("Configuration error", e)
        return 1

    if args.health_check:
        logging.info(
            f"🏥 Health check passed - nickname={config.nickname} channel={config.channel}"
        )
        return 0

    try:
        return asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        logging.warning("⌨️ Interrupted by user")
        return 0
    finally:
        logging.info("🏁 Application shutdown complete")


if __name__ == "__main__":
    sys.exit(main())
