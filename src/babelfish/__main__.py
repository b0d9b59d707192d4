"""Entry point for `python -m babelfish`."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv


def main() -> None:
    # Load .env from canonical locations before anything else.
    load_dotenv("config/.env")
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    log = logging.getLogger("babelfish")

    from babelfish.config import REQUIRED_KEYS, has_config

    if not has_config():
        log.error("No configuration found (need %s).", ", ".join(REQUIRED_KEYS))
        log.error(
            "Copy config/.env.example to config/.env and fill it in, "
            "or set the variables in the environment, then restart."
        )
        sys.exit(1)

    try:
        from babelfish.config import get_settings

        settings = get_settings()
    except Exception as e:
        log.error("Configuration error: %s", e)
        log.error("")
        log.error("  How to fix:")
        log.error("  1. Edit config/.env (or set environment variables)")
        log.error("  2. AGGREGATE_CHANNEL_ID must be a channel id")
        log.error("  3. SOURCE_CHANNEL_LANGUAGE pairs look like channel_id:LANG")
        log.error("     e.g. SOURCE_CHANNEL_LANGUAGE=1234:FR,5678:DE")
        sys.exit(1)

    logging.getLogger().setLevel(settings.LOG_LEVEL)
    log.info("Starting Babelfish...")
    log.info("Aggregate channel: %s (%s)", settings.AGGREGATE_CHANNEL_ID, settings.DEFAULT_LANGUAGE)
    log.info("Source channels: %s", settings.SOURCE_CHANNEL_LANGUAGE)

    from babelfish.bot import BabelfishBot

    bot = BabelfishBot(settings)
    bot.run(settings.DISCORD_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
