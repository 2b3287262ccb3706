"""Command-line interface for Headline Bot.

This module provides the main entry point: it loads the identities, wires the
service clients and runs the responder until it is stopped or fails.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from datetime import timedelta
from pathlib import Path

import structlog

from headline_bot import __version__
from headline_bot.config import LOG_LEVELS, Settings, get_settings
from headline_bot.crypto.envelope import EnvelopeCodec
from headline_bot.crypto.keys import load_identities
from headline_bot.exceptions import HeadlineBotError
from headline_bot.news.cache import HeadlineCache
from headline_bot.news.feed import FeedSource
from headline_bot.responder.dispatcher import Dispatcher
from headline_bot.responder.poller import InboxPoller
from headline_bot.responder.service import Responder
from headline_bot.services.dump import DumpClient
from headline_bot.services.lookup import build_lookup_client, legacy_lookup_client

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="headline-bot", description="Headline Bot")
    parser.add_argument("--dump-service-url", default=None, help="Dump service URL")
    parser.add_argument("--lookup-service-url", default=None, help="Lookup service URL")
    parser.add_argument(
        "--key",
        dest="keys",
        action="append",
        type=Path,
        default=None,
        help="Identity key file named <identity>.<ext> (repeatable)",
    )
    parser.add_argument("--blockchain-node-url", default=None, help="Name registry endpoint URL")
    parser.add_argument(
        "--use-legacy-lookup-service",
        action="store_true",
        default=None,
        help="Resolve names through the legacy lookup service only",
    )
    parser.add_argument("--feed-url", default=None, help="RSS feed headlines are taken from")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: settings log_level)",
    )
    return parser


def _apply_overrides(settings: Settings, parsed: argparse.Namespace) -> Settings:
    overrides = {
        "dump_service_url": parsed.dump_service_url,
        "lookup_service_url": parsed.lookup_service_url,
        "key_files": parsed.keys,
        "blockchain_node_url": parsed.blockchain_node_url,
        "use_legacy_lookup_service": parsed.use_legacy_lookup_service,
        "feed_url": parsed.feed_url,
        "log_level": parsed.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


async def _run(settings: Settings) -> None:
    identities = load_identities(settings.key_files, settings.key_password)

    dump = DumpClient.from_settings(settings)
    legacy = legacy_lookup_client(settings)
    lookup = build_lookup_client(settings, legacy=legacy)
    source = FeedSource(settings.feed_url, timeout=settings.connect_timeout * 6)
    cache = HeadlineCache(source, ttl=timedelta(seconds=settings.article_ttl))

    codec = EnvelopeCodec(lookup, recipient_lookup=legacy)
    dispatcher = Dispatcher(cache, codec, dump, settings)
    responder = Responder(identities, InboxPoller(dump, codec, dispatcher), cache, settings)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, responder.stop)

    try:
        await responder.run()
    finally:
        await dump.aclose()
        await lookup.aclose()
        source.close()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Headline Bot CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 after a requested stop, 1 after a fatal error).
    """
    if args is None:
        args = sys.argv[1:]

    parsed = _build_parser().parse_args(args)
    settings = _apply_overrides(get_settings(), parsed)

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
    )

    logger.info("headline_bot_started", version=__version__, debug=settings.debug)

    try:
        asyncio.run(_run(settings))
    except HeadlineBotError as exc:
        logger.error("headline_bot_failed", error_type=type(exc).__name__, error=str(exc))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
