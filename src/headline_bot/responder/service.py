"""Responder supervisor.

Runs two periodic tasks until stopped: the poll loop, which drains every
identity's inbox in turn, and the refresh loop, which keeps the headline cache
current. A failed drain stops both tasks and its error is re-raised to the
caller.
"""

from __future__ import annotations

import asyncio

import structlog

from headline_bot.config import Settings
from headline_bot.crypto.keys import Identity
from headline_bot.exceptions import RefreshError
from headline_bot.models import PollOutcome, PollStatus
from headline_bot.news.cache import HeadlineStore
from headline_bot.responder.poller import InboxPoller

logger = structlog.get_logger()


class Responder:
    """Polls identity inboxes on a fixed interval and refreshes the cache."""

    def __init__(
        self,
        identities: list[Identity],
        poller: InboxPoller,
        cache: HeadlineStore,
        settings: Settings | None = None,
    ) -> None:
        from headline_bot.config import get_settings

        self.settings = settings or get_settings()
        self.identities = identities
        self.poller = poller
        self.cache = cache
        self._stop = asyncio.Event()

    def stop(self) -> None:
        """Ask both periodic tasks to finish."""
        logger.info("responder_stop_requested")
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    async def poll_once(self) -> list[PollOutcome]:
        """Drain every identity once, sequentially.

        Stops at the first failed drain; its outcome is the last in the list.
        """
        outcomes: list[PollOutcome] = []
        for identity in self.identities:
            outcome = await self.poller.drain(identity)
            outcomes.append(outcome)
            if outcome.status is PollStatus.FAILED:
                break
        return outcomes

    async def refresh_once(self) -> bool:
        """Refresh the headline cache; failures are logged and reported as False."""
        try:
            await asyncio.to_thread(self.cache.refresh)
        except RefreshError as exc:
            logger.error("error_refreshing_headlines", error=str(exc))
            return False
        return True

    async def run(self) -> None:
        """Run until `stop` is called or a drain fails.

        Raises:
            RefreshError: If the initial cache refresh fails.
            HeadlineBotError: The error of the first failed drain.
        """
        for identity in self.identities:
            identity.ensure_proof()

        try:
            await asyncio.to_thread(self.cache.refresh)
        except RefreshError as exc:
            logger.error("failed_to_get_headlines", error=str(exc))
            raise

        logger.info(
            "responder_started",
            identities=[i.name for i in self.identities],
            poll_interval=self.settings.poll_interval,
            refresh_interval=self.settings.refresh_interval,
        )

        refresher = asyncio.create_task(self._refresh_loop())
        try:
            await self._poll_loop()
        finally:
            self._stop.set()
            await refresher
            logger.info("responder_stopped")

    async def _poll_loop(self) -> None:
        while not self._stop.is_set():
            for outcome in await self.poll_once():
                if outcome.status is PollStatus.FAILED and outcome.error is not None:
                    raise outcome.error
            if await self._wait(self.settings.poll_interval):
                return

    async def _refresh_loop(self) -> None:
        while not await self._wait(self.settings.refresh_interval):
            await self.refresh_once()

    async def _wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; True if a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
