"""Inbox poller.

Drains one identity's inbox per call: receive, open, parse and dispatch until
the dump service reports the inbox empty. A fatal error ends the drain and is
returned in the outcome rather than raised, leaving the policy to the caller.
"""

from __future__ import annotations

import structlog

from headline_bot.crypto.envelope import EnvelopeCodec
from headline_bot.crypto.keys import Identity
from headline_bot.exceptions import HeadlineBotError, ParseError
from headline_bot.mail.parsing import parse_document
from headline_bot.models import InboundMessage, PollOutcome, PollStatus
from headline_bot.responder.dispatcher import Dispatcher
from headline_bot.services.dump import DumpService

logger = structlog.get_logger()


class InboxPoller:
    """Drains identity inboxes and hands each message to the dispatcher."""

    def __init__(self, dump: DumpService, codec: EnvelopeCodec, dispatcher: Dispatcher) -> None:
        self.dump = dump
        self.codec = codec
        self.dispatcher = dispatcher

    async def drain(self, identity: Identity) -> PollOutcome:
        """Process every message waiting for ``identity``.

        Args:
            identity: Identity whose inbox is drained. Its proof is created on
                first use and reused afterwards.

        Returns:
            PollOutcome: ``drained`` once the inbox is empty, or ``failed``
                with the error that stopped the drain.
        """
        proof = identity.ensure_proof()
        outcome = PollOutcome(identity=identity.name, status=PollStatus.DRAINED)

        try:
            while True:
                message = await self.dump.receive(proof)
                if message is None:
                    break
                outcome.processed += 1
                if await self.process(identity, message):
                    outcome.replied += 1
                else:
                    outcome.skipped += 1
        except HeadlineBotError as exc:
            logger.error(
                "inbox_drain_failed",
                identity=identity.name,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            outcome.status = PollStatus.FAILED
            outcome.error = exc

        if outcome.processed:
            logger.info(
                "inbox_drained",
                identity=identity.name,
                status=outcome.status.value,
                processed=outcome.processed,
                replied=outcome.replied,
                skipped=outcome.skipped,
            )
        return outcome

    async def process(self, identity: Identity, message: InboundMessage) -> bool:
        """Open, parse and answer a single message.

        Returns:
            True if a reply was sent.

        Raises:
            HeadlineBotError: For fatal envelope, lookup and transport failures.
        """
        content = await self.codec.open(identity, message)

        try:
            document = parse_document(content)
        except ParseError as exc:
            logger.error("failed_to_read_message", sender=message.sender, error=str(exc))
            return False

        logger.debug("got_address", to=document.from_address, subject=document.subject)
        return await self.dispatcher.dispatch(identity, message, document)
