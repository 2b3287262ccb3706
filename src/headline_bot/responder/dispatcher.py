"""Request dispatching and reply routing.

A request whose subject is an article id is answered with that article, sent
from the article-delivery identity. Every other request is answered with the
digest of current headlines, sent from the identity that was polled.
"""

from __future__ import annotations

import structlog

from headline_bot.config import Settings
from headline_bot.crypto.envelope import EnvelopeCodec
from headline_bot.crypto.keys import Identity
from headline_bot.exceptions import CacheMissError
from headline_bot.mail.compose import create_text_email
from headline_bot.mail.parsing import derive_intent
from headline_bot.models import DecryptedDocument, Headline, InboundMessage, IntentKind
from headline_bot.models.document import Address, Email
from headline_bot.news.cache import HeadlineStore
from headline_bot.services.dump import DumpService

logger = structlog.get_logger()

HEADLINES_SUBJECT = "Последние новости о войне"

DIGEST_HEADER = """Новости Си-Эн-Эн

Каждая статья имеет номер. Пошлите сообщение с этим номером в теме чтобы получить статью полностью.

Если вы пользуетесь зашифрованной почтой Ubikom, то ваше взаимодействие с war-info@ubikom.cc не регистрируется и
не отслеживается. Метаинформация о ваших сообщениях всегда зашифрована. Обслуживающие серверы находятся
за пределами РФ. Регестрируйтесь здесь: https://ubikom.cc/ru/index.html.

"""

DIGEST_FOOTER = "\n"


def reply_receiver(sender: str, gateway: str = "gateway") -> str:
    """Pick the name a reply to ``sender`` is delivered to."""
    receiver = gateway
    if sender != gateway:
        receiver = sender
    return receiver


def digest_body(headlines: list[Headline]) -> str:
    lines = "".join(f"[{h.id}] {h.title}\n\n" for h in headlines)
    return DIGEST_HEADER + lines + DIGEST_FOOTER


class Dispatcher:
    """Answers decrypted requests."""

    def __init__(
        self,
        cache: HeadlineStore,
        codec: EnvelopeCodec,
        dump: DumpService,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            cache: Headline cache replies are built from.
            codec: Codec sealing replies for their receiver.
            dump: Dump service replies are sent through.
            settings: Application settings. If None, uses default settings.
        """
        from headline_bot.config import get_settings

        self.settings = settings or get_settings()
        self.cache = cache
        self.codec = codec
        self.dump = dump

    async def dispatch(
        self, identity: Identity, message: InboundMessage, document: DecryptedDocument
    ) -> bool:
        """Reply to one request.

        Returns:
            True if a reply was sent, False if the request was dropped.

        Raises:
            NameLookupError: If the receiver's key cannot be resolved.
            TransportError: If the reply cannot be sent.
        """
        intent = derive_intent(document.subject)
        receiver = reply_receiver(message.sender, self.settings.gateway_name)

        if intent.kind is IntentKind.ARTICLE:
            assert intent.article_id is not None
            email = self._article_email(intent.article_id, document.from_address)
            if email is None:
                return False
        else:
            email = Email(
                from_=Address(address=f"{identity.name}@{self.settings.mail_domain}"),
                to=[Address(address=document.from_address)],
                subject=HEADLINES_SUBJECT,
                body=digest_body(self.cache.get_headlines()),
            )

        return await self._send(identity, email, receiver)

    def _article_email(self, article_id: int, to: str) -> Email | None:
        logger.debug("getting_article", id=article_id)
        try:
            article = self.cache.get_article(article_id)
        except CacheMissError as exc:
            logger.error("error_retrieving_article", id=article_id, error=str(exc))
            return None
        except Exception as exc:  # noqa: BLE001
            logger.exception("error_retrieving_article", id=article_id, error=str(exc))
            return None

        return Email(
            from_=Address(
                address=self.settings.article_sender_address,
                name=self.settings.article_sender_name,
            ),
            to=[Address(address=to)],
            subject=article.headline,
            body=article.text,
        )

    async def _send(self, identity: Identity, email: Email, receiver: str) -> bool:
        try:
            content = create_text_email(email)
        except Exception as exc:  # noqa: BLE001
            logger.error("failed_to_create_email", receiver=receiver, error=str(exc))
            return False

        sealed = await self.codec.seal(identity, content, receiver)
        await self.dump.send(sealed)
        logger.info("message_sent", to=receiver, subject=email.subject)
        return True
