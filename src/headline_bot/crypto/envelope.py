"""Envelope codec: signature verification, decryption and sealing.

Inbound content is verified against the sender's registered key before it is
decrypted. Outbound content is encrypted for the receiver and the ciphertext
is signed by the sending identity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from cryptography.exceptions import InvalidTag

from headline_bot.crypto.keys import Identity
from headline_bot.exceptions import AuthenticationError, DecryptionError
from headline_bot.models import InboundMessage, SealedMessage

if TYPE_CHECKING:
    from headline_bot.services.lookup import LookupService

logger = structlog.get_logger()


class EnvelopeCodec:
    """Opens inbound messages and seals outbound ones.

    Sender keys are resolved through ``lookup``. Receiver keys for sealing go
    through ``recipient_lookup``, which defaults to the same service.
    """

    def __init__(
        self, lookup: LookupService, recipient_lookup: LookupService | None = None
    ) -> None:
        self.lookup = lookup
        self.recipient_lookup = recipient_lookup or lookup

    async def open(self, identity: Identity, message: InboundMessage) -> bytes:
        """Verify and decrypt a message received by ``identity``.

        Raises:
            NameLookupError: If the sender's key cannot be resolved.
            AuthenticationError: If the signature does not match the sender's key.
            DecryptionError: If the content cannot be decrypted.
        """
        sender_key = await self.lookup.lookup_key(message.sender)

        if not sender_key.verify(message.signature, message.content):
            raise AuthenticationError(f"signature verification failed for sender {message.sender!r}")

        try:
            return identity.private_key.decrypt(message.content, sender_key)
        except (InvalidTag, ValueError) as exc:
            raise DecryptionError(f"failed to decrypt message from {message.sender!r}") from exc

    async def seal(self, identity: Identity, plaintext: bytes, receiver: str) -> SealedMessage:
        """Encrypt ``plaintext`` for ``receiver`` and sign it as ``identity``.

        Raises:
            NameLookupError: If the receiver's key cannot be resolved.
        """
        receiver_key = await self.recipient_lookup.lookup_key(receiver)
        content = identity.private_key.encrypt(plaintext, receiver_key)
        logger.debug("message_sealed", sender=identity.name, receiver=receiver, size=len(content))
        return SealedMessage(
            sender=identity.name,
            receiver=receiver,
            content=content,
            signature=identity.private_key.sign(content),
        )
