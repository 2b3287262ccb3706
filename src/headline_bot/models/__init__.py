"""Data models for Headline Bot.

This module contains Pydantic models for the messages that travel through the
responder pipeline, the values derived from them, and the results it reports.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from headline_bot.models.document import DecryptedDocument, Email

# Binary fields travel as base64 strings in JSON.
WIRE_CONFIG = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")


class Signed(BaseModel):
    """Content signed by an identity key, with the compressed public key attached."""

    model_config = WIRE_CONFIG

    content: bytes = Field(description="Signed content")
    signature: bytes = Field(description="DER-encoded ECDSA signature over the content")
    key: bytes = Field(description="Compressed public key of the signer")


class InboundMessage(BaseModel):
    """Encrypted message drained from the dump service."""

    model_config = WIRE_CONFIG

    sender: str = Field(description="Name of the sending identity")
    receiver: str = Field(default="", description="Name of the receiving identity")
    content: bytes = Field(description="Encrypted content")
    signature: bytes = Field(description="Sender's signature over the encrypted content")


class SealedMessage(BaseModel):
    """Encrypted and signed message ready to be handed to the dump service."""

    model_config = WIRE_CONFIG

    sender: str = Field(description="Name of the sending identity")
    receiver: str = Field(description="Name of the receiving identity")
    content: bytes = Field(description="Encrypted content")
    signature: bytes = Field(description="Sender's signature over the encrypted content")


class IntentKind(str, Enum):
    """What the sender of a request asked for."""

    DIGEST = "digest"
    ARTICLE = "article"


class Intent(BaseModel):
    """Request classification derived from a subject line."""

    kind: IntentKind = Field(description="Requested reply type")
    article_id: Optional[int] = Field(default=None, description="Requested article id")

    @classmethod
    def digest(cls) -> "Intent":
        return cls(kind=IntentKind.DIGEST)

    @classmethod
    def article(cls, article_id: int) -> "Intent":
        return cls(kind=IntentKind.ARTICLE, article_id=article_id)


class Headline(BaseModel):
    """Digest entry held by the headline cache."""

    id: int = Field(description="Article id quoted in the digest")
    title: str = Field(description="Headline text")
    added: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the article was first seen",
    )


class Article(BaseModel):
    """Full article returned for an article request."""

    headline: str = Field(description="Article headline, used as the reply subject")
    text: str = Field(description="Full article text, used as the reply body")


class PollStatus(str, Enum):
    """Terminal state of one identity's inbox drain."""

    DRAINED = "drained"
    FAILED = "failed"


class PollOutcome(BaseModel):
    """Result of draining one identity's inbox for a single poll cycle."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    identity: str = Field(description="Name of the polled identity")
    status: PollStatus = Field(description="Whether the drain completed or failed")
    processed: int = Field(default=0, description="Messages received and decrypted")
    replied: int = Field(default=0, description="Replies sent")
    skipped: int = Field(default=0, description="Messages dropped without a reply")
    error: Optional[Exception] = Field(default=None, description="Failure that ended the drain")


__all__ = [
    "Article",
    "DecryptedDocument",
    "Email",
    "Headline",
    "InboundMessage",
    "Intent",
    "IntentKind",
    "PollOutcome",
    "PollStatus",
    "SealedMessage",
    "Signed",
]
