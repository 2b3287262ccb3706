"""Mail-like document models.

`DecryptedDocument` is what the parser produces from decrypted content;
`Email` is what the composer turns into bytes for a reply.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Address(BaseModel):
    """A single mailbox, optionally with a display name."""

    address: str = Field(description="Mailbox address")
    name: str = Field(default="", description="Display name")


class DecryptedDocument(BaseModel):
    """Header and body of a decrypted request."""

    headers: dict[str, list[str]] = Field(
        default_factory=dict, description="Header values keyed by lower-case field name"
    )
    from_address: str = Field(description="The single address in the From header")
    subject: str = Field(default="", description="Subject header")
    body: str = Field(default="", description="Text body")


class Email(BaseModel):
    """Reply document to be composed."""

    from_: Address = Field(alias="from", description="Sender mailbox")
    to: list[Address] = Field(default_factory=list, description="Recipient mailboxes")
    cc: list[Address] | None = Field(default=None, description="Carbon-copy mailboxes")
    subject: str = Field(default="", description="Subject header")
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Date header"
    )
    body: str = Field(default="", description="Text body")

    model_config = {"populate_by_name": True}
