"""Composition of plain-text reply documents."""

from __future__ import annotations

from email import policy
from email.headerregistry import Address as HeaderAddress
from email.message import EmailMessage

from headline_bot.models.document import Address, Email


def _header_address(address: Address) -> HeaderAddress:
    return HeaderAddress(display_name=address.name, addr_spec=address.address)


def create_text_email(email: Email) -> bytes:
    """Render an email as a single inline UTF-8 text document.

    The body is base64 encoded so it survives transport byte for byte.
    """
    message = EmailMessage(policy=policy.default)
    message["Date"] = email.date
    message["From"] = _header_address(email.from_)
    message["To"] = [_header_address(a) for a in email.to]
    if email.cc is not None:
        message["Cc"] = [_header_address(a) for a in email.cc]
    message["Subject"] = email.subject
    message.set_payload(email.body, charset="utf-8")
    message.set_param("format", "flowed")
    message["Content-Language"] = "ru"
    return message.as_bytes()
