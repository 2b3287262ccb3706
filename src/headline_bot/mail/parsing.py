"""Helpers for parsing decrypted requests into internal models."""

from __future__ import annotations

import re
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser

from headline_bot.exceptions import ParseError
from headline_bot.models import DecryptedDocument, Intent

# Article ids are 32-bit; out-of-range subjects saturate to these bounds.
MIN_ARTICLE_ID = -(2**31)
MAX_ARTICLE_ID = 2**31 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


def filter_malformed_headers(content: bytes) -> bytes:
    """Drop mbox artifacts from the header block.

    Lines starting with ``>From`` or with ``From`` not followed by a colon are
    removed until the first empty line. The body is left untouched.
    """
    kept: list[bytes] = []
    in_headers = True
    for line in content.split(b"\n"):
        if in_headers and line in (b"", b"\r"):
            in_headers = False
        if in_headers and (
            line.startswith(b">From")
            or (line.startswith(b"From") and not line.startswith(b"From:"))
        ):
            continue
        kept.append(line)
    return b"\n".join(kept)


def _header_map(message: EmailMessage) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    for name, value in message.items():
        result.setdefault(name.lower(), []).append(str(value))
    return result


def _body_text(message: EmailMessage) -> str:
    part = message.get_body(preferencelist=("plain",)) if message.is_multipart() else message
    if part is None:
        return ""
    content = part.get_content()
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def parse_document(content: bytes) -> DecryptedDocument:
    """Parse decrypted content into a document.

    Args:
        content: Decrypted message bytes, possibly carrying mbox artifacts.

    Returns:
        DecryptedDocument: Parsed headers, sender address, subject and body.

    Raises:
        ParseError: If the document cannot be read or its From header does not
            hold exactly one address.
    """
    try:
        message = BytesParser(policy=policy.default).parsebytes(filter_malformed_headers(content))
        from_header = message.get("From")
        if from_header is None:
            raise ParseError("missing From header")
        addresses = from_header.addresses
        if len(addresses) != 1:
            raise ParseError(f"expected exactly one From address, got {len(addresses)}")

        return DecryptedDocument(
            headers=_header_map(message),
            from_address=addresses[0].addr_spec,
            subject=str(message.get("Subject", "")),
            body=_body_text(message),
        )
    except ParseError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise ParseError(f"failed to read message: {exc}") from exc


def derive_intent(subject: str) -> Intent:
    """Classify a request by its subject.

    A subject that is entirely a non-zero base-10 integer asks for that
    article, clamped to the 32-bit range. Anything else, including zero,
    asks for the digest. Ids that were never issued simply miss the cache.
    """
    if not _INTEGER.fullmatch(subject):
        return Intent.digest()
    article_id = max(MIN_ARTICLE_ID, min(int(subject), MAX_ARTICLE_ID))
    if article_id == 0:
        return Intent.digest()
    return Intent.article(article_id)
