"""Parsing and composition of the mail-like documents inside envelopes."""

from .compose import create_text_email
from .parsing import derive_intent, filter_malformed_headers, parse_document

__all__ = ["create_text_email", "derive_intent", "filter_malformed_headers", "parse_document"]
