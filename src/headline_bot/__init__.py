"""Headline Bot - encrypted news responder.

This package drains encrypted store-and-forward inboxes for one or more
identities and answers each request with either a digest of current
headlines or the full text of a requested article.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from headline_bot.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
