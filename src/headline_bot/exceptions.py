"""Custom exceptions for Headline Bot.

Every error carries a ``fatal`` flag. Fatal errors stop the responder and end
the process; the others are absorbed per message or per refresh tick.
"""


class HeadlineBotError(Exception):
    """Base exception for all Headline Bot errors."""

    fatal = True


class ConfigurationError(HeadlineBotError):
    """Exception raised for configuration related errors."""


class TransportError(HeadlineBotError):
    """Exception raised when a dump or lookup request fails."""


class AuthenticationError(HeadlineBotError):
    """Exception raised when a message signature does not verify."""


class DecryptionError(HeadlineBotError):
    """Exception raised when message content cannot be decrypted."""


class NameLookupError(HeadlineBotError):
    """Exception raised when a name cannot be resolved to a public key."""


class ParseError(HeadlineBotError):
    """Exception raised for malformed decrypted documents."""

    fatal = False


class CacheMissError(HeadlineBotError):
    """Exception raised when an article is not in the headline cache."""

    fatal = False


class RefreshError(HeadlineBotError):
    """Exception raised when the headline cache cannot be refreshed."""

    fatal = False
