"""The poll, dispatch and reply pipeline."""

from .dispatcher import Dispatcher, digest_body, reply_receiver
from .poller import InboxPoller
from .service import Responder

__all__ = ["Dispatcher", "InboxPoller", "Responder", "digest_body", "reply_receiver"]
