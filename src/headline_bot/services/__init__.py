"""Clients for the remote dump and lookup services."""

from .dump import DumpClient, DumpService
from .lookup import (
    ChainedLookupClient,
    HttpLookupClient,
    LookupService,
    build_lookup_client,
    legacy_lookup_client,
)

__all__ = [
    "ChainedLookupClient",
    "DumpClient",
    "DumpService",
    "HttpLookupClient",
    "LookupService",
    "build_lookup_client",
    "legacy_lookup_client",
]
