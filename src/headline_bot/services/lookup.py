"""Name lookup clients.

A name resolves to the compressed public key currently registered for it.
Which backends are consulted is decided once, at startup, by
`build_lookup_client`.
"""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from headline_bot.config import Settings
from headline_bot.crypto.keys import PublicKey
from headline_bot.exceptions import NameLookupError, TransportError
from headline_bot.models import WIRE_CONFIG

logger = structlog.get_logger()


class LookupService(Protocol):
    """Resolves identity names to public keys."""

    async def lookup_key(self, name: str) -> PublicKey: ...


class _LookupResponse(BaseModel):
    model_config = WIRE_CONFIG

    key: bytes


class HttpLookupClient:
    """Lookup service client speaking JSON over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the lookup client.

        Args:
            base_url: Lookup service URL.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        logger.info("lookup_client_initialized", url=base_url)

    async def lookup_key(self, name: str) -> PublicKey:
        """Resolve ``name`` to its public key.

        Raises:
            NameLookupError: If the name is not registered or its key is invalid.
            TransportError: If the request fails.
        """
        try:
            response = await self._client.get(f"/v1/names/{quote(name, safe='')}")
        except httpx.HTTPError as exc:
            raise TransportError(f"lookup of {name!r} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise NameLookupError(f"name not found: {name!r}")
        if response.is_error:
            raise TransportError(f"lookup of {name!r} failed with status {response.status_code}")

        try:
            key = _LookupResponse.model_validate_json(response.content).key
            return PublicKey.from_compressed(key)
        except (ValidationError, ValueError) as exc:
            raise NameLookupError(f"invalid public key for {name!r}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()


class ChainedLookupClient:
    """Consults each backend in turn until one knows the name."""

    def __init__(self, *backends: LookupService) -> None:
        if not backends:
            raise ValueError("at least one lookup backend is required")
        self.backends = backends

    async def lookup_key(self, name: str) -> PublicKey:
        error: NameLookupError | None = None
        for backend in self.backends:
            try:
                return await backend.lookup_key(name)
            except NameLookupError as exc:
                logger.debug("lookup_backend_miss", name=name, backend=type(backend).__name__)
                error = exc
        assert error is not None
        raise error

    async def aclose(self) -> None:
        for backend in self.backends:
            close = getattr(backend, "aclose", None)
            if close is not None:
                await close()


def legacy_lookup_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> HttpLookupClient:
    """Build a client for the legacy lookup service."""
    return HttpLookupClient(
        settings.lookup_service_url, timeout=settings.connect_timeout, transport=transport
    )


def build_lookup_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
    *,
    legacy: HttpLookupClient | None = None,
) -> HttpLookupClient | ChainedLookupClient:
    """Build the lookup client selected by the settings.

    Args:
        settings: Application settings.
        transport: Optional httpx transport, used by tests.
        legacy: Already built legacy lookup client to reuse.
    """
    if legacy is None:
        legacy = legacy_lookup_client(settings, transport)
    if settings.use_legacy_lookup_service:
        logger.info("using_legacy_lookup_service")
        return legacy

    logger.info("connecting_to_registry", url=settings.blockchain_node_url)
    registry = HttpLookupClient(
        settings.blockchain_node_url, timeout=settings.connect_timeout, transport=transport
    )
    return ChainedLookupClient(registry, legacy)
