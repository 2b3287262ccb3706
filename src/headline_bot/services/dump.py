"""Dump service client.

The dump service is the remote store-and-forward inbox. `receive` drains one
message at a time; an empty inbox is signalled with HTTP 404 and surfaces as
``None``. Every other failure is a `TransportError`.
"""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from headline_bot.config import Settings
from headline_bot.exceptions import TransportError
from headline_bot.models import WIRE_CONFIG, InboundMessage, SealedMessage, Signed

logger = structlog.get_logger()


class DumpService(Protocol):
    """Store-and-forward inbox."""

    async def receive(self, identity_proof: Signed) -> InboundMessage | None: ...

    async def send(self, message: SealedMessage) -> None: ...


class _ReceiveRequest(BaseModel):
    model_config = WIRE_CONFIG

    identity_proof: Signed


class _ReceiveResponse(BaseModel):
    model_config = WIRE_CONFIG

    message: InboundMessage


class _SendRequest(BaseModel):
    model_config = WIRE_CONFIG

    message: SealedMessage


class DumpClient:
    """Dump service client speaking JSON over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the dump client.

        Args:
            base_url: Dump service URL.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        logger.info("dump_client_initialized", url=base_url)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> DumpClient:
        return cls(settings.dump_service_url, timeout=settings.connect_timeout, transport=transport)

    async def receive(self, identity_proof: Signed) -> InboundMessage | None:
        """Take the next message from the inbox the proof authorizes.

        Returns:
            The message, or None when the inbox is empty.

        Raises:
            TransportError: If the request fails or the response is malformed.
        """
        request = _ReceiveRequest(identity_proof=identity_proof)
        response = await self._post("/v1/receive", request.model_dump_json())
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            raise TransportError(f"receive failed with status {response.status_code}")

        try:
            return _ReceiveResponse.model_validate_json(response.content).message
        except ValidationError as exc:
            raise TransportError(f"malformed receive response: {exc}") from exc

    async def send(self, message: SealedMessage) -> None:
        """Deliver a sealed message to its receiver's inbox.

        Raises:
            TransportError: If the request fails.
        """
        response = await self._post("/v1/send", _SendRequest(message=message).model_dump_json())
        if response.is_error:
            raise TransportError(
                f"send to {message.receiver!r} failed with status {response.status_code}"
            )
        logger.debug("message_delivered", receiver=message.receiver, size=len(message.content))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, body: str) -> httpx.Response:
        try:
            return await self._client.post(
                path, content=body, headers={"Content-Type": "application/json"}
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {path} failed: {exc}") from exc
