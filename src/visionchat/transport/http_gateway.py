import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..errors import TransportError
from .base import TransportGateway
from .models import RawResponse

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class HttpGateway(TransportGateway):
    """httpx-backed gateway for the generation backend.

    Hidden design decisions:
    - Connection handling (one pooled ``httpx.AsyncClient`` per gateway)
    - Timeout policy (single overall timeout, no per-call override)
    - Which failures count as transport errors
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        strict_status: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
        **client_kwargs: Any
    ):
        """Initialize the gateway.

        Args:
            base_url: Backend root, e.g. ``http://localhost:8000``
            timeout: Overall request timeout in seconds
            strict_status: Raise TransportError on non-2xx instead of passing the body through
            transport: Optional httpx transport (``httpx.MockTransport`` in tests)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._base_url = base_url.rstrip("/")
        self._strict_status = strict_status
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            **client_kwargs
        )

    @property
    def base_url(self) -> str:
        """Get the backend base URL."""
        return self._base_url

    async def post(self, path: str, body: Mapping[str, Any]) -> RawResponse:
        """POST a JSON body and return the undecoded response."""
        logger.debug("POST %s%s", self._base_url, path)
        if self._client.is_closed:
            raise TransportError(f"gateway for {self._base_url} is closed")
        try:
            response = await self._client.post(path, json=dict(body), headers=JSON_HEADERS)
        except httpx.RequestError as e:
            logger.error("Request to %s%s failed: %s", self._base_url, path, e)
            raise TransportError(f"{type(e).__name__}: {e}", cause=e) from e

        raw = RawResponse(
            status_code=response.status_code,
            content=response.content,
            url=str(response.url),
        )
        if not raw.is_success:
            if self._strict_status:
                raise TransportError(f"{path} returned HTTP {raw.status_code}")
            logger.warning("%s returned HTTP %d, passing body through", path, raw.status_code)
        return raw

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
