from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from .models import RawResponse

CHAT_PATH = "/generate_chat"
IMAGE_PATH = "/generate_image"


class TransportGateway(ABC):
    """Abstract base class for the backend transport.

    This module hides the design decision of how a JSON body reaches the
    backend. Implementations must:
    - Issue exactly one request per call (no retries, no batching)
    - Send the body as JSON with ``Content-Type: application/json``
    - Convert network failures into ``TransportError``
    - Hand back the body undecoded, whatever the status code

    Supports async context manager protocol for proper resource cleanup:
        async with gateway:
            response = await gateway.post(CHAT_PATH, body)
    """

    @abstractmethod
    async def post(self, path: str, body: Mapping[str, Any]) -> RawResponse:
        """POST a JSON body to a backend path.

        Args:
            path: Endpoint path relative to the base URL (e.g. ``/generate_chat``)
            body: JSON-serializable request body

        Returns:
            RawResponse with the undecoded body

        Raises:
            TransportError: On any network-level failure
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "TransportGateway":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup,
        raised by httpx/anyio when the loop shuts down first:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
