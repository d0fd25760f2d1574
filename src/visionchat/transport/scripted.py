"""Scripted in-memory gateway.

Replies are queued per path and handed out in order. Every request is
recorded, so callers can inspect exactly what would have gone on the wire.
Suitable for testing and for running the CLI without a backend.
"""

import copy
from collections import defaultdict, deque
from collections.abc import Callable, Mapping
from typing import Any

from ..errors import TransportError
from .base import TransportGateway
from .models import RawResponse

Reply = str | bytes | RawResponse | BaseException


class ScriptedGateway(TransportGateway):
    """Gateway that answers from queued replies instead of the network."""

    def __init__(
        self,
        replies: Mapping[str, list[Reply]] | None = None,
        fallback: Callable[[str, Mapping[str, Any]], Reply] | None = None,
    ):
        """Initialize with optional queued replies.

        Args:
            replies: Queued replies keyed by path
            fallback: Called when a path's queue is empty; without one an
                empty queue raises TransportError
        """
        self._queues: dict[str, deque[Reply]] = defaultdict(deque)
        for path, items in (replies or {}).items():
            self._queues[path].extend(items)
        self._fallback = fallback
        self.requests: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def queue(self, path: str, *replies: Reply) -> None:
        """Append replies for a path."""
        self._queues[path].extend(replies)

    async def post(self, path: str, body: Mapping[str, Any]) -> RawResponse:
        self.requests.append((path, copy.deepcopy(dict(body))))

        if self._queues[path]:
            reply = self._queues[path].popleft()
        elif self._fallback is not None:
            try:
                reply = self._fallback(path, body)
            except Exception as e:
                reply = e
        else:
            raise TransportError(f"no scripted reply for {path}")

        if isinstance(reply, BaseException):
            if isinstance(reply, TransportError):
                raise reply
            raise TransportError(str(reply), cause=reply) from reply
        if isinstance(reply, RawResponse):
            return reply
        if isinstance(reply, str):
            reply = reply.encode("utf-8")
        return RawResponse(status_code=200, content=reply, url=f"scripted://{path.lstrip('/')}")

    async def close(self) -> None:
        self.closed = True
