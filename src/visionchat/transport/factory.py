from typing import Any

from .base import TransportGateway
from .http_gateway import HttpGateway
from .scripted import ScriptedGateway


def create_transport_gateway(kind: str = "http", **config: Any) -> TransportGateway:
    """Create a transport gateway instance.

    This factory function hides which gateway implementation is in use.

    Args:
        kind: Gateway type ('http' or 'scripted')
        **config: Gateway-specific configuration
            For http:
                - base_url: str (required)
                - timeout: float (default: 60.0)
                - strict_status: bool (default: False)
                - transport: httpx.AsyncBaseTransport | None
            For scripted:
                - replies: Mapping[str, list] | None
                - fallback: Callable | None

    Returns:
        Initialized gateway instance

    Raises:
        ValueError: If gateway type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> gateway = create_transport_gateway("http", base_url="http://localhost:8000")

        >>> gateway = create_transport_gateway(
        ...     "scripted",
        ...     replies={"/generate_chat": ["Hello!"]}
        ... )
    """
    kind_lower = kind.lower()

    if kind_lower == "http":
        if "base_url" not in config:
            raise TypeError("HTTP gateway requires 'base_url' in config")
        return HttpGateway(**config)

    if kind_lower == "scripted":
        return ScriptedGateway(**config)

    raise ValueError(
        f"Unsupported gateway: {kind}. "
        f"Supported gateways: 'http', 'scripted'"
    )
