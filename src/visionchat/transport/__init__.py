"""Transport layer: the only piece of visionchat that touches the network."""

from .base import CHAT_PATH, IMAGE_PATH, TransportGateway
from .factory import create_transport_gateway
from .http_gateway import HttpGateway
from .models import RawResponse
from .scripted import ScriptedGateway

__all__ = [
    "CHAT_PATH",
    "IMAGE_PATH",
    "HttpGateway",
    "RawResponse",
    "ScriptedGateway",
    "TransportGateway",
    "create_transport_gateway",
]
