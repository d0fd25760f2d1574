"""
Visionchat: async chat and image-generation clients for a generative-AI backend.

Each module hides a single design decision:
- transport: how a JSON body reaches the backend
- parsing: how a reply body becomes text or an image reference
- chat / images: conversation and image-history state
"""

__version__ = "0.1.0"

from .chat import ChatModel, ConversationClient, ConversationState, Message, Role
from .config import ClientSettings, load_settings
from .errors import (
    ConfigurationError,
    DecodeError,
    InputValidationError,
    TransportError,
    VisionChatError,
)
from .images import ImageGenerationClient, ImageModel, ImageState
from .parsing import ResponseFormat
from .transport import RawResponse, TransportGateway, create_transport_gateway

__all__ = [
    "ChatModel",
    "ClientSettings",
    "ConfigurationError",
    "ConversationClient",
    "ConversationState",
    "DecodeError",
    "ImageGenerationClient",
    "ImageModel",
    "ImageState",
    "InputValidationError",
    "Message",
    "RawResponse",
    "ResponseFormat",
    "Role",
    "TransportError",
    "TransportGateway",
    "VisionChatError",
    "create_transport_gateway",
    "load_settings",
]
