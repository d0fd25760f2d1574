"""Chat flow: messages, conversation state, and the conversation client."""

from .client import ConversationClient
from .models import DEFAULT_SYSTEM_PROMPT, ChatModel, ChatRequest, ConversationState, Message, Role

__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "ChatModel",
    "ChatRequest",
    "ConversationClient",
    "ConversationState",
    "Message",
    "Role",
]
