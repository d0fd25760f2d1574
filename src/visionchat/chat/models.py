"""Data models for the chat flow.

These models define messages, the wire request, and the immutable
conversation state, independent of the transport used.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SYSTEM_PROMPT = "You are a chatbot designed to assist users with their queries."


class Role(str, Enum):
    """Role of a message sender."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatModel(str, Enum):
    """Chat models the backend accepts."""

    GPT_4_TURBO = "gpt-4-turbo"
    GPT_35_TURBO = "gpt-3.5-turbo"


class Message(BaseModel):
    """A single message in a conversation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Opaque unique identifier")
    role: Role = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")

    def to_wire(self) -> dict[str, str]:
        """Convert to the role/content pair sent to the backend."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from a role/content pair (a fresh id is assigned)."""
        return cls(role=Role(data["role"]), content=data["content"])


class ChatRequest(BaseModel):
    """Body of a ``/generate_chat`` request."""

    model_config = ConfigDict(frozen=True)

    model: ChatModel
    messages: tuple[Message, ...] = ()

    def to_body(self) -> dict[str, Any]:
        """Serialize to the JSON body."""
        return {
            "model": self.model.value,
            "messages": [msg.to_wire() for msg in self.messages],
        }

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "ChatRequest":
        """Parse a JSON body back into a request."""
        return cls(
            model=ChatModel(body["model"]),
            messages=tuple(Message.from_wire(item) for item in body.get("messages", [])),
        )


class ConversationState(BaseModel):
    """Complete conversation state for one UI session.

    Never mutated in place: every transition returns a new instance.
    Nothing here is persisted.
    """

    model_config = ConfigDict(frozen=True)

    transcript: tuple[Message, ...] = Field(default=(), description="Chronological messages")
    model: ChatModel = Field(default=ChatModel.GPT_4_TURBO, description="Model used by send_message")
    draft: str = Field(default="", description="Unsent input buffer")
    is_loading: bool = False
    is_error: bool = Field(default=False, description="Set when the bootstrap call failed")
    last_error: str | None = None

    @property
    def last_reply(self) -> Message | None:
        """Most recent assistant message, if any."""
        for msg in reversed(self.transcript):
            if msg.role is Role.ASSISTANT:
                return msg
        return None
