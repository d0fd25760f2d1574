"""Pure state transitions for a conversation.

Each function takes a ConversationState and returns a new one; none of
them touch the network. The client composes these around gateway calls.
"""

from ..errors import InputValidationError
from .models import ChatModel, ChatRequest, ConversationState, Message, Role


def coerce_chat_model(value: ChatModel | str) -> ChatModel:
    """Validate a model name against the chat allow-list."""
    try:
        return ChatModel(value)
    except ValueError:
        allowed = ", ".join(m.value for m in ChatModel)
        raise InputValidationError(f"Unknown chat model: {value!r}. Allowed: {allowed}") from None


def bootstrap_request(system_prompt: str, model: ChatModel) -> ChatRequest:
    """Request carrying the system prompt as the sole message."""
    return ChatRequest(model=model, messages=(Message(role=Role.SYSTEM, content=system_prompt),))


def exchange_request(state: ConversationState, user_message: Message) -> ChatRequest:
    """Request carrying the whole transcript followed by the new user message."""
    return ChatRequest(model=state.model, messages=(*state.transcript, user_message))


def begin_request(state: ConversationState) -> ConversationState:
    return state.model_copy(update={"is_loading": True, "last_error": None})


def apply_bootstrap_reply(state: ConversationState, reply: Message) -> ConversationState:
    """Replace the transcript with the first assistant reply.

    The system prompt is not kept in the transcript.
    """
    return state.model_copy(update={
        "transcript": (reply,),
        "is_loading": False,
        "is_error": False,
    })


def apply_bootstrap_failure(state: ConversationState, error: str) -> ConversationState:
    return state.model_copy(update={"is_loading": False, "is_error": True, "last_error": error})


def apply_exchange(state: ConversationState, user_message: Message, reply: Message) -> ConversationState:
    """Append the user message and the reply together and clear the draft.

    A successful exchange also clears a leftover bootstrap error.
    """
    return state.model_copy(update={
        "transcript": (*state.transcript, user_message, reply),
        "draft": "",
        "is_loading": False,
        "is_error": False,
    })


def apply_failure(state: ConversationState, error: str) -> ConversationState:
    """Record a failed exchange; transcript and draft are left as they were."""
    return state.model_copy(update={"is_loading": False, "last_error": error})


def select_model(state: ConversationState, model: ChatModel | str) -> ConversationState:
    return state.model_copy(update={"model": coerce_chat_model(model)})


def set_draft(state: ConversationState, text: str) -> ConversationState:
    return state.model_copy(update={"draft": text})
