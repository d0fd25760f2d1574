import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import InputValidationError, VisionChatError
from ..parsing import ResponseFormat, parse_chat_reply
from ..transport import CHAT_PATH, TransportGateway
from . import state as transitions
from .models import DEFAULT_SYSTEM_PROMPT, ChatModel, ConversationState, Message, Role

if TYPE_CHECKING:
    from ..config import ClientSettings

logger = logging.getLogger(__name__)

StateListener = Callable[[ConversationState], None]


class ConversationClient:
    """Chat client that accumulates a transcript across backend calls.

    Hidden design decisions:
    - How the transcript is turned into a request body
    - How the reply body is unwrapped (see ``visionchat.parsing``)
    - Serialization of calls: one asyncio.Lock per client, so concurrent
      ``send_message`` calls run one after the other and each sees the
      transcript left by the previous one

    State is an immutable ConversationState, replaced wholesale after every
    transition; listeners are called with each new state.
    """

    def __init__(
        self,
        gateway: TransportGateway,
        model: ChatModel | str = ChatModel.GPT_4_TURBO,
        bootstrap_model: ChatModel | str = ChatModel.GPT_35_TURBO,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        response_format: ResponseFormat | str = ResponseFormat.TEXT,
        on_change: StateListener | None = None,
    ):
        """Initialize the client.

        Args:
            gateway: Transport used for every call
            model: Model used by send_message
            bootstrap_model: Model used by the greeting call
            system_prompt: Prompt sent by the greeting call
            response_format: How reply bodies are unwrapped
            on_change: Optional listener called with every new state
        """
        self._gateway = gateway
        self._bootstrap_model = transitions.coerce_chat_model(bootstrap_model)
        self._system_prompt = system_prompt
        self._response_format = ResponseFormat(response_format)
        self._state = ConversationState(model=transitions.coerce_chat_model(model))
        self._listeners: list[StateListener] = [on_change] if on_change else []
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        gateway: TransportGateway,
        settings: "ClientSettings",
        on_change: StateListener | None = None,
    ) -> "ConversationClient":
        return cls(
            gateway,
            model=settings.chat_model,
            bootstrap_model=settings.bootstrap_model,
            system_prompt=settings.system_prompt,
            response_format=settings.response_format,
            on_change=on_change,
        )

    @property
    def state(self) -> ConversationState:
        """Current conversation state."""
        return self._state

    @property
    def transcript(self) -> tuple[Message, ...]:
        return self._state.transcript

    def subscribe(self, listener: StateListener) -> None:
        """Register a listener for state changes."""
        self._listeners.append(listener)

    def _set_state(self, new_state: ConversationState) -> None:
        self._state = new_state
        for listener in self._listeners:
            listener(new_state)

    async def _request_reply(self, body: dict) -> Message:
        response = await self._gateway.post(CHAT_PATH, body)
        content = parse_chat_reply(response, self._response_format)
        return Message(role=Role.ASSISTANT, content=content)

    async def initialize(self) -> Message:
        """Send the system prompt alone and seed the transcript with the reply.

        Afterwards the transcript holds exactly the assistant reply; the
        system prompt shapes it but is not kept.

        Returns:
            The assistant's greeting

        Raises:
            TransportError: If the backend could not be reached
            DecodeError: If the reply body could not be decoded
        """
        async with self._lock:
            self._set_state(transitions.begin_request(self._state))
            request = transitions.bootstrap_request(self._system_prompt, self._bootstrap_model)
            try:
                reply = await self._request_reply(request.to_body())
            except VisionChatError as e:
                logger.error("Bootstrap chat call failed: %s", e)
                self._set_state(transitions.apply_bootstrap_failure(self._state, str(e)))
                raise
            except asyncio.CancelledError:
                self._set_state(transitions.apply_bootstrap_failure(self._state, "cancelled"))
                raise
            except Exception as e:
                logger.exception("Unexpected error during bootstrap chat call")
                self._set_state(transitions.apply_bootstrap_failure(self._state, f"{type(e).__name__}: {e}"))
                raise

            self._set_state(transitions.apply_bootstrap_reply(self._state, reply))
            logger.info("Conversation initialized with %s", self._bootstrap_model.value)
            return reply

    async def send_message(self, content: str | None = None) -> Message:
        """Send a user message with the whole transcript as context.

        Args:
            content: Message text; defaults to the current draft

        Returns:
            The assistant's reply

        Raises:
            InputValidationError: If the message is empty
            TransportError: If the backend could not be reached
            DecodeError: If the reply body could not be decoded

        On success the user message and the reply are appended in one state
        update and the draft is cleared. On failure the transcript and draft
        are unchanged so the caller can retry.
        """
        text = self._state.draft if content is None else content
        if not text or not text.strip():
            raise InputValidationError("Message must not be empty")

        async with self._lock:
            user_message = Message(role=Role.USER, content=text)
            request = transitions.exchange_request(self._state, user_message)
            self._set_state(transitions.begin_request(self._state))
            try:
                reply = await self._request_reply(request.to_body())
            except VisionChatError as e:
                logger.error("Chat call failed: %s", e)
                self._set_state(transitions.apply_failure(self._state, str(e)))
                raise
            except asyncio.CancelledError:
                self._set_state(transitions.apply_failure(self._state, "cancelled"))
                raise
            except Exception as e:
                logger.exception("Unexpected error during chat call")
                self._set_state(transitions.apply_failure(self._state, f"{type(e).__name__}: {e}"))
                raise

            self._set_state(transitions.apply_exchange(self._state, user_message, reply))
            logger.debug("Transcript now holds %d messages", len(self._state.transcript))
            return reply

    def select_model(self, model: ChatModel | str) -> None:
        """Change the model used by later send_message calls.

        Raises:
            InputValidationError: If the model is not in the allow-list
        """
        self._set_state(transitions.select_model(self._state, model))

    def set_draft(self, text: str) -> None:
        """Update the unsent input buffer."""
        self._set_state(transitions.set_draft(self._state, text))
