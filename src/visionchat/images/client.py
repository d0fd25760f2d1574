import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import VisionChatError
from ..parsing import ResponseFormat, parse_image_reference
from ..transport import IMAGE_PATH, TransportGateway
from . import state as transitions
from .models import ImageModel, ImageState

if TYPE_CHECKING:
    from ..config import ClientSettings

logger = logging.getLogger(__name__)

StateListener = Callable[[ImageState], None]


class ImageGenerationClient:
    """Image client that keeps a most-recent-first history of references.

    Hidden design decisions:
    - Fixed request parameters (size, quality, count)
    - How the reply body is unwrapped into a reference
    - History capacity (unbounded unless ``history_limit`` is given)

    Calls are serialized by one asyncio.Lock per client.
    """

    def __init__(
        self,
        gateway: TransportGateway,
        model: ImageModel | str = ImageModel.DALL_E_3,
        response_format: ResponseFormat | str = ResponseFormat.TEXT,
        history_limit: int | None = None,
        on_change: StateListener | None = None,
    ):
        """Initialize the client.

        Args:
            gateway: Transport used for every call
            model: Initially selected image model
            response_format: How reply bodies are unwrapped
            history_limit: Maximum history length, None for unbounded
            on_change: Optional listener called with every new state
        """
        if history_limit is not None and history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._gateway = gateway
        self._response_format = ResponseFormat(response_format)
        self._history_limit = history_limit
        self._state = ImageState(model=transitions.coerce_image_model(model))
        self._listeners: list[StateListener] = [on_change] if on_change else []
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        gateway: TransportGateway,
        settings: "ClientSettings",
        on_change: StateListener | None = None,
    ) -> "ImageGenerationClient":
        return cls(
            gateway,
            model=settings.image_model,
            response_format=settings.response_format,
            history_limit=settings.image_history_limit,
            on_change=on_change,
        )

    @property
    def state(self) -> ImageState:
        """Current image state."""
        return self._state

    @property
    def history(self) -> tuple[str, ...]:
        return self._state.history

    @property
    def current_image(self) -> str | None:
        return self._state.current_image

    def subscribe(self, listener: StateListener) -> None:
        """Register a listener for state changes."""
        self._listeners.append(listener)

    def _set_state(self, new_state: ImageState) -> None:
        self._state = new_state
        for listener in self._listeners:
            listener(new_state)

    async def generate(self, prompt: str) -> str:
        """Generate one image and make it the current and newest history entry.

        Args:
            prompt: Text prompt for generation

        Returns:
            The image reference (URL)

        Raises:
            InputValidationError: If the prompt is empty
            TransportError: If the backend could not be reached
            DecodeError: If the reply body could not be decoded
        """
        async with self._lock:
            request = transitions.generation_request(self._state, prompt)
            self._set_state(transitions.begin_request(self._state))
            try:
                response = await self._gateway.post(IMAGE_PATH, request.to_body())
                reference = parse_image_reference(response, self._response_format)
            except VisionChatError as e:
                logger.error("Image generation failed: %s", e)
                self._set_state(transitions.apply_failure(self._state, str(e)))
                raise
            except asyncio.CancelledError:
                self._set_state(transitions.apply_failure(self._state, "cancelled"))
                raise
            except Exception as e:
                logger.exception("Unexpected error during image generation")
                self._set_state(transitions.apply_failure(self._state, f"{type(e).__name__}: {e}"))
                raise

            self._set_state(
                transitions.apply_generated_image(self._state, reference, self._history_limit)
            )
            logger.info("Generated image with %s (%d in history)", request.model.value, len(self._state.history))
            return reference

    def clear_history(self) -> None:
        """Empty the history; the current image is kept."""
        self._set_state(transitions.clear_history(self._state))

    def select_image(self, reference: str) -> None:
        """Display an image from the history.

        Raises:
            InputValidationError: If the reference is not in the history
        """
        self._set_state(transitions.select_image(self._state, reference))

    def select_model(self, model: ImageModel | str) -> None:
        """Change the model used by later generate calls.

        Raises:
            InputValidationError: If the model is not in the allow-list
        """
        self._set_state(transitions.select_model(self._state, model))
