"""Pure state transitions for the image history."""

from ..errors import InputValidationError
from .models import ImageModel, ImageRequest, ImageState


def coerce_image_model(value: ImageModel | str) -> ImageModel:
    """Validate a model name against the image allow-list."""
    try:
        return ImageModel(value)
    except ValueError:
        allowed = ", ".join(m.value for m in ImageModel)
        raise InputValidationError(f"Unknown image model: {value!r}. Allowed: {allowed}") from None


def generation_request(state: ImageState, prompt: str) -> ImageRequest:
    if not prompt or not prompt.strip():
        raise InputValidationError("Prompt must not be empty")
    return ImageRequest(model=state.model, prompt=prompt)


def begin_request(state: ImageState) -> ImageState:
    return state.model_copy(update={"is_loading": True, "last_error": None})


def apply_generated_image(state: ImageState, reference: str, history_limit: int | None = None) -> ImageState:
    """Show the new image and prepend it to the history.

    With a ``history_limit`` the oldest entries beyond it are dropped.
    """
    history = (reference, *state.history)
    if history_limit is not None:
        history = history[:history_limit]
    return state.model_copy(update={
        "current_image": reference,
        "history": history,
        "is_loading": False,
    })


def apply_failure(state: ImageState, error: str) -> ImageState:
    return state.model_copy(update={"is_loading": False, "last_error": error})


def clear_history(state: ImageState) -> ImageState:
    """Empty the history; the current image stays on display."""
    return state.model_copy(update={"history": ()})


def select_image(state: ImageState, reference: str) -> ImageState:
    """Display an earlier image without reordering the history."""
    if reference not in state.history:
        raise InputValidationError(f"Image is not in history: {reference!r}")
    return state.model_copy(update={"current_image": reference})


def select_model(state: ImageState, model: ImageModel | str) -> ImageState:
    return state.model_copy(update={"model": coerce_image_model(model)})
