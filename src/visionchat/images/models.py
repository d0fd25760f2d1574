"""Data models for the image-generation flow."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Request parameters fixed by the backend contract
IMAGE_SIZE = "1024x1024"
IMAGE_QUALITY = "standard"
IMAGE_COUNT = 1


class ImageModel(str, Enum):
    """Image models the backend accepts."""

    DALL_E_3 = "dall-e-3"
    DALL_E_2 = "dall-e-2"


class ImageRequest(BaseModel):
    """Body of a ``/generate_image`` request."""

    model_config = ConfigDict(frozen=True)

    model: ImageModel
    prompt: str
    size: Literal["1024x1024"] = IMAGE_SIZE
    quality: Literal["standard"] = IMAGE_QUALITY
    n: Literal[1] = IMAGE_COUNT

    def to_body(self) -> dict[str, Any]:
        """Serialize to the JSON body."""
        return self.model_dump(mode="json")


class ImageState(BaseModel):
    """Image tab state for one UI session.

    ``history`` is most-recent-first. Identical prompts produce independent
    entries; nothing is deduplicated or persisted.
    """

    model_config = ConfigDict(frozen=True)

    history: tuple[str, ...] = Field(default=(), description="Image references, newest first")
    current_image: str | None = Field(default=None, description="Image on display")
    model: ImageModel = ImageModel.DALL_E_3
    is_loading: bool = False
    last_error: str | None = None
