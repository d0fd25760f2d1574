"""Image-generation flow: requests, history state, and the image client."""

from .client import ImageGenerationClient
from .models import IMAGE_COUNT, IMAGE_QUALITY, IMAGE_SIZE, ImageModel, ImageRequest, ImageState

__all__ = [
    "IMAGE_COUNT",
    "IMAGE_QUALITY",
    "IMAGE_SIZE",
    "ImageGenerationClient",
    "ImageModel",
    "ImageRequest",
    "ImageState",
]
