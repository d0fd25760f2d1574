"""Client configuration.

Centralizes defaults and reads overrides from environment variables.
The CLI loads a ``.env`` file before calling ``load_settings``.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .chat.models import DEFAULT_SYSTEM_PROMPT, ChatModel
from .errors import ConfigurationError
from .images.models import ImageModel
from .parsing import ResponseFormat

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 60.0  # Seconds

ENV_PREFIX = "VISIONCHAT_"


class ClientSettings(BaseModel):
    """Effective settings for both clients and the gateway."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    response_format: ResponseFormat = ResponseFormat.TEXT
    strict_status: bool = False
    chat_model: ChatModel = ChatModel.GPT_4_TURBO
    bootstrap_model: ChatModel = ChatModel.GPT_35_TURBO
    image_model: ImageModel = ImageModel.DALL_E_3
    image_history_limit: int | None = Field(default=None, ge=1)
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, min_length=1)


_ENV_FIELDS = {
    "BASE_URL": "base_url",
    "TIMEOUT": "timeout",
    "RESPONSE_FORMAT": "response_format",
    "STRICT_STATUS": "strict_status",
    "CHAT_MODEL": "chat_model",
    "BOOTSTRAP_MODEL": "bootstrap_model",
    "IMAGE_MODEL": "image_model",
    "IMAGE_HISTORY_LIMIT": "image_history_limit",
    "SYSTEM_PROMPT": "system_prompt",
}


def load_settings(environ: Mapping[str, str] | None = None, **overrides) -> ClientSettings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read from (default: ``os.environ``)
        **overrides: Explicit values that win over the environment (None is ignored)

    Returns:
        Validated ClientSettings

    Raises:
        ConfigurationError: If any value fails validation

    Environment variables:
        VISIONCHAT_BASE_URL: Backend root URL (default: http://localhost:8000)
        VISIONCHAT_TIMEOUT: Request timeout in seconds (default: 60)
        VISIONCHAT_RESPONSE_FORMAT: text, json or auto (default: text)
        VISIONCHAT_STRICT_STATUS: Treat non-2xx as transport errors (default: false)
        VISIONCHAT_CHAT_MODEL: gpt-4-turbo or gpt-3.5-turbo (default: gpt-4-turbo)
        VISIONCHAT_BOOTSTRAP_MODEL: Model for the greeting call (default: gpt-3.5-turbo)
        VISIONCHAT_IMAGE_MODEL: dall-e-3 or dall-e-2 (default: dall-e-3)
        VISIONCHAT_IMAGE_HISTORY_LIMIT: Keep at most N images (default: unbounded)
        VISIONCHAT_SYSTEM_PROMPT: Prompt for the greeting call
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}

    for suffix, field_name in _ENV_FIELDS.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw is None or raw.strip() == "":
            continue
        values[field_name] = raw.strip()

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ClientSettings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e
