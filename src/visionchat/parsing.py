"""Response-body contract.

Hides how a backend reply becomes message content or an image reference.
The backend may answer with a bare body or wrap it in a JSON envelope, so
the unwrapping policy is explicit and selectable:

- ``text``: the whole body is the value, verbatim
- ``json``: the body must be a recognised JSON envelope
- ``auto``: unwrap a recognised envelope, otherwise fall back to ``text``
"""

import json
from collections.abc import Callable
from enum import Enum
from typing import Any

from .errors import DecodeError
from .transport.models import RawResponse


class ResponseFormat(str, Enum):
    """How response bodies are unwrapped."""

    TEXT = "text"
    JSON = "json"
    AUTO = "auto"


def _extract_chat_content(data: Any) -> str | None:
    if isinstance(data, str):
        return data
    if not isinstance(data, dict):
        return None

    if "choices" in data:
        try:
            content = data["choices"][0]["message"]["content"]
        except (IndexError, KeyError, TypeError):
            return None
        return content if isinstance(content, str) else None

    if isinstance(data.get("content"), str):
        return data["content"]

    message = data.get("message")
    if isinstance(message, str):
        return message
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return message["content"]

    return None


def _extract_image_url(data: Any) -> str | None:
    if isinstance(data, str):
        return data
    if not isinstance(data, dict):
        return None

    if "data" in data:
        try:
            url = data["data"][0]["url"]
        except (IndexError, KeyError, TypeError):
            return None
        return url if isinstance(url, str) else None

    if isinstance(data.get("url"), str):
        return data["url"]

    return None


def _parse(
    response: RawResponse,
    fmt: ResponseFormat,
    extract: Callable[[Any], str | None],
    kind: str,
) -> str:
    body = response.text()
    fmt = ResponseFormat(fmt)

    if fmt is ResponseFormat.TEXT:
        return body

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        if fmt is ResponseFormat.AUTO:
            return body
        raise DecodeError(f"{kind} response is not JSON: {e.msg}") from e

    value = extract(data)
    if value is not None:
        return value
    if fmt is ResponseFormat.AUTO:
        return body
    raise DecodeError(f"{kind} response has no recognised envelope")


def parse_chat_reply(response: RawResponse, fmt: ResponseFormat = ResponseFormat.TEXT) -> str:
    """Turn a chat response into assistant message content.

    Args:
        response: Raw gateway response
        fmt: Unwrapping policy

    Returns:
        The assistant's message content

    Raises:
        DecodeError: If the body is not UTF-8, or (``json`` mode) not a known envelope
    """
    return _parse(response, fmt, _extract_chat_content, "chat")


def parse_image_reference(response: RawResponse, fmt: ResponseFormat = ResponseFormat.TEXT) -> str:
    """Turn an image response into an image reference (URL).

    Args:
        response: Raw gateway response
        fmt: Unwrapping policy

    Returns:
        The image reference

    Raises:
        DecodeError: If the body is not UTF-8, or (``json`` mode) not a known envelope
    """
    return _parse(response, fmt, _extract_image_url, "image")
