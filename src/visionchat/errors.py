"""Error taxonomy shared by the gateway and both clients.

Every failure is terminal for the call that triggered it: nothing here is
retried, callers decide whether to re-trigger the action.
"""


class VisionChatError(Exception):
    """Base class for visionchat errors."""


class TransportError(VisionChatError):
    """Network-level failure (DNS, refused connection, TLS, timeout)."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(f"Transport error: {message}")
        self.cause = cause


class DecodeError(VisionChatError):
    """Response body could not be decoded or did not match the expected envelope."""

    def __init__(self, message: str):
        super().__init__(f"Decode error: {message}")


class InputValidationError(VisionChatError, ValueError):
    """Caller supplied an empty prompt/message or a model outside the allow-list."""


class ConfigurationError(VisionChatError, ValueError):
    """Invalid setting value read from the environment."""
