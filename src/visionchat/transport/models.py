from pydantic import BaseModel, ConfigDict, Field

from ..errors import DecodeError


class RawResponse(BaseModel):
    """Undecoded HTTP response as returned by a gateway.

    Status codes are carried but not interpreted: a 500 with a body reaches
    the parsers exactly like a 200 unless the gateway runs in strict mode.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(default=200, description="HTTP status code")
    content: bytes = Field(default=b"", description="Raw response body")
    url: str = Field(default="", description="Final request URL")

    @property
    def is_success(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300

    def text(self) -> str:
        """Decode the body as UTF-8.

        Raises:
            DecodeError: If the body is not valid UTF-8
        """
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"response body from {self.url or 'backend'} is not valid UTF-8") from e
