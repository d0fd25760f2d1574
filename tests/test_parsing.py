"""Unit tests for the response-body contract."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from visionchat.errors import DecodeError
from visionchat.parsing import ResponseFormat, parse_chat_reply, parse_image_reference
from visionchat.transport import RawResponse


def raw(body: str | bytes) -> RawResponse:
    if isinstance(body, str):
        body = body.encode("utf-8")
    return RawResponse(content=body)


class TestTextFormat:
    """Tests for verbatim (text) parsing."""

    def test_chat_body_is_verbatim(self):
        """Test that JSON-looking bodies are not unwrapped in text mode."""
        body = '{"choices": [{"message": {"content": "4"}}]}'
        assert parse_chat_reply(raw(body)) == body

    def test_image_body_is_verbatim(self):
        """Test that the whole body becomes the image reference."""
        assert parse_image_reference(raw("https://img/x.png")) == "https://img/x.png"

    def test_empty_body(self):
        """Test that an empty body yields empty content."""
        assert parse_chat_reply(raw("")) == ""

    def test_non_utf8_raises(self):
        """Test that undecodable bodies raise DecodeError in every mode."""
        for fmt in ResponseFormat:
            with pytest.raises(DecodeError):
                parse_chat_reply(raw(b"\xc3\x28"), fmt)

    @given(st.text())
    def test_text_mode_is_identity(self, body: str):
        """Property test: text mode returns the decoded body unchanged."""
        assert parse_chat_reply(raw(body), ResponseFormat.TEXT) == body
        assert parse_image_reference(raw(body), ResponseFormat.TEXT) == body


class TestJsonFormat:
    """Tests for envelope (json) parsing."""

    @pytest.mark.parametrize("envelope", [
        {"choices": [{"message": {"role": "assistant", "content": "Hello!"}}]},
        {"content": "Hello!"},
        {"message": "Hello!"},
        {"message": {"role": "assistant", "content": "Hello!"}},
        "Hello!",
    ])
    def test_chat_envelopes(self, envelope):
        """Test that each recognised chat envelope is unwrapped."""
        assert parse_chat_reply(raw(json.dumps(envelope)), ResponseFormat.JSON) == "Hello!"

    @pytest.mark.parametrize("envelope", [
        {"created": 1, "data": [{"url": "https://img/x.png", "revised_prompt": "fox"}]},
        {"url": "https://img/x.png"},
        "https://img/x.png",
    ])
    def test_image_envelopes(self, envelope):
        """Test that each recognised image envelope is unwrapped."""
        assert parse_image_reference(raw(json.dumps(envelope)), ResponseFormat.JSON) == "https://img/x.png"

    def test_plain_text_rejected(self):
        """Test that non-JSON bodies fail in json mode."""
        with pytest.raises(DecodeError, match="not JSON"):
            parse_chat_reply(raw("Hello!"), ResponseFormat.JSON)

    @pytest.mark.parametrize("body", [
        '{"choices": []}',
        '{"choices": [{"text": "hi"}]}',
        '{"content": 7}',
        '{"unexpected": true}',
        "[1, 2, 3]",
        "42",
    ])
    def test_unknown_chat_envelope_rejected(self, body):
        """Test that JSON without a recognised chat envelope fails in json mode."""
        with pytest.raises(DecodeError, match="no recognised envelope"):
            parse_chat_reply(raw(body), ResponseFormat.JSON)

    @pytest.mark.parametrize("body", [
        '{"data": []}',
        '{"data": [{"b64_json": "AAAA"}]}',
        '{"url": null}',
        "null",
    ])
    def test_unknown_image_envelope_rejected(self, body):
        """Test that JSON without a recognised image envelope fails in json mode."""
        with pytest.raises(DecodeError, match="no recognised envelope"):
            parse_image_reference(raw(body), ResponseFormat.JSON)


class TestAutoFormat:
    """Tests for auto parsing."""

    def test_unwraps_envelope(self):
        """Test that recognised envelopes are unwrapped."""
        assert parse_chat_reply(raw('{"content": "hi"}'), ResponseFormat.AUTO) == "hi"
        assert parse_image_reference(raw('{"url": "u"}'), ResponseFormat.AUTO) == "u"

    def test_falls_back_to_text(self):
        """Test that plain text and unknown JSON are kept verbatim."""
        assert parse_chat_reply(raw("Hello! How can I help?"), ResponseFormat.AUTO) == "Hello! How can I help?"
        assert parse_chat_reply(raw("4"), ResponseFormat.AUTO) == "4"
        assert parse_image_reference(raw('{"other": 1}'), ResponseFormat.AUTO) == '{"other": 1}'

    def test_format_accepts_strings(self):
        """Test that the format may be passed by value."""
        assert parse_chat_reply(raw('"quoted"'), "auto") == "quoted"  # type: ignore[arg-type]
