"""Unit tests for the transport module."""
import json

import httpx
import pytest
from hypothesis import given
from hypothesis import strategies as st

from visionchat.errors import DecodeError, TransportError
from visionchat.transport import (
    CHAT_PATH,
    IMAGE_PATH,
    HttpGateway,
    RawResponse,
    ScriptedGateway,
    TransportGateway,
    create_transport_gateway,
)


class TestTransportGatewayInterface:
    """Tests for the abstract TransportGateway interface."""

    def test_gateway_is_abstract(self):
        """Test that TransportGateway cannot be instantiated directly."""
        with pytest.raises(TypeError):
            TransportGateway()  # type: ignore


class TestRawResponse:
    """Tests for RawResponse."""

    def test_text_decodes_utf8(self):
        """Test that UTF-8 bodies decode verbatim."""
        raw = RawResponse(content="Grüße {\"a\": 1}".encode())
        assert raw.text() == "Grüße {\"a\": 1}"

    def test_empty_body_is_empty_text(self):
        """Test that an empty body decodes to an empty string."""
        assert RawResponse().text() == ""

    def test_invalid_utf8_raises_decode_error(self):
        """Test that non-UTF-8 bodies raise DecodeError."""
        raw = RawResponse(content=b"\xff\xfe\xfa")
        with pytest.raises(DecodeError):
            raw.text()

    @pytest.mark.parametrize("status,expected", [(200, True), (204, True), (301, False), (404, False), (500, False)])
    def test_is_success(self, status, expected):
        """Test that only 2xx counts as success."""
        assert RawResponse(status_code=status).is_success is expected

    def test_is_frozen(self):
        """Test that responses are immutable."""
        raw = RawResponse(content=b"x")
        with pytest.raises(ValueError):
            raw.content = b"y"  # type: ignore


class TestHttpGateway:
    """Tests for HttpGateway against httpx.MockTransport."""

    @pytest.mark.asyncio
    async def test_posts_json_body(self, make_http_gateway, recorded_requests):
        """Test that the body is sent as JSON to base URL + path."""
        gateway = make_http_gateway(lambda request: httpx.Response(200, text="hello"))
        body = {"model": "gpt-4-turbo", "messages": [{"role": "user", "content": "hi"}]}

        async with gateway:
            raw = await gateway.post(CHAT_PATH, body)

        assert raw.status_code == 200
        assert raw.text() == "hello"
        assert len(recorded_requests) == 1

        request = recorded_requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://backend.test/generate_chat"
        assert request.headers["content-type"] == "application/json"
        assert "authorization" not in request.headers
        assert request_json(request) == body

    @pytest.mark.asyncio
    async def test_trailing_slash_in_base_url(self, make_http_gateway, recorded_requests):
        """Test that a trailing slash on the base URL does not double up."""
        gateway = make_http_gateway(
            lambda request: httpx.Response(200, text="ok"),
            base_url="http://backend.test/",
        )
        async with gateway:
            await gateway.post(IMAGE_PATH, {"prompt": "x"})

        assert gateway.base_url == "http://backend.test"
        assert str(recorded_requests[0].url) == "http://backend.test/generate_image"

    @pytest.mark.asyncio
    async def test_non_2xx_body_passes_through(self, make_http_gateway):
        """Test that error statuses are not distinguished by default."""
        gateway = make_http_gateway(lambda request: httpx.Response(500, text="backend exploded"))

        async with gateway:
            raw = await gateway.post(CHAT_PATH, {})

        assert raw.status_code == 500
        assert not raw.is_success
        assert raw.text() == "backend exploded"

    @pytest.mark.asyncio
    async def test_strict_status_raises(self, make_http_gateway):
        """Test that strict mode turns non-2xx into TransportError."""
        gateway = make_http_gateway(
            lambda request: httpx.Response(503, text="unavailable"),
            strict_status=True,
        )

        async with gateway:
            with pytest.raises(TransportError, match="503"):
                await gateway.post(CHAT_PATH, {})

    @pytest.mark.asyncio
    async def test_connection_error_becomes_transport_error(self, make_http_gateway):
        """Test that network failures surface as TransportError with the cause."""
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_http_gateway(refuse)

        async with gateway:
            with pytest.raises(TransportError) as exc_info:
                await gateway.post(CHAT_PATH, {})

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self, make_http_gateway):
        """Test that timeouts surface as TransportError."""
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        gateway = make_http_gateway(slow)

        async with gateway:
            with pytest.raises(TransportError):
                await gateway.post(IMAGE_PATH, {})

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, make_http_gateway):
        """Test that leaving the context closes the httpx client."""
        gateway = make_http_gateway(lambda request: httpx.Response(200))
        async with gateway:
            pass
        assert gateway._client.is_closed

    @pytest.mark.asyncio
    async def test_post_after_close_raises_transport_error(self, make_http_gateway, recorded_requests):
        """Test that a closed gateway refuses to send."""
        gateway = make_http_gateway(lambda request: httpx.Response(200))
        await gateway.close()

        with pytest.raises(TransportError, match="closed"):
            await gateway.post(CHAT_PATH, {})

        assert recorded_requests == []


class TestScriptedGateway:
    """Tests for ScriptedGateway."""

    @pytest.mark.asyncio
    async def test_replies_in_order_and_records_requests(self):
        """Test that queued replies are returned in order and requests recorded."""
        gateway = ScriptedGateway({CHAT_PATH: ["first", b"second"]})

        first = await gateway.post(CHAT_PATH, {"n": 1})
        second = await gateway.post(CHAT_PATH, {"n": 2})

        assert first.text() == "first"
        assert second.text() == "second"
        assert gateway.requests == [(CHAT_PATH, {"n": 1}), (CHAT_PATH, {"n": 2})]

    @pytest.mark.asyncio
    async def test_recorded_body_is_a_copy(self):
        """Test that later mutation of the body does not change the record."""
        gateway = ScriptedGateway({CHAT_PATH: ["ok"]})
        body = {"messages": [{"role": "user", "content": "hi"}]}

        await gateway.post(CHAT_PATH, body)
        body["messages"].append({"role": "user", "content": "again"})

        assert len(gateway.requests[0][1]["messages"]) == 1

    @pytest.mark.asyncio
    async def test_empty_queue_raises_transport_error(self):
        """Test that a path without replies fails like an unreachable backend."""
        gateway = ScriptedGateway()
        with pytest.raises(TransportError):
            await gateway.post(IMAGE_PATH, {})

    @pytest.mark.asyncio
    async def test_exception_reply_is_wrapped(self):
        """Test that queued exceptions are raised as TransportError."""
        cause = ConnectionRefusedError("refused")
        gateway = ScriptedGateway({CHAT_PATH: [cause]})

        with pytest.raises(TransportError) as exc_info:
            await gateway.post(CHAT_PATH, {})

        assert exc_info.value.cause is cause

    @pytest.mark.asyncio
    async def test_fallback_used_when_queue_empty(self):
        """Test that the fallback answers once the queue is exhausted."""
        gateway = ScriptedGateway(
            {IMAGE_PATH: ["queued"]},
            fallback=lambda path, body: f"fallback:{body['prompt']}",
        )

        assert (await gateway.post(IMAGE_PATH, {"prompt": "a"})).text() == "queued"
        assert (await gateway.post(IMAGE_PATH, {"prompt": "b"})).text() == "fallback:b"

    @pytest.mark.asyncio
    async def test_fallback_exception_is_wrapped(self):
        """Test that a failing fallback raises TransportError like a queued exception."""
        cause = KeyError("prompt")

        def fallback(path, body):
            raise cause

        gateway = ScriptedGateway(fallback=fallback)

        with pytest.raises(TransportError) as exc_info:
            await gateway.post(IMAGE_PATH, {})

        assert exc_info.value.cause is cause

    @pytest.mark.asyncio
    async def test_close(self):
        """Test that close marks the gateway closed."""
        async with ScriptedGateway() as gateway:
            assert not gateway.closed
        assert gateway.closed


class TestGatewayFactory:
    """Tests for the gateway factory function."""

    def test_create_http_gateway(self):
        """Test creating an HTTP gateway via factory."""
        gateway = create_transport_gateway("http", base_url="http://localhost:8000")
        assert isinstance(gateway, HttpGateway)
        assert gateway.base_url == "http://localhost:8000"

    def test_create_scripted_gateway(self):
        """Test creating a scripted gateway via factory."""
        gateway = create_transport_gateway("scripted", replies={CHAT_PATH: ["hi"]})
        assert isinstance(gateway, ScriptedGateway)

    def test_http_requires_base_url(self):
        """Test that a missing base URL raises TypeError."""
        with pytest.raises(TypeError, match="requires 'base_url'"):
            create_transport_gateway("http")

    def test_unknown_gateway(self):
        """Test that an unknown gateway type raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported gateway"):
            create_transport_gateway("carrier-pigeon")

    @given(st.text(min_size=1))
    def test_factory_with_random_names(self, kind: str):
        """Property test: Factory should only accept known gateway types."""
        if kind.lower() == "scripted":
            assert isinstance(create_transport_gateway(kind), ScriptedGateway)
        elif kind.lower() == "http":
            with pytest.raises(TypeError):
                create_transport_gateway(kind)
        else:
            with pytest.raises(ValueError):
                create_transport_gateway(kind)


def request_json(request: httpx.Request) -> dict:
    """Decode the JSON body of a recorded request."""
    return json.loads(request.content)
