"""Pytest configuration and shared fixtures."""
import httpx
import pytest

from visionchat.config import load_settings
from visionchat.transport import HttpGateway, ScriptedGateway


@pytest.fixture
def settings():
    """Return default settings, ignoring the process environment."""
    return load_settings(environ={})


@pytest.fixture
def scripted_gateway():
    """Return an empty scripted gateway."""
    return ScriptedGateway()


@pytest.fixture
def recorded_requests():
    """Collect requests seen by the mock HTTP backend."""
    return []


@pytest.fixture
def make_http_gateway(recorded_requests):
    """Build an HttpGateway backed by httpx.MockTransport.

    The handler returns an httpx.Response for each request (or raises).
    """
    def _make(handler, **kwargs):
        def _recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return HttpGateway(
            base_url=kwargs.pop("base_url", "http://backend.test"),
            transport=httpx.MockTransport(_recording_handler),
            **kwargs,
        )

    return _make
