"""Global test configuration for contentful_snapshot tests."""

import httpx
import pytest

from contentful_snapshot.core.config import PluginConfig
from fakes import FakeContentfulClient


@pytest.fixture
def plugin_config():
    """Options as a user would configure them for a real space."""
    return PluginConfig(
        {
            "spaceId": "abc123space",
            "accessToken": "secret-delivery-token",
            "host": "cdn.contentful.com",
            "environment": "master",
        }
    )


@pytest.fixture
def make_client():
    """Factory for in-memory Delivery API clients."""

    def _make(**kwargs):
        return FakeContentfulClient(**kwargs)

    return _make


def http_status_error(status: int, url: str = "https://cdn.contentful.com/spaces/x/environments/master/locales"):
    request = httpx.Request("GET", url)
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


@pytest.fixture
def status_error():
    """Build an ``httpx.HTTPStatusError`` for a given status code."""
    return http_status_error
