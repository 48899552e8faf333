"""Tests for the Delivery API transport client."""

import httpx
import pytest

from contentful_snapshot.adapters.contentful_api import ContentfulClient, client_from_config

pytestmark = pytest.mark.unit


def _client_with(handler) -> ContentfulClient:
    client = ContentfulClient(space_id="space1", access_token="tok", host="cdn.contentful.com", environment="master")
    client._client = httpx.Client(
        base_url=client.api_base,
        transport=httpx.MockTransport(handler),
        headers=client._client.headers,
    )
    return client


def test_base_url_and_auth_header():
    client = ContentfulClient(space_id="space1", access_token="tok", host="preview.contentful.com", environment="dev")

    assert client.api_base == "https://preview.contentful.com/spaces/space1/environments/dev"
    assert client._client.headers["Authorization"] == "Bearer tok"


def test_list_calls_send_query_params():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"items": [{"sys": {"id": "e1"}}], "total": 1, "skip": 0, "limit": 50})

    client = _client_with(handler)

    data = client.get_entries({"skip": 0, "limit": 50, "include": 0, "locale": "*"})

    assert data["total"] == 1
    request = seen[0]
    assert request.url.path == "/spaces/space1/environments/master/entries"
    assert request.url.params["limit"] == "50"
    assert request.url.params["include"] == "0"
    assert request.url.params["locale"] == "*"
    assert request.headers["Authorization"] == "Bearer tok"


@pytest.mark.parametrize(
    "method,path",
    [("get_locales", "/locales"), ("get_assets", "/assets"), ("get_content_types", "/content_types")],
)
def test_endpoints(method, path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"items": [], "total": 0})

    getattr(_client_with(handler), method)()

    assert seen == [f"/spaces/space1/environments/master{path}"]


def test_401_raises_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, json={"sys": {"id": "AccessTokenInvalid"}})

    client = _client_with(handler)

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        client.get_locales()

    assert exc_info.value.response.status_code == 401
    assert len(calls) == 1


def test_rate_limit_is_retried(monkeypatch):
    monkeypatch.setattr(ContentfulClient.get_entries.retry, "sleep", lambda seconds: None)
    responses = [
        httpx.Response(429, json={"sys": {"id": "RateLimitExceeded"}}),
        httpx.Response(200, json={"items": [], "total": 0}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = _client_with(handler)

    assert client.get_entries({"skip": 0}) == {"items": [], "total": 0}
    assert responses == []


def test_client_from_config(plugin_config):
    client = client_from_config(plugin_config)

    assert client.api_base == "https://cdn.contentful.com/spaces/abc123space/environments/master"
    client.close()
