from typing import Any

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from ..core.config import SETTINGS


def _is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code == 429


# Only rate limiting is retried here; every other failure surfaces to the caller.
rate_limited = retry(
    retry=retry_if_exception(_is_rate_limited),
    wait=wait_exponential(min=1, max=30),
    stop=stop_after_attempt(5),
    reraise=True,
)


class ContentfulClient:
    """Thin Content Delivery API client exposing query-based list calls.

    Every list method returns the decoded collection body
    (``items``, ``total``, ``skip``, ``limit``).
    """

    def __init__(
        self,
        space_id: str | None = None,
        access_token: str | None = None,
        host: str | None = None,
        environment: str | None = None,
        timeout: float | None = None,
    ):
        self.space_id = space_id or SETTINGS.CONTENTFUL_SPACE_ID or ""
        self.host = (host or SETTINGS.CONTENTFUL_HOST).rstrip("/")
        self.environment = environment or SETTINGS.CONTENTFUL_ENVIRONMENT
        if not self.host.startswith("http"):
            self.host = f"https://{self.host}"
        self.api_base = f"{self.host}/spaces/{self.space_id}/environments/{self.environment}"
        self._client = httpx.Client(
            base_url=self.api_base,
            timeout=timeout or SETTINGS.CONTENTFUL_TIMEOUT,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {access_token or SETTINGS.CONTENTFUL_ACCESS_TOKEN or ''}",
            },
        )

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict:
        r = self._client.get(path, params=params)
        r.raise_for_status()
        return r.json()

    @rate_limited
    def get_locales(self) -> dict:
        return self._get("/locales")

    @rate_limited
    def get_entries(self, query: dict[str, Any] | None = None) -> dict:
        return self._get("/entries", params=query)

    @rate_limited
    def get_assets(self, query: dict[str, Any] | None = None) -> dict:
        return self._get("/assets", params=query)

    @rate_limited
    def get_content_types(self, query: dict[str, Any] | None = None) -> dict:
        return self._get("/content_types", params=query)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ContentfulClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def client_from_config(plugin_config: Any) -> ContentfulClient:
    """Build a client from a ``PluginConfig``-style ``get(key)`` object."""
    return ContentfulClient(
        space_id=plugin_config.get("spaceId"),
        access_token=plugin_config.get("accessToken"),
        host=plugin_config.get("host"),
        environment=plugin_config.get("environment"),
    )
