from __future__ import annotations

import logging
from typing import Any

import httpx

from quick_transfer.core.config import get_settings
from quick_transfer.core.errors import AuthError, GraphQLResponseError, TransportError


logger = logging.getLogger(__name__)


def create_http_client(timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else settings.remote_timeout_seconds,
        transport=transport,
        headers={"Content-Type": "application/json", "Accept": "application/json"},
    )


class AdminGraphQLClient:
    """Admin GraphQL endpoint of one shop.

    The underlying ``httpx.AsyncClient`` is owned by the application and
    shared across requests; this wrapper only binds a shop and its token.
    """

    def __init__(self, http: httpx.AsyncClient, shop: str, access_token: str, api_version: str | None = None) -> None:
        self.http = http
        self.shop = shop
        self.access_token = access_token
        self.api_version = api_version or get_settings().shopify_api_version

    @property
    def endpoint(self) -> str:
        return f"https://{self.shop}/admin/api/{self.api_version}/graphql.json"

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = await self.http.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
                headers={"X-Shopify-Access-Token": self.access_token},
            )
        except httpx.HTTPError as exc:
            logger.error("graphql transport failure shop=%s error=%r", self.shop, exc)
            raise TransportError(f"Remote inventory service unavailable: {exc.__class__.__name__}") from exc

        if response.status_code in {401, 403}:
            raise AuthError("Shop access token rejected by remote service")
        try:
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            logger.error("graphql bad response shop=%s status=%s body=%r", self.shop, response.status_code, response.text[:500])
            raise TransportError(f"Unexpected response from remote service (HTTP {response.status_code})") from exc

        if not isinstance(payload, dict):
            raise TransportError("Unexpected response shape from remote service")

        errors = payload.get("errors")
        if errors:
            raise GraphQLResponseError.from_payload(errors if isinstance(errors, list) else [errors])

        data = payload.get("data")
        if not isinstance(data, dict):
            raise TransportError("Remote service response has no data")
        return data
