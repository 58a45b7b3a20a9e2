"""HTTP client used by the POS extension side to reach this service.

Every call sends the runtime-issued session token as a bearer credential and
names the shop explicitly, which selects the extension auth path server-side.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

import httpx

from quick_transfer.core.errors import AuthError, NotFoundError, QuickTransferError, TransportError, ValidationError
from quick_transfer.schemas.inventory import (
    InventoryLevel,
    InventoryLevelsRead,
    Product,
    TransferRequest,
    TransferResult,
    TransferState,
)


logger = logging.getLogger(__name__)

SessionTokenProvider = Callable[[], Awaitable[str]]


class PosApiClient:
    def __init__(self, http: httpx.AsyncClient, base_url: str, shop: str, session_token: SessionTokenProvider) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.shop = shop
        self.session_token = session_token

    async def search(self, text: str) -> list[Product]:
        response = await self._request("GET", "/api/search", params={"q": text})
        data = self._json(response)
        if response.is_error or data.get("error"):
            raise _error_for(response.status_code, data.get("error") or f"HTTP {response.status_code}")
        return [Product.model_validate(product) for product in data.get("products", [])]

    async def lookup_levels(self, inventory_item_id: str) -> dict[str, InventoryLevel]:
        response = await self._request("GET", f"/api/inventory/{quote(inventory_item_id, safe='')}")
        data = self._json(response)
        if response.is_error:
            raise _error_for(response.status_code, data.get("error") or f"HTTP {response.status_code}")
        return InventoryLevelsRead.model_validate(data).levels

    async def transfer(self, request: TransferRequest) -> TransferResult:
        response = await self._request("POST", "/api/transfer", json=request.model_dump(by_alias=True, exclude_none=True))
        data = self._json(response)
        if response.status_code == 401:
            raise AuthError(data.get("error") or "Unauthorized")
        if response.status_code == 400 and "fields" in data:
            raise ValidationError(data.get("error", "Invalid transfer request"), data.get("fields"))
        if "state" not in data:
            data["state"] = _state_for(response.status_code, data)
        data.setdefault("success", False)
        return TransferResult.model_validate(data)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        token = await self.session_token()
        params = dict(kwargs.pop("params", None) or {})
        params["shop"] = self.shop
        try:
            return await self.http.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
                **kwargs,
            )
        except httpx.HTTPError as exc:
            logger.error("pos api request failed method=%s path=%s error=%r", method, path, exc)
            raise TransportError(f"Request failed: {exc.__class__.__name__}") from exc

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"HTTP {response.status_code}: {response.text[:200]}") from exc
        if not isinstance(data, dict):
            raise TransportError(f"HTTP {response.status_code}: unexpected body")
        return data


def _error_for(status_code: int, message: str) -> QuickTransferError:
    if status_code == 401:
        return AuthError(message)
    if status_code == 404:
        return NotFoundError(message)
    if status_code == 400:
        return ValidationError(message)
    return TransportError(message)


def _state_for(status_code: int, data: dict[str, Any]) -> TransferState:
    if data.get("success"):
        return TransferState.SUCCEEDED
    if status_code >= 500:
        return TransferState.FAILED_TRANSPORT
    return TransferState.FAILED_USER_ERROR
