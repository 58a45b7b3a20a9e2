"""
Tests for services.pos_client: the extension-side client of the HTTP surface.
"""

import asyncio
import json

import httpx
import pytest

from quick_transfer.core.errors import AuthError, NotFoundError, TransportError, ValidationError
from quick_transfer.schemas.inventory import TransferRequest, TransferState
from quick_transfer.services.pos_client import PosApiClient


SHOP = "test-shop.myshopify.com"
BASE_URL = "https://quick-transfer.example"


async def _token():
    return "session-token"


def _call(handler, method, *args):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = PosApiClient(http, BASE_URL, SHOP, _token)
            return await getattr(client, method)(*args)

    return asyncio.run(run())


def _request():
    return TransferRequest(
        inventory_item_id="gid://shopify/InventoryItem/1",
        origin_location_id="A",
        destination_location_id="B",
        quantity=2,
    )


class TestPosApiClient:
    def test_search_sends_token_and_shop(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json={"products": [{"id": "p", "title": "Watch", "image": None, "variants": []}]})

        [product] = _call(handler, "search", "watch")
        request = seen["request"]
        assert request.headers["Authorization"] == "Bearer session-token"
        assert request.url.params["shop"] == SHOP
        assert request.url.params["q"] == "watch"
        assert product.title == "Watch"

    def test_search_error_body(self):
        def handler(request):
            return httpx.Response(500, json={"products": [], "error": "Search failed: timeout"})

        with pytest.raises(TransportError, match="Search failed"):
            _call(handler, "search", "")

    def test_lookup_levels_encodes_item_id(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.raw_path.decode()
            return httpx.Response(
                200,
                json={
                    "inventoryItemId": "gid://shopify/InventoryItem/1",
                    "levels": {"A": {"name": "Shop 45", "available": 2, "onHand": 3}},
                },
            )

        levels = _call(handler, "lookup_levels", "gid://shopify/InventoryItem/1")
        assert seen["path"].startswith("/api/inventory/gid%3A%2F%2Fshopify%2FInventoryItem%2F1")
        assert levels["A"].on_hand == 3

    def test_lookup_levels_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"error": "Inventory item not found"})

        with pytest.raises(NotFoundError):
            _call(handler, "lookup_levels", "missing")

    def test_transfer_success(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"success": True, "state": "succeeded", "adjustmentId": "gid://shopify/InventoryAdjustmentGroup/1", "warnings": []},
            )

        result = _call(handler, "transfer", _request())
        assert seen["body"] == {
            "inventoryItemId": "gid://shopify/InventoryItem/1",
            "originLocationId": "A",
            "destinationLocationId": "B",
            "quantity": 2,
        }
        assert result.success is True
        assert result.adjustment_id == "gid://shopify/InventoryAdjustmentGroup/1"

    def test_transfer_validation_error(self):
        def handler(request):
            return httpx.Response(400, json={"success": False, "error": "Quantity must be a positive integer", "fields": ["quantity"]})

        with pytest.raises(ValidationError) as info:
            _call(handler, "transfer", _request())
        assert info.value.fields == ["quantity"]

    def test_transfer_auth_error(self):
        def handler(request):
            return httpx.Response(401, json={"error": "Invalid session token"})

        with pytest.raises(AuthError):
            _call(handler, "transfer", _request())

    def test_transfer_without_state_in_body(self):
        def handler(request):
            return httpx.Response(500, json={"success": False, "error": "Failed to transfer inventory"})

        result = _call(handler, "transfer", _request())
        assert result.state == TransferState.FAILED_TRANSPORT

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError):
            _call(handler, "search", "")
