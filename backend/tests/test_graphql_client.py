"""
Tests for services.graphql_client against an in-memory httpx transport.
"""

import asyncio
import json

import httpx
import pytest

from quick_transfer.core.errors import AuthError, GraphQLResponseError, TransportError
from quick_transfer.services.graphql_client import AdminGraphQLClient, create_http_client


SHOP = "test-shop.myshopify.com"


def _execute(handler, query="query { shop { id } }", variables=None):
    async def run():
        http = create_http_client(transport=httpx.MockTransport(handler))
        async with http:
            client = AdminGraphQLClient(http, SHOP, "shpat_secret", api_version="2025-01")
            return await client.execute(query, variables)

    return asyncio.run(run())


class TestAdminGraphQLClient:
    def test_posts_query_with_shop_token(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["token"] = request.headers["X-Shopify-Access-Token"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"shop": {"id": "1"}}})

        data = _execute(handler, variables={"first": 1})
        assert data == {"shop": {"id": "1"}}
        assert seen["url"] == f"https://{SHOP}/admin/api/2025-01/graphql.json"
        assert seen["token"] == "shpat_secret"
        assert seen["body"]["variables"] == {"first": 1}

    def test_graphql_errors(self):
        def handler(request):
            return httpx.Response(200, json={"errors": [{"message": "Throttled"}]})

        with pytest.raises(GraphQLResponseError) as info:
            _execute(handler)
        assert info.value.user_errors == [{"field": None, "message": "Throttled"}]

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected_token(self, status):
        def handler(request):
            return httpx.Response(status, json={"errors": "Invalid API key or access token"})

        with pytest.raises(AuthError):
            _execute(handler)

    def test_server_error(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(TransportError, match="502"):
            _execute(handler)

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(TransportError):
            _execute(handler)

    def test_missing_data(self):
        def handler(request):
            return httpx.Response(200, json={"extensions": {}})

        with pytest.raises(TransportError, match="no data"):
            _execute(handler)

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(TransportError, match="ConnectTimeout"):
            _execute(handler)
