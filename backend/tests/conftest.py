import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="quick-transfer-tests-")
os.environ["SHOPIFY_API_KEY"] = "test-api-key"
os.environ["SHOPIFY_API_SECRET"] = "test-api-secret"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/quick_transfer_test.db"
os.environ["SHOP_DOMAIN"] = ""
os.environ["ADMIN_ACCESS_TOKEN"] = ""
os.environ["ADJUSTMENT_REASON"] = "correction"

import pytest

from quick_transfer.services.queries import (
    ACTIVATE_INVENTORY_MUTATION,
    ADJUST_INVENTORY_MUTATION,
)


SHOP = "test-shop.myshopify.com"


class FakeGraphQLClient:
    """Records every call and answers from a table keyed by GraphQL document."""

    def __init__(self, responses=None, shop=SHOP):
        self.responses = dict(responses or {})
        self.calls = []
        self.shop = shop

    async def execute(self, query, variables=None):
        self.calls.append((query, variables or {}))
        response = self.responses.get(query)
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(variables or {})
        if response is None:
            raise AssertionError("unexpected GraphQL document")
        return response

    def count(self, query):
        return sum(1 for called, _ in self.calls if called == query)

    def variables(self, query):
        return [variables for called, variables in self.calls if called == query]


def adjust_success(adjustment_id="gid://shopify/InventoryAdjustmentGroup/1"):
    return {
        "inventoryAdjustQuantities": {
            "inventoryAdjustmentGroup": {
                "id": adjustment_id,
                "createdAt": "2026-10-18T10:00:00Z",
                "reason": "correction",
            },
            "userErrors": [],
        }
    }


def activate_success():
    return {
        "inventoryActivate": {
            "inventoryLevel": {"id": "gid://shopify/InventoryLevel/9", "quantities": []},
            "userErrors": [],
        }
    }


@pytest.fixture
def make_client():
    return FakeGraphQLClient


@pytest.fixture
def transfer_client():
    return FakeGraphQLClient(
        {
            ACTIVATE_INVENTORY_MUTATION: activate_success(),
            ADJUST_INVENTORY_MUTATION: adjust_success(),
        }
    )
