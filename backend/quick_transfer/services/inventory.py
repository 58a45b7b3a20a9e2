"""Read-only inventory lookups against the Admin GraphQL API.

Search dispatches on the shape of the input text:

* 8 to 14 ASCII digits: exact barcode lookup, at most one product.
* two characters or more: fuzzy ``title``/``sku`` query.
* anything shorter (including empty): default listing of active products,
  most recently updated first.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from quick_transfer.core.config import get_settings
from quick_transfer.core.errors import NotFoundError, TransportError
from quick_transfer.schemas.inventory import InventoryLevel, Location, Product
from quick_transfer.schemas.remote import InventoryLevelsResult, LocationsResult, decode_search_result
from quick_transfer.services.queries import (
    GET_INVENTORY_LEVELS_QUERY,
    GET_LOCATIONS_QUERY,
    SEARCH_BY_BARCODE_QUERY,
    SEARCH_PRODUCTS_QUERY,
)


logger = logging.getLogger(__name__)

BARCODE_PATTERN = re.compile(r"[0-9]{8,14}")
MIN_TEXT_QUERY_LENGTH = 2
DEFAULT_LIST_FILTER = "status:active"


class GraphQLExecutor(Protocol):
    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]: ...


class SearchKind(str, Enum):
    BARCODE = "barcode"
    TEXT = "text"
    DEFAULT = "default"


def is_barcode(text: str) -> bool:
    return BARCODE_PATTERN.fullmatch(text or "") is not None


def classify_search(text: str) -> SearchKind:
    if is_barcode(text):
        return SearchKind.BARCODE
    if text and len(text) >= MIN_TEXT_QUERY_LENGTH:
        return SearchKind.TEXT
    return SearchKind.DEFAULT


def build_text_filter(text: str) -> str:
    return f"title:*{text}* OR sku:*{text}*"


class InventoryGateway:
    def __init__(self, client: GraphQLExecutor) -> None:
        self.client = client
        self.settings = get_settings()

    async def search(self, text: str) -> list[Product]:
        kind = classify_search(text)
        logger.debug("search kind=%s text=%r", kind.value, text)

        if kind == SearchKind.BARCODE:
            data = await self.client.execute(SEARCH_BY_BARCODE_QUERY, {"barcode": text})
        elif kind == SearchKind.TEXT:
            data = await self.client.execute(
                SEARCH_PRODUCTS_QUERY,
                {
                    "query": build_text_filter(text),
                    "first": self.settings.search_page_size,
                    "variantsFirst": self.settings.variants_page_size,
                    "sortKey": "RELEVANCE",
                    "reverse": False,
                },
            )
        else:
            data = await self.client.execute(
                SEARCH_PRODUCTS_QUERY,
                {
                    "query": DEFAULT_LIST_FILTER,
                    "first": self.settings.default_list_size,
                    "variantsFirst": self.settings.variants_page_size,
                    "sortKey": "UPDATED_AT",
                    "reverse": True,
                },
            )

        try:
            result = decode_search_result(kind.value, data)
        except PydanticValidationError as exc:
            logger.error("unexpected %s search response shape: %s", kind.value, exc)
            raise TransportError(f"Unexpected {kind.value} search response from remote service") from exc
        return result.to_products()

    async def lookup_levels(self, inventory_item_id: str) -> dict[str, InventoryLevel]:
        data = await self.client.execute(
            GET_INVENTORY_LEVELS_QUERY,
            {"inventoryItemId": inventory_item_id, "first": self.settings.levels_page_size},
        )
        result = _decode(InventoryLevelsResult, data, "inventory levels")
        if result.inventory_item is None:
            raise NotFoundError("Inventory item not found")
        return result.to_levels()

    async def list_locations(self, active_only: bool = True) -> list[Location]:
        data = await self.client.execute(GET_LOCATIONS_QUERY, {"first": self.settings.locations_page_size})
        locations = _decode(LocationsResult, data, "locations").to_locations()
        if active_only:
            return [location for location in locations if location.is_active]
        return locations


def _decode(model, data: dict[str, Any], label: str):
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        logger.error("unexpected %s response shape: %s", label, exc)
        raise TransportError(f"Unexpected {label} response from remote service") from exc
