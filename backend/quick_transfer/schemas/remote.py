"""Wire shapes returned by the Admin GraphQL API.

Each query has its own response class; all of them decode into the same
``Product``/``InventoryLevel``/``Location`` view models. Required fields
(ids, titles, connection edges) are validated strictly so an unexpected
shape is rejected instead of defaulted. Mutation payloads must carry
``userErrors`` even when it is empty. Optional fields (image, sku, barcode,
price, inventory item) fall back to ``None``.

Search responses are tagged with the kind of query that produced them and
decoded through one discriminated union.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from quick_transfer.schemas.inventory import InventoryLevel, Location, Product, ProductVariant


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ImageNode(WireModel):
    url: str | None = None


class InventoryItemRef(WireModel):
    id: str


class VariantNode(WireModel):
    id: str
    title: str
    sku: str | None = None
    barcode: str | None = None
    price: str | None = None
    inventory_item: InventoryItemRef | None = None

    def to_variant(self) -> ProductVariant:
        return ProductVariant(
            id=self.id,
            title=self.title,
            sku=self.sku or None,
            barcode=self.barcode or None,
            price=self.price,
            inventory_item_id=self.inventory_item.id if self.inventory_item else None,
        )


class VariantEdge(WireModel):
    node: VariantNode


class VariantConnection(WireModel):
    edges: list[VariantEdge]


class ProductNode(WireModel):
    id: str
    title: str
    featured_image: ImageNode | None = None
    variants: VariantConnection

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            title=self.title,
            image=_image_url(self.featured_image),
            variants=[edge.node.to_variant() for edge in self.variants.edges],
        )


class ProductEdge(WireModel):
    node: ProductNode


class ProductConnection(WireModel):
    edges: list[ProductEdge]


class TextSearchResult(WireModel):
    kind: Literal["text"]
    products: ProductConnection

    def to_products(self) -> list[Product]:
        return [edge.node.to_product() for edge in self.products.edges]


class DefaultListResult(TextSearchResult):
    kind: Literal["default"]


class ParentProduct(WireModel):
    id: str
    title: str
    featured_image: ImageNode | None = None


class BarcodeVariantNode(VariantNode):
    product: ParentProduct


class BarcodeVariantEdge(WireModel):
    node: BarcodeVariantNode


class BarcodeVariantConnection(WireModel):
    edges: list[BarcodeVariantEdge]


class BarcodeSearchResult(WireModel):
    kind: Literal["barcode"]
    product_variants: BarcodeVariantConnection

    def to_products(self) -> list[Product]:
        if not self.product_variants.edges:
            return []
        variant = self.product_variants.edges[0].node
        return [
            Product(
                id=variant.product.id,
                title=variant.product.title,
                image=_image_url(variant.product.featured_image),
                variants=[variant.to_variant()],
            )
        ]


SearchResult = Annotated[Union[TextSearchResult, DefaultListResult, BarcodeSearchResult], Field(discriminator="kind")]

SEARCH_RESULT_ADAPTER: TypeAdapter[SearchResult] = TypeAdapter(SearchResult)


def decode_search_result(kind: str, data: dict[str, Any]) -> TextSearchResult | BarcodeSearchResult:
    """Validate a search response against the shape of the query that produced it."""
    return SEARCH_RESULT_ADAPTER.validate_python({**data, "kind": kind})


class LocationNode(WireModel):
    id: str
    name: str
    is_active: bool


class LocationEdge(WireModel):
    node: LocationNode


class LocationConnection(WireModel):
    edges: list[LocationEdge]


class LocationsResult(WireModel):
    locations: LocationConnection

    def to_locations(self) -> list[Location]:
        return [Location(id=edge.node.id, name=edge.node.name, is_active=edge.node.is_active) for edge in self.locations.edges]


class NamedQuantity(WireModel):
    name: str
    quantity: int | None = None


class LocationRef(WireModel):
    id: str
    name: str


class LevelNode(WireModel):
    id: str | None = None
    location: LocationRef
    quantities: list[NamedQuantity] | None = None

    def quantity(self, name: str) -> int:
        for item in self.quantities or []:
            if item.name == name:
                return item.quantity or 0
        return 0


class LevelEdge(WireModel):
    node: LevelNode


class LevelConnection(WireModel):
    edges: list[LevelEdge]


class InventoryItemNode(WireModel):
    id: str
    inventory_levels: LevelConnection


class InventoryLevelsResult(WireModel):
    inventory_item: InventoryItemNode | None = None

    def to_levels(self) -> dict[str, InventoryLevel]:
        levels: dict[str, InventoryLevel] = {}
        if not self.inventory_item:
            return levels
        for edge in self.inventory_item.inventory_levels.edges:
            node = edge.node
            levels[node.location.id] = InventoryLevel(
                name=node.location.name,
                available=node.quantity("available"),
                on_hand=node.quantity("on_hand"),
            )
        return levels


class RemoteUserErrorNode(WireModel):
    field: str | list[str] | None = None
    message: str


class AdjustmentGroup(WireModel):
    id: str
    created_at: str | None = None
    reason: str | None = None


class AdjustQuantitiesPayload(WireModel):
    inventory_adjustment_group: AdjustmentGroup | None = None
    user_errors: list[RemoteUserErrorNode]


class AdjustQuantitiesResult(WireModel):
    inventory_adjust_quantities: AdjustQuantitiesPayload


class ActivatePayload(WireModel):
    user_errors: list[RemoteUserErrorNode]


class ActivateResult(WireModel):
    inventory_activate: ActivatePayload | None = None


def _image_url(image: ImageNode | None) -> str | None:
    if image is None:
        return None
    return image.url or None
