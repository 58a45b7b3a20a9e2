from quick_transfer.schemas.inventory import (
    InventoryLevel,
    InventoryLevelsRead,
    Location,
    Product,
    ProductVariant,
    TransferRequest,
    TransferResult,
    TransferState,
    TransferWarning,
    UserError,
)

__all__ = [
    "InventoryLevel",
    "InventoryLevelsRead",
    "Location",
    "Product",
    "ProductVariant",
    "TransferRequest",
    "TransferResult",
    "TransferState",
    "TransferWarning",
    "UserError",
]
