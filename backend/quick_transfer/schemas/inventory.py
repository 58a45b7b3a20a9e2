from enum import Enum
from typing import Annotated

from pydantic import Field, StringConstraints

from quick_transfer.schemas.base import CamelModel


RequiredId = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1)]


class ProductVariant(CamelModel):
    id: str
    title: str
    sku: str | None = None
    barcode: str | None = None
    price: str | None = None
    inventory_item_id: str | None = None


class Product(CamelModel):
    id: str
    title: str
    image: str | None = None
    variants: list[ProductVariant] = Field(default_factory=list)


class Location(CamelModel):
    id: str
    name: str
    is_active: bool


class InventoryLevel(CamelModel):
    name: str
    available: int = 0
    on_hand: int = 0


class InventoryLevelsRead(CamelModel):
    inventory_item_id: str
    levels: dict[str, InventoryLevel]


class TransferRequest(CamelModel):
    inventory_item_id: RequiredId
    origin_location_id: RequiredId
    destination_location_id: RequiredId
    quantity: Annotated[int, Field(strict=True, ge=1)] = 1
    idempotency_key: str | None = None


class UserError(CamelModel):
    field: str | list[str] | None = None
    message: str


class TransferState(str, Enum):
    VALIDATING = "validating"
    ACTIVATING_DESTINATION = "activating_destination"
    ADJUSTING_QUANTITIES = "adjusting_quantities"
    SUCCEEDED = "succeeded"
    FAILED_VALIDATION = "failed_validation"
    FAILED_USER_ERROR = "failed_user_error"
    FAILED_TRANSPORT = "failed_transport"


class TransferWarning(CamelModel):
    stage: str
    message: str
    errors: list[UserError] = Field(default_factory=list)


class TransferResult(CamelModel):
    success: bool
    state: TransferState
    adjustment_id: str | None = None
    created_at: str | None = None
    reason: str | None = None
    error: str | None = None
    errors: list[UserError] | None = None
    warnings: list[TransferWarning] = Field(default_factory=list)

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        if self.state == TransferState.FAILED_TRANSPORT:
            return 500
        return 400

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
