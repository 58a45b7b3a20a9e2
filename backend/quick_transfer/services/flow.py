"""Screen sequencing for the POS quick-transfer modal.

    search -> variant_select (only when the product has several variants)
           -> confirm -> result -> search

State only changes on an explicit user action or when a backend call
completes. The one exception is the result screen, which returns to search
on its own after ``auto_return_seconds`` unless the user navigates first.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from quick_transfer.core.config import get_settings
from quick_transfer.core.errors import QuickTransferError
from quick_transfer.schemas.inventory import InventoryLevel, Product, ProductVariant, TransferRequest, TransferResult
from quick_transfer.services.inventory import InventoryGateway
from quick_transfer.services.transfer import TransferOrchestrator


logger = logging.getLogger(__name__)


class FlowBackend(Protocol):
    async def search(self, text: str) -> list[Product]: ...

    async def lookup_levels(self, inventory_item_id: str) -> dict[str, InventoryLevel]: ...

    async def transfer(self, request: TransferRequest) -> TransferResult: ...


class ServiceBackend:
    """Drives the flow in-process with the gateway and the orchestrator."""

    def __init__(self, gateway: InventoryGateway, orchestrator: TransferOrchestrator) -> None:
        self.gateway = gateway
        self.orchestrator = orchestrator

    async def search(self, text: str) -> list[Product]:
        return await self.gateway.search(text)

    async def lookup_levels(self, inventory_item_id: str) -> dict[str, InventoryLevel]:
        return await self.gateway.lookup_levels(inventory_item_id)

    async def transfer(self, request: TransferRequest) -> TransferResult:
        return await self.orchestrator.transfer(request)


class FlowState(str, Enum):
    SEARCH = "search"
    VARIANT_SELECT = "variant_select"
    CONFIRM = "confirm"
    RESULT = "result"


class FlowStateError(RuntimeError):
    pass


@dataclass(frozen=True)
class TransferOutcome:
    quantity: int
    new_origin_stock: int
    new_destination_stock: int
    adjustment_id: str | None


class TransferFlow:
    def __init__(
        self,
        backend: FlowBackend,
        origin_location_id: str,
        destination_location_id: str,
        auto_return_seconds: float = 3,
    ) -> None:
        self.backend = backend
        self.origin_location_id = origin_location_id
        self.destination_location_id = destination_location_id
        self.auto_return_seconds = auto_return_seconds

        self.state = FlowState.SEARCH
        self.query = ""
        self.products: list[Product] = []
        self.product: Product | None = None
        self.variant: ProductVariant | None = None
        self.levels: dict[str, InventoryLevel] = {}
        self.quantity = 1
        self.outcome: TransferOutcome | None = None
        self.error: str | None = None
        self.transferring = False
        self._generation = 0
        self._auto_return: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, backend: FlowBackend) -> "TransferFlow":
        settings = get_settings()
        return cls(
            backend,
            settings.origin_location_id,
            settings.destination_location_id,
            auto_return_seconds=settings.result_auto_return_seconds,
        )

    @property
    def origin_stock(self) -> int:
        level = self.levels.get(self.origin_location_id)
        return level.available if level else 0

    @property
    def destination_stock(self) -> int:
        level = self.levels.get(self.destination_location_id)
        return level.available if level else 0

    async def start(self) -> list[Product]:
        return await self.search("")

    async def search(self, text: str) -> list[Product]:
        self._require(FlowState.SEARCH)
        self.query = text
        self.error = None
        try:
            self.products = await self.backend.search(text)
        except QuickTransferError as exc:
            self.products = []
            self.error = exc.message
        return self.products

    async def select_product(self, product: Product) -> None:
        self._require(FlowState.SEARCH)
        if not product.variants:
            self.error = "Product has no variants"
            return

        self.product = product
        if len(product.variants) > 1:
            self._move(FlowState.VARIANT_SELECT)
            return
        await self._open_confirm(product.variants[0])

    async def select_variant(self, variant: ProductVariant) -> None:
        self._require(FlowState.VARIANT_SELECT)
        await self._open_confirm(variant)

    def set_quantity(self, quantity: int) -> None:
        self._require(FlowState.CONFIRM)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError("Quantity must be a whole number")
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        self.quantity = quantity

    async def confirm_transfer(self) -> TransferResult | None:
        self._require(FlowState.CONFIRM)
        if self.transferring:
            raise FlowStateError("A transfer is already in progress")
        if not self.variant or not self.variant.inventory_item_id:
            self.error = "No inventory tracking"
            return None
        if self.quantity > self.origin_stock:
            self.error = f"Only {self.origin_stock} available"
            return None

        self.error = None
        try:
            request = TransferRequest(
                inventory_item_id=self.variant.inventory_item_id,
                origin_location_id=self.origin_location_id,
                destination_location_id=self.destination_location_id,
                quantity=self.quantity,
            )
        except PydanticValidationError as exc:
            fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
            self.error = f"Invalid transfer request: {', '.join(fields)}"
            return None

        generation = self._generation
        self.transferring = True
        try:
            result = await self.backend.transfer(request)
        except QuickTransferError as exc:
            if generation == self._generation:
                self.error = exc.message
            return None
        finally:
            self.transferring = False

        if generation != self._generation:
            logger.info(
                "transfer finished after leaving confirm success=%s adjustment=%s",
                result.success,
                result.adjustment_id,
            )
            return result

        if not result.success:
            self.error = result.error or "Transfer failed"
            return result

        self.outcome = TransferOutcome(
            quantity=self.quantity,
            new_origin_stock=self.origin_stock - self.quantity,
            new_destination_stock=self.destination_stock + self.quantity,
            adjustment_id=result.adjustment_id,
        )
        self._move(FlowState.RESULT)
        self._schedule_auto_return()
        return result

    def back(self) -> None:
        if self.state == FlowState.CONFIRM and self.product and len(self.product.variants) > 1:
            self.variant = None
            self.levels = {}
            self.error = None
            self._move(FlowState.VARIANT_SELECT)
            return
        if self.state != FlowState.SEARCH:
            self._reset_to_search()

    def done(self) -> None:
        self._require(FlowState.RESULT)
        self._reset_to_search()

    async def _open_confirm(self, variant: ProductVariant) -> None:
        self.variant = variant
        self.levels = {}
        self.quantity = 1
        self.error = None
        self._move(FlowState.CONFIRM)
        if not variant.inventory_item_id:
            self.error = "No inventory tracking"
            return
        generation = self._generation
        try:
            levels = await self.backend.lookup_levels(variant.inventory_item_id)
        except QuickTransferError as exc:
            if generation == self._generation:
                self.error = f"Failed to load inventory: {exc.message}"
            return
        if generation == self._generation:
            self.levels = levels

    def _schedule_auto_return(self) -> None:
        self._cancel_auto_return()
        self._auto_return = asyncio.get_running_loop().create_task(self._auto_return_after(self.auto_return_seconds))

    async def _auto_return_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._auto_return = None
        if self.state == FlowState.RESULT:
            logger.debug("result screen timed out, returning to search")
            self._reset_to_search()

    def _cancel_auto_return(self) -> None:
        if self._auto_return is not None:
            self._auto_return.cancel()
            self._auto_return = None

    def _reset_to_search(self) -> None:
        self._cancel_auto_return()
        self.product = None
        self.variant = None
        self.levels = {}
        self.quantity = 1
        self.outcome = None
        self.error = None
        self._move(FlowState.SEARCH)

    def _move(self, state: FlowState) -> None:
        logger.debug("flow %s -> %s", self.state.value, state.value)
        self.state = state
        self._generation += 1

    def _require(self, state: FlowState) -> None:
        if self.state != state:
            raise FlowStateError(f"Expected state {state.value}, flow is in {self.state.value}")
