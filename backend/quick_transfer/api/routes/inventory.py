from fastapi import APIRouter, Depends

from quick_transfer.api.deps import get_admin_client
from quick_transfer.core.errors import ValidationError
from quick_transfer.schemas.inventory import InventoryLevelsRead
from quick_transfer.services.graphql_client import AdminGraphQLClient
from quick_transfer.services.inventory import InventoryGateway


router = APIRouter()


@router.get("/{inventory_item_id:path}")
async def inventory_levels(
    inventory_item_id: str,
    client: AdminGraphQLClient = Depends(get_admin_client),
) -> dict:
    if not inventory_item_id.strip():
        raise ValidationError("Inventory item ID is required", ["inventoryItemId"])

    levels = await InventoryGateway(client).lookup_levels(inventory_item_id)
    return InventoryLevelsRead(inventory_item_id=inventory_item_id, levels=levels).to_response()
