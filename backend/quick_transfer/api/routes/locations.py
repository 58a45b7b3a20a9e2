from fastapi import APIRouter, Depends

from quick_transfer.api.deps import get_admin_client
from quick_transfer.services.graphql_client import AdminGraphQLClient
from quick_transfer.services.inventory import InventoryGateway


router = APIRouter()


@router.get("")
async def list_locations(client: AdminGraphQLClient = Depends(get_admin_client)) -> dict:
    locations = await InventoryGateway(client).list_locations(active_only=True)
    return {"locations": [location.to_response() for location in locations]}
