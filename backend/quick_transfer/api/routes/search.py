import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from quick_transfer.api.deps import get_admin_client
from quick_transfer.core.errors import RemoteUserError, TransportError
from quick_transfer.services.graphql_client import AdminGraphQLClient
from quick_transfer.services.inventory import InventoryGateway


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def search_products(
    q: str = Query(default=""),
    client: AdminGraphQLClient = Depends(get_admin_client),
):
    try:
        products = await InventoryGateway(client).search(q)
    except (RemoteUserError, TransportError) as exc:
        logger.error("search failed shop=%s q=%r error=%s", client.shop, q, exc.message)
        return JSONResponse({"products": [], "error": f"Search failed: {exc.message}"}, status_code=500)
    return {"products": [product.to_response() for product in products]}
