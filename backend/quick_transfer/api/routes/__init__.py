from fastapi import APIRouter

from quick_transfer.api.routes import inventory, locations, public, search, transfer


api_router = APIRouter()
api_router.include_router(search.router, prefix="/search", tags=["Search"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(inventory.router, prefix="/product", tags=["Inventory"], include_in_schema=False)
api_router.include_router(locations.router, prefix="/locations", tags=["Locations"])
api_router.include_router(transfer.router, prefix="/transfer", tags=["Transfer"])
api_router.include_router(public.router, tags=["Public"])
