from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from quick_transfer.api.deps import get_admin_client
from quick_transfer.core.errors import ValidationError
from quick_transfer.services.graphql_client import AdminGraphQLClient
from quick_transfer.services.transfer import TransferOrchestrator


router = APIRouter()


@router.post("")
async def transfer_inventory(
    request: Request,
    client: AdminGraphQLClient = Depends(get_admin_client),
) -> JSONResponse:
    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse({"success": False, "error": "Invalid JSON body"}, status_code=400)

    try:
        result = await TransferOrchestrator(client).transfer(payload)
    except ValidationError as exc:
        return JSONResponse({"success": False, **exc.to_dict()}, status_code=exc.status_code)
    return JSONResponse(result.to_response(), status_code=result.status_code)


@router.get("")
def transfer_get_not_allowed() -> JSONResponse:
    return JSONResponse({"error": "Use POST to transfer inventory"}, status_code=405)
