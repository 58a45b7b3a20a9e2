from fastapi import APIRouter

from quick_transfer import __version__


router = APIRouter()


@router.get("/health")
def public_health() -> dict:
    return {"status": "ok", "service": "Quick Transfer API", "version": __version__}
