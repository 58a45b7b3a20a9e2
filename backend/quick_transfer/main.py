import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quick_transfer import __version__
from quick_transfer.api.routes import api_router
from quick_transfer.core.config import get_settings
from quick_transfer.core.errors import QuickTransferError
from quick_transfer.core.logging import configure_logging
from quick_transfer.db.base import Base
from quick_transfer.db.session import SessionLocal, engine
from quick_transfer.services.graphql_client import create_http_client
from quick_transfer.services.seed import seed_shop_session


settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_shop_session(db)
    finally:
        db.close()

    app.state.http_client = create_http_client()
    logger.info("started app=%r environment=%s", settings.app_name, settings.environment)
    try:
        yield
    finally:
        await app.state.http_client.aclose()


app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(QuickTransferError)
async def quick_transfer_error_handler(request: Request, exc: QuickTransferError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request failed path=%s error=%s", request.url.path, exc.message)
    else:
        logger.info("request rejected path=%s status=%s error=%s", request.url.path, exc.status_code, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.get("/")
def root() -> dict:
    return {
        "name": "Quick Transfer API",
        "version": __version__,
        "docs": "/docs",
    }


app.include_router(api_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run("quick_transfer.main:app", host="0.0.0.0", port=8000, reload=settings.environment == "development")
