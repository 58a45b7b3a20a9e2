import httpx
from fastapi import Depends, Header, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from quick_transfer.core.errors import AuthError
from quick_transfer.core.security import decode_session_token, normalize_shop_domain, shop_from_claims
from quick_transfer.db.session import get_db
from quick_transfer.models.shop_session import ShopSession
from quick_transfer.services.graphql_client import AdminGraphQLClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def resolve_shop(authorization: str | None, shop_param: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Missing session token")

    claims = decode_session_token(authorization[len("Bearer "):].strip())
    if not claims:
        raise AuthError("Invalid session token")

    token_shop = shop_from_claims(claims)
    if shop_param:
        shop = normalize_shop_domain(shop_param)
        if token_shop and token_shop != shop:
            raise AuthError("Session token was not issued for this shop")
        return shop
    if not token_shop:
        raise AuthError("Session token does not identify a shop")
    return token_shop


def load_shop_session(db: Session, shop: str) -> ShopSession:
    session = db.scalar(select(ShopSession).where(ShopSession.shop == shop))
    if not session:
        raise AuthError(f"Auth failed: no session stored for {shop}")
    return session


def get_admin_client(
    shop: str | None = Query(default=None),
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> AdminGraphQLClient:
    shop_domain = resolve_shop(authorization, shop)
    session = load_shop_session(db, shop_domain)
    return AdminGraphQLClient(http_client, shop_domain, session.access_token)
