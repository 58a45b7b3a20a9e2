from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlparse

from jose import JWTError, jwt

from quick_transfer.core.config import get_settings


SESSION_TOKEN_ALGORITHM = "HS256"


def create_session_token(shop: str, subject: str = "pos", expires_seconds: int = 60) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "iss": f"https://{shop}/admin",
        "dest": f"https://{shop}",
        "aud": settings.shopify_api_key,
        "sub": subject,
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(seconds=expires_seconds),
    }
    return jwt.encode(to_encode, settings.shopify_api_secret, algorithm=SESSION_TOKEN_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any] | None:
    settings = get_settings()
    if not settings.shopify_api_secret:
        return None
    try:
        return jwt.decode(
            token,
            settings.shopify_api_secret,
            algorithms=[SESSION_TOKEN_ALGORITHM],
            audience=settings.shopify_api_key or None,
            options={"verify_aud": bool(settings.shopify_api_key)},
        )
    except JWTError:
        return None


def shop_from_claims(claims: dict[str, Any]) -> str:
    dest = str(claims.get("dest", ""))
    return normalize_shop_domain(urlparse(dest).netloc or dest)


def normalize_shop_domain(value: str) -> str:
    shop = (value or "").strip().lower()
    if shop.startswith("https://"):
        shop = shop[len("https://"):]
    return shop.rstrip("/")
