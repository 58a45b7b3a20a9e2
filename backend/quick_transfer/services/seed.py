import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from quick_transfer.core.config import get_settings
from quick_transfer.core.security import normalize_shop_domain
from quick_transfer.models.shop_session import ShopSession


logger = logging.getLogger(__name__)


def seed_shop_session(db: Session) -> ShopSession | None:
    settings = get_settings()
    if not settings.shop_domain or not settings.admin_access_token:
        return None

    shop = normalize_shop_domain(settings.shop_domain)
    session = db.scalar(select(ShopSession).where(ShopSession.shop == shop))
    if session is None:
        session = ShopSession(shop=shop, access_token=settings.admin_access_token)
        db.add(session)
        logger.info("seeded offline session shop=%s", shop)
    elif session.access_token != settings.admin_access_token:
        session.access_token = settings.admin_access_token
        logger.info("refreshed offline session shop=%s", shop)
    db.commit()
    return session
