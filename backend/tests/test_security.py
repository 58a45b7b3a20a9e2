"""
Tests for core.security session tokens and services.seed.
"""

from sqlalchemy import select

from conftest import SHOP
from quick_transfer.core.config import get_settings
from quick_transfer.core.security import (
    create_session_token,
    decode_session_token,
    normalize_shop_domain,
    shop_from_claims,
)
from quick_transfer.db.base import Base
from quick_transfer.db.session import SessionLocal, engine
from quick_transfer.models.shop_session import ShopSession
from quick_transfer.services.seed import seed_shop_session


class TestSessionToken:
    def test_round_trip_shop(self):
        claims = decode_session_token(create_session_token(SHOP))
        assert claims is not None
        assert shop_from_claims(claims) == SHOP

    def test_tampered_token_rejected(self):
        header, payload, _ = create_session_token(SHOP).split(".")
        assert decode_session_token(f"{header}.{payload}.bm90LXRoZS1zaWduYXR1cmU") is None

    def test_expired_token_rejected(self):
        assert decode_session_token(create_session_token(SHOP, expires_seconds=-60)) is None

    def test_normalize_shop_domain(self):
        assert normalize_shop_domain(" https://Test-Shop.myshopify.com/ ") == SHOP


class TestSeed:
    def test_seed_from_settings(self, monkeypatch):
        settings = get_settings()
        monkeypatch.setattr(settings, "shop_domain", "Test-Shop.myshopify.com")
        monkeypatch.setattr(settings, "admin_access_token", "shpat_one")
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            seed_shop_session(db)
            monkeypatch.setattr(settings, "admin_access_token", "shpat_two")
            seed_shop_session(db)
            sessions = db.scalars(select(ShopSession)).all()
            assert [(s.shop, s.access_token) for s in sessions] == [(SHOP, "shpat_two")]
        finally:
            db.close()
            Base.metadata.drop_all(bind=engine)

    def test_seed_without_configuration(self):
        db = SessionLocal()
        try:
            assert seed_shop_session(db) is None
        finally:
            db.close()
