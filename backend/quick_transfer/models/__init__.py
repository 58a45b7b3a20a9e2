from quick_transfer.models.shop_session import ShopSession

__all__ = [
    "ShopSession",
]
