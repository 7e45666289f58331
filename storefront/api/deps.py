from fastapi import Header, HTTPException, status
from storefront.config import settings
from storefront.services.cart_service import CartStore, cart_store
import secrets


async def get_cart_session_id(
    x_cart_session: str = Header(..., min_length=8, max_length=128)
) -> str:
    """
    Browsing session that owns the cart.
    Generated by the client and kept for the lifetime of the browser session.
    """
    return x_cart_session


def get_cart_store() -> CartStore:
    return cart_store


async def require_admin(x_admin_key: str = Header(default="")) -> str:
    """Gate admin endpoints behind the shared admin key"""
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access is not configured",
        )
    if not x_admin_key or not secrets.compare_digest(x_admin_key.encode(), settings.ADMIN_API_KEY.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin key",
        )
    return "admin"
