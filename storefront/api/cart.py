"""Cart API endpoints"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.database import get_db
from storefront.api.deps import get_cart_session_id, get_cart_store
from storefront.services.cart_service import CartStore
from storefront.services.pricing_service import pricing_service
from storefront.services.product_service import product_service
from storefront.services.settings_service import settings_service
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemResponse,
    CartResponse,
)
from storefront.schemas.pricing import PriceBreakdown
from storefront.schemas.product import ProductResponse
from typing import Optional
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


async def _cart_response(db: AsyncSession, session_id: str, store_cart: CartStore) -> CartResponse:
    cart = await store_cart.get_cart(session_id)
    store = await settings_service.get_store_settings(db)
    return CartResponse(
        items=cart,
        total_items=pricing_service.count_items(cart),
        breakdown=pricing_service.compute_breakdown(cart, store.shipping_config),
        tax_disclaimer=store.gst_message,
    )


@router.get("", response_model=CartResponse)
async def get_cart(
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store),
    db: AsyncSession = Depends(get_db)
):
    """Cart contents with a freshly computed price breakdown"""
    return await _cart_response(db, session_id, store_cart)


@router.get("/totals", response_model=PriceBreakdown)
async def get_cart_totals(
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store),
    db: AsyncSession = Depends(get_db)
):
    cart = await store_cart.get_cart(session_id)
    store = await settings_service.get_store_settings(db)
    return pricing_service.compute_breakdown(cart, store.shipping_config)


@router.post("/items", response_model=CartItemResponse)
async def add_to_cart(
    item_data: CartItemCreate,
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store),
    db: AsyncSession = Depends(get_db)
):
    """
    Add a product to the cart.
    If the product is already in the cart its quantity is increased, capped at stock.
    """
    product = await product_service.get_by_id(db, item_data.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    snapshot, error = product_service.to_cart_item(
        ProductResponse.model_validate(product), item_data.variant_key
    )
    if error:
        raise HTTPException(status_code=400, detail=error)

    existing = next((i for i in await store_cart.get_cart(session_id) if i.key == snapshot.key), None)
    requested = item_data.quantity + (existing.quantity if existing else 0)

    line, error = await store_cart.add_to_cart(session_id, snapshot, item_data.quantity)
    if error:
        raise HTTPException(status_code=400, detail=error)

    return CartItemResponse(item=line, warning=CartStore.stock_warning(line, requested))


@router.patch("/items", response_model=CartItemResponse)
async def update_cart_item(
    item_data: CartItemUpdate,
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store)
):
    """Change a line's quantity; zero or less removes the line"""
    key = (item_data.product_id, item_data.variant_key)
    current = next((i for i in await store_cart.get_cart(session_id) if i.key == key), None)
    if not current:
        raise HTTPException(status_code=404, detail="Cart item not found")

    warning = CartStore.stock_warning(current, item_data.quantity)
    line = await store_cart.update_quantity(session_id, key, item_data.quantity)
    return CartItemResponse(item=line, warning=warning)


@router.delete("/items/{product_id}")
async def remove_cart_item(
    product_id: str,
    variant_key: Optional[str] = None,
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store)
):
    await store_cart.remove_from_cart(session_id, (product_id, variant_key))
    return {"message": "Item removed from cart"}


@router.delete("")
async def clear_cart(
    session_id: str = Depends(get_cart_session_id),
    store_cart: CartStore = Depends(get_cart_store)
):
    await store_cart.clear_cart(session_id)
    return {"message": "Cart cleared"}
