"""Cart store for the per-session shopping cart"""
import json
import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError

from storefront.config import settings
from storefront.core.redis import RedisClient, redis_client
from storefront.core.websocket import ConnectionManager, connection_manager
from storefront.schemas.cart import CartKey, CartLineItem, CartLineItemBase

logger = logging.getLogger(__name__)

OUT_OF_STOCK_MESSAGE = "Product is out of stock"


class CartStore:
    """
    Sole mutator of persisted carts.

    A cart is one JSON array stored under ``<CART_KEY>:<session_id>`` and is
    always read and written whole. Quantities are clamped to the stock
    snapshot on the line instead of being rejected. Every mutation is
    followed by a cartUpdated notification.

    Concurrent writers to the same session overwrite each other (last full
    write wins). Storage errors are raised before anything is written, so a
    failed read never replaces the stored cart.
    """

    def __init__(
        self,
        storage: Optional[RedisClient] = None,
        notifier: Optional[ConnectionManager] = None,
        cart_key: str = settings.CART_KEY,
        ttl: Optional[int] = settings.CART_TTL_SECONDS,
    ):
        self.storage = storage or redis_client
        self.notifier = notifier or connection_manager
        self.cart_key = cart_key
        self.ttl = ttl

    def storage_key(self, session_id: str) -> str:
        return f"{self.cart_key}:{session_id}"

    async def get_cart(self, session_id: str) -> List[CartLineItem]:
        """Current cart, empty when nothing is persisted or the blob is unreadable"""
        raw = await self.storage.get_blob(self.storage_key(session_id))
        if not raw:
            return []
        try:
            return [CartLineItem.model_validate(entry) for entry in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"[CART] Discarding unreadable cart for session {session_id}: {e}")
            return []

    async def _save(self, session_id: str, cart: List[CartLineItem]):
        payload = json.dumps([item.model_dump() for item in cart])
        await self.storage.set_blob(self.storage_key(session_id), payload, ttl=self.ttl)
        await self._notify(session_id, cart)

    async def _notify(self, session_id: str, cart: List[CartLineItem]):
        try:
            await self.notifier.notify_cart_updated(session_id, sum(i.quantity for i in cart))
        except Exception as e:
            logger.error(f"[CART] cartUpdated notification failed for session {session_id}: {e}")

    @staticmethod
    def _find(cart: List[CartLineItem], key: CartKey) -> int:
        for index, item in enumerate(cart):
            if item.key == key:
                return index
        return -1

    async def add_to_cart(
        self,
        session_id: str,
        item: CartLineItemBase,
        quantity: int = 1
    ) -> Tuple[Optional[CartLineItem], Optional[str]]:
        """
        Add a product snapshot to the cart.
        An existing line for the same product and variant is merged and its
        stock snapshot refreshed; the quantity never exceeds available stock.
        Returns: (CartLineItem, error_message)
        """
        if item.available_stock <= 0:
            logger.info(f"[CART] Rejected out-of-stock product {item.product_id} for session {session_id}")
            return None, OUT_OF_STOCK_MESSAGE

        cart = await self.get_cart(session_id)
        index = self._find(cart, item.key)

        if index >= 0:
            existing = cart[index]
            new_quantity = min(existing.quantity + quantity, item.available_stock)
            line = existing.model_copy(update={
                "quantity": new_quantity,
                "available_stock": item.available_stock,
            })
            cart[index] = line
            logger.info(f"[CART] Updated line {item.key} for session {session_id}, qty={new_quantity}")
        else:
            line = CartLineItem(**item.model_dump(), quantity=min(quantity, item.available_stock))
            cart.append(line)
            logger.info(f"[CART] Added line {item.key} for session {session_id}, qty={line.quantity}")

        await self._save(session_id, cart)
        return line, None

    async def update_quantity(
        self,
        session_id: str,
        key: CartKey,
        new_quantity: int
    ) -> Optional[CartLineItem]:
        """
        Set a line's quantity, clamped to its stored stock snapshot.
        Zero or below removes the line. Clamping is silent; use
        ``stock_warning`` beforehand to tell the customer.
        """
        if new_quantity <= 0:
            await self.remove_from_cart(session_id, key)
            return None

        cart = await self.get_cart(session_id)
        index = self._find(cart, key)
        if index < 0:
            return None

        line = cart[index].model_copy(update={
            "quantity": min(new_quantity, cart[index].available_stock),
        })
        cart[index] = line
        await self._save(session_id, cart)
        logger.info(f"[CART] Set line {key} for session {session_id} to qty={line.quantity}")
        return line

    async def remove_from_cart(self, session_id: str, key: CartKey):
        """Remove a line; missing lines are ignored"""
        cart = await self.get_cart(session_id)
        remaining = [item for item in cart if item.key != key]
        if len(remaining) != len(cart):
            await self._save(session_id, remaining)
            logger.info(f"[CART] Removed line {key} for session {session_id}")

    async def clear_cart(self, session_id: str):
        """Delete the whole persisted cart"""
        await self.storage.delete_blob(self.storage_key(session_id))
        await self._notify(session_id, [])
        logger.info(f"[CART] Cleared cart for session {session_id}")

    @staticmethod
    def stock_warning(line: CartLineItem, requested: int) -> Optional[str]:
        """Message to show when a requested quantity will be clamped"""
        if requested > line.available_stock:
            return f"Only {line.available_stock} left in stock"
        return None


cart_store = CartStore()
