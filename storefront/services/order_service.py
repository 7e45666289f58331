"""Order service: checkout snapshots and admin order tooling"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import datetime, timedelta
from storefront.config import settings as config
from storefront.core.datetime_utils import utc_now, epoch_millis
from storefront.core.exceptions import EmptyCartError, OrderNotFoundError
from storefront.core.messaging import build_order_message, build_order_url, build_whatsapp_url
from storefront.core.websocket import connection_manager
from storefront.models.order import Order, OrderStatus
from storefront.schemas.cart import CartLineItem
from storefront.schemas.order import OrderSnapshot
from storefront.schemas.pricing import PriceBreakdown
from storefront.schemas.settings import StoreSettings
from storefront.services.cart_service import CartStore
from storefront.services.pricing_service import pricing_service
from typing import Optional, Tuple, List
import logging

logger = logging.getLogger(__name__)


class OrderService:
    """Service for managing order operations"""

    @staticmethod
    def generate_order_id(now: Optional[datetime] = None) -> str:
        """Time based id like ORD-1718000000000; collisions are not guarded against"""
        return f"ORD-{epoch_millis(now)}"

    @staticmethod
    def build_order_snapshot(
        cart: List[CartLineItem],
        breakdown: PriceBreakdown,
        now: Optional[datetime] = None,
        expiry_days: int = config.ORDER_EXPIRY_DAYS
    ) -> OrderSnapshot:
        """
        Freeze a cart and its breakdown into a pending order.
        Items and totals are copied by value; nothing is persisted here.
        """
        now = now or utc_now()
        return OrderSnapshot(
            order_id=OrderService.generate_order_id(now),
            items=[item.model_copy() for item in cart],
            subtotal=breakdown.subtotal,
            shipping_total=breakdown.shipping_total,
            shipping_line_items=list(breakdown.shipping_line_items),
            grand_total=breakdown.grand_total,
            created_at=now,
            expires_at=now + timedelta(days=expiry_days),
            status=OrderStatus.PENDING,
        )

    @staticmethod
    async def create_order(db: AsyncSession, snapshot: OrderSnapshot, whatsapp_sent: bool = True) -> Order:
        """Persist an order snapshot"""
        order = Order(
            order_id=snapshot.order_id,
            items=[item.model_dump() for item in snapshot.items],
            subtotal=snapshot.subtotal,
            shipping_total=snapshot.shipping_total,
            shipping_line_items=[line.model_dump() for line in snapshot.shipping_line_items],
            grand_total=snapshot.grand_total,
            status=snapshot.status,
            admin_notes="",
            whatsapp_sent=whatsapp_sent,
            invoice_generated=False,
            created_at=snapshot.created_at,
            expires_at=snapshot.expires_at,
            updated_at=snapshot.created_at,
        )
        db.add(order)
        try:
            await db.commit()
        except Exception as e:
            logger.error(f"[ORDER] Failed to persist order {snapshot.order_id}: {e}", exc_info=True)
            await db.rollback()
            raise
        await db.refresh(order)

        logger.info(f"[ORDER] Created order {order.order_id}, total: {order.grand_total}")
        return order

    @staticmethod
    async def checkout(
        db: AsyncSession,
        session_id: str,
        store: StoreSettings,
        cart_store: CartStore
    ) -> Tuple[Order, str, str]:
        """
        Turn the session cart into a persisted order.
        The cart is cleared only after the order write succeeds.
        Returns: (Order, handoff_message, whatsapp_url)
        """
        cart = await cart_store.get_cart(session_id)
        if not cart:
            logger.warning(f"[ORDER] Session {session_id} attempted checkout with empty cart")
            raise EmptyCartError()

        breakdown = pricing_service.compute_breakdown(cart, store.shipping_config)
        snapshot = OrderService.build_order_snapshot(cart, breakdown)
        order = await OrderService.create_order(db, snapshot)

        await cart_store.clear_cart(session_id)

        message = build_order_message(
            order.order_id,
            build_order_url(config.FRONTEND_URL, order.order_id),
            order.grand_total,
            store.gst_message,
            store.store_name,
        )
        whatsapp_url = build_whatsapp_url(store.whatsapp_number, message)

        try:
            await connection_manager.notify_order_created(order.order_id, order.grand_total)
        except Exception as e:
            logger.error(f"[ORDER] orderCreated notification failed for {order.order_id}: {e}")

        return order, message, whatsapp_url

    @staticmethod
    async def get_order_by_order_id(db: AsyncSession, order_id: str) -> Optional[Order]:
        """Look an order up by its human readable id"""
        result = await db.execute(select(Order).where(Order.order_id == order_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def require_order(db: AsyncSession, order_id: str) -> Order:
        order = await OrderService.get_order_by_order_id(db, order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[Order], int]:
        """Orders newest first, optionally filtered by status and order id fragment"""
        query = select(Order)

        if status:
            query = query.where(Order.status == status)
        if search:
            query = query.where(Order.order_id.ilike(f"%{search.strip()}%"))

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        query = query.order_by(Order.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    async def update_status(db: AsyncSession, order_id: str, status: OrderStatus) -> Order:
        order = await OrderService.require_order(db, order_id)
        previous = order.status
        order.status = status
        order.updated_at = utc_now()
        await db.commit()
        await db.refresh(order)
        logger.info(f"[ORDER] Order {order_id} status {previous} -> {status}")
        return order

    @staticmethod
    async def add_admin_note(
        db: AsyncSession,
        order_id: str,
        note: str,
        now: Optional[datetime] = None
    ) -> Order:
        """Append a timestamped note block to the order's admin notes"""
        order = await OrderService.require_order(db, order_id)
        now = now or utc_now()
        entry = f"[{now.strftime('%Y-%m-%d %H:%M:%S')}]\n{note.strip()}"
        order.admin_notes = f"{order.admin_notes}\n\n{entry}" if order.admin_notes else entry
        order.updated_at = now
        await db.commit()
        await db.refresh(order)
        logger.info(f"[ORDER] Note added to order {order_id}")
        return order

    @staticmethod
    async def get_order_stats(db: AsyncSession) -> dict:
        """Counts for the admin dashboard; revenue counts completed orders only"""
        total = (await db.execute(select(func.count(Order.id)))).scalar() or 0
        pending = (await db.execute(
            select(func.count(Order.id)).where(Order.status == OrderStatus.PENDING)
        )).scalar() or 0
        completed = (await db.execute(
            select(func.count(Order.id)).where(Order.status == OrderStatus.COMPLETED)
        )).scalar() or 0
        revenue = (await db.execute(
            select(func.coalesce(func.sum(Order.grand_total), 0)).where(Order.status == OrderStatus.COMPLETED)
        )).scalar() or 0

        return {
            "total": total,
            "pending": pending,
            "completed": completed,
            "revenue": int(revenue),
        }


order_service = OrderService()
