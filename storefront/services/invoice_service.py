"""Invoice data for orders"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from storefront.core.currency import format_currency
from storefront.core.datetime_utils import utc_now, epoch_millis
from storefront.models.invoice import InvoiceRecord
from storefront.models.order import Order
from storefront.schemas.cart import CartLineItem
from storefront.schemas.invoice import InvoiceData, InvoiceLine
from storefront.schemas.settings import StoreSettings
from typing import List
import logging

logger = logging.getLogger(__name__)

FREE_SHIPPING_LABEL = "FREE"


class InvoiceService:
    """Builds invoice data from stored orders and keeps the invoice log"""

    @staticmethod
    def build_invoice_data(order: Order, store: StoreSettings) -> InvoiceData:
        """
        Reshape a stored order into the fields an invoice renderer needs.
        Totals come from the order as stored at checkout; only per-line
        totals are derived here.
        """
        lines = []
        for raw in order.items:
            item = CartLineItem.model_validate(raw)
            lines.append(InvoiceLine(
                name=item.display_name,
                variant=item.variant_key or "",
                quantity=item.quantity,
                unit_price=item.effective_price,
                line_total=item.line_total,
            ))

        return InvoiceData(
            order_id=order.order_id,
            order_date=(order.created_at or utc_now()).date(),
            store_name=store.store_name,
            whatsapp_number=store.whatsapp_number,
            lines=lines,
            subtotal=order.subtotal,
            shipping_total=order.shipping_total,
            grand_total=order.grand_total,
            shipping_label=(
                FREE_SHIPPING_LABEL if order.shipping_total == 0 else format_currency(order.shipping_total)
            ),
            disclaimer=store.gst_message,
        )

    @staticmethod
    async def record_invoice(db: AsyncSession, order: Order, generated_by: str = "admin") -> InvoiceRecord:
        """Log an invoice for the order and flag the order as invoiced"""
        now = utc_now()
        record = InvoiceRecord(
            invoice_id=f"INV-{epoch_millis(now)}",
            order_id=order.order_id,
            generated_by=generated_by,
            generated_at=now,
            order_total=order.grand_total,
            order_items=[
                {"name": item.display_name, "quantity": item.quantity, "price": item.effective_price}
                for item in (CartLineItem.model_validate(raw) for raw in order.items)
            ],
        )
        db.add(record)
        order.invoice_generated = True
        order.invoice_generated_at = now

        try:
            await db.commit()
        except Exception as e:
            logger.error(f"[INVOICE] Failed to record invoice for {order.order_id}: {e}", exc_info=True)
            await db.rollback()
            raise
        await db.refresh(record)

        logger.info(f"[INVOICE] Recorded {record.invoice_id} for order {order.order_id}")
        return record

    @staticmethod
    async def list_invoices(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[InvoiceRecord]:
        result = await db.execute(
            select(InvoiceRecord).order_by(InvoiceRecord.generated_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())


invoice_service = InvoiceService()
