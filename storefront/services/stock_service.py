"""Stock adjustment after a sale is confirmed"""
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.core.exceptions import ProductNotFoundError
from storefront.services.product_service import product_service
import logging

logger = logging.getLogger(__name__)


class StockService:
    """Applies sold quantities to product stock records"""

    @staticmethod
    async def reduce_stock(db: AsyncSession, product_id: str, quantity_sold: int) -> int:
        """
        Decrement a product's stock, never below zero, and refresh its in_stock flag.
        Returns the new stock count.

        This is a plain read-modify-write with no row lock or version check,
        so two sales of the same product running together can both read the
        same starting stock.
        """
        product = await product_service.get_by_id(db, product_id)
        if not product:
            logger.warning(f"[STOCK] Product {product_id} not found")
            raise ProductNotFoundError(product_id)

        new_stock = max(0, product.stock_count - quantity_sold)
        product.stock_count = new_stock
        product.in_stock = new_stock > 0

        try:
            await db.commit()
        except Exception as e:
            logger.error(f"[STOCK] Failed to update stock for {product_id}: {e}", exc_info=True)
            await db.rollback()
            raise

        logger.info(f"[STOCK] Product {product_id} stock reduced by {quantity_sold} -> {new_stock}")
        return new_stock


stock_service = StockService()
