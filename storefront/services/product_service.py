"""Product catalogue reads and cart snapshots"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from storefront.models.product import Product
from storefront.schemas.cart import CartLineItemBase
from storefront.schemas.product import ProductResponse
from typing import Optional, List, Tuple
import logging

logger = logging.getLogger(__name__)


class ProductService:
    """Service for product lookups"""

    @staticmethod
    async def get_by_id(db: AsyncSession, product_id: str) -> Optional[Product]:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_products(
        db: AsyncSession,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        in_stock: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50
    ) -> Tuple[List[Product], int]:
        """List products with optional filters and pagination"""
        query = select(Product)
        if category:
            query = query.where(Product.category == category)
        if featured is not None:
            query = query.where(Product.is_featured == featured)
        if in_stock is not None:
            query = query.where(Product.in_stock == in_stock)

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        query = query.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    def to_cart_item(
        product: ProductResponse,
        variant_key: Optional[str] = None
    ) -> Tuple[Optional[CartLineItemBase], Optional[str]]:
        """
        Snapshot a product into a cart line.
        A variant with its own image replaces the product image.
        Returns: (CartLineItemBase, error_message)
        """
        image_url = product.image_url
        if variant_key is not None:
            variant = product.find_variant(variant_key)
            if not variant:
                return None, f"Size '{variant_key}' is not available for this product"
            if variant.image:
                image_url = variant.image

        return CartLineItemBase(
            product_id=product.id,
            variant_key=variant_key,
            display_name=product.name,
            image_url=image_url,
            unit_price=product.price,
            unit_sale_price=product.sale_price,
            per_unit_shipping_charge=product.courier_charges,
            available_stock=product.stock_count if product.in_stock else 0,
        ), None


product_service = ProductService()
