"""Product API endpoints"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.database import get_db
from storefront.api.deps import require_admin
from storefront.services.product_service import product_service
from storefront.services.stock_service import stock_service
from storefront.schemas.product import (
    ProductList,
    ProductResponse,
    StockReduction,
    StockReductionResponse,
)
from typing import Optional
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ProductList)
async def list_products(
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    in_stock: Optional[bool] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db)
):
    products, total = await product_service.list_products(db, category, featured, in_stock, skip, limit)
    return ProductList(
        products=[ProductResponse.model_validate(p) for p in products],
        total=total,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    product = await product_service.get_by_id(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse.model_validate(product)


@router.post("/{product_id}/reduce-stock", response_model=StockReductionResponse)
async def reduce_stock(
    product_id: str,
    data: StockReduction,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Apply a confirmed sale to the product's stock (admin)"""
    new_stock = await stock_service.reduce_stock(db, product_id, data.quantity)
    return StockReductionResponse(product_id=product_id, stock_count=new_stock, in_stock=new_stock > 0)
