"""Store settings API endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.database import get_db
from storefront.api.deps import require_admin
from storefront.services.settings_service import settings_service
from storefront.schemas.settings import StoreSettings, StoreSettingsUpdate

router = APIRouter()


@router.get("/store", response_model=StoreSettings)
async def get_store_settings(db: AsyncSession = Depends(get_db)):
    return await settings_service.get_store_settings(db)


@router.put("/store", response_model=StoreSettings)
async def update_store_settings(
    data: StoreSettingsUpdate,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await settings_service.update_store_settings(db, data)
