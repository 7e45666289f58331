from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from storefront.models.settings import StoreSetting
from storefront.schemas.settings import StoreSettings, StoreSettingsUpdate
from storefront.config import settings as config
from typing import Optional
import logging

logger = logging.getLogger(__name__)

INT_SETTINGS = ("courier_charges", "free_shipping_threshold")


class SettingsService:
    """Store settings service"""

    @staticmethod
    def _defaults() -> dict:
        return {
            "store_name": (config.DEFAULT_STORE_NAME, "Store name shown on invoices"),
            "description": (config.DEFAULT_STORE_DESCRIPTION, "Store description"),
            "whatsapp_number": (config.DEFAULT_WHATSAPP_NUMBER, "WhatsApp number receiving orders"),
            "logo_url": (config.DEFAULT_LOGO_URL, "Store logo URL"),
            "courier_charges": (str(config.DEFAULT_COURIER_CHARGES), "Default courier charge per unit"),
            "free_shipping_threshold": (
                str(config.DEFAULT_FREE_SHIPPING_THRESHOLD), "Subtotal at which shipping becomes free"
            ),
            "gst_message": (config.DEFAULT_GST_MESSAGE, "Tax disclaimer shown with totals"),
        }

    @staticmethod
    async def get_setting(db: AsyncSession, key: str) -> Optional[str]:
        """Get setting value by key"""
        result = await db.execute(select(StoreSetting).where(StoreSetting.key == key))
        setting = result.scalar_one_or_none()
        return setting.value if setting else None

    @staticmethod
    async def set_setting(db: AsyncSession, key: str, value: str, description: Optional[str] = None):
        """Set or update setting"""
        result = await db.execute(select(StoreSetting).where(StoreSetting.key == key))
        setting = result.scalar_one_or_none()

        if setting:
            setting.value = value
            if description:
                setting.description = description
        else:
            setting = StoreSetting(key=key, value=value, description=description)
            db.add(setting)

        await db.commit()
        logger.info(f"Setting updated: {key} = {value}")

    @staticmethod
    async def get_all_settings(db: AsyncSession) -> dict:
        """Get all settings as dict"""
        result = await db.execute(select(StoreSetting))
        settings_list = result.scalars().all()
        return {s.key: s.value for s in settings_list}

    @staticmethod
    async def get_store_settings(db: AsyncSession) -> StoreSettings:
        """Store settings with configured defaults for anything missing or malformed"""
        stored = await SettingsService.get_all_settings(db)
        values = {}
        for key, (default, _) in SettingsService._defaults().items():
            value = stored.get(key)
            if key in INT_SETTINGS:
                try:
                    values[key] = int(value) if value not in (None, "") else int(default)
                except ValueError:
                    logger.warning(f"Invalid integer setting {key}={value!r}, using default")
                    values[key] = int(default)
            else:
                values[key] = value or default
        return StoreSettings(**values)

    @staticmethod
    async def update_store_settings(db: AsyncSession, data: StoreSettingsUpdate) -> StoreSettings:
        """Persist the provided fields and return the resulting settings"""
        for key, value in data.model_dump(exclude_none=True).items():
            await SettingsService.set_setting(db, key, str(value))
        return await SettingsService.get_store_settings(db)

    @staticmethod
    async def initialize_default_settings(db: AsyncSession):
        """Initialize default store settings"""
        for key, (value, description) in SettingsService._defaults().items():
            existing = await SettingsService.get_setting(db, key)
            if existing is None:
                await SettingsService.set_setting(db, key, value, description)

        logger.info("Default settings initialized")


settings_service = SettingsService()
