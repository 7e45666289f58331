from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App
    APP_NAME: str = "Amilei Storefront"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # Database - REQUIRED from environment
    DATABASE_URL: str = Field(
        ...,  # No default - must be provided via environment variable
        description="Database connection URL (REQUIRED)"
    )

    # Admin panel access (sent as X-Admin-Key header)
    ADMIN_API_KEY: str = Field(default="", description="Shared key for admin endpoints")

    # Cart storage
    CART_KEY: str = "amilei_cart"
    CART_TTL_SECONDS: int = 30 * 24 * 3600  # 30 days

    # Orders
    ORDER_EXPIRY_DAYS: int = 30

    # Store settings defaults (used when settings are missing in the database)
    DEFAULT_STORE_NAME: str = "Amilei"
    DEFAULT_STORE_DESCRIPTION: str = ""
    DEFAULT_WHATSAPP_NUMBER: str = ""
    DEFAULT_LOGO_URL: str = ""
    DEFAULT_COURIER_CHARGES: int = 100
    DEFAULT_FREE_SHIPPING_THRESHOLD: int = 2000
    DEFAULT_GST_MESSAGE: str = "GST not included"

    # CORS
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])

    # Frontend (used to build order links in the WhatsApp message)
    FRONTEND_URL: str = "http://localhost:5173"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: str = "60/minute"
    CHECKOUT_RATE_LIMIT: str = "10/minute"

    # Redis (cart storage)
    REDIS_URL: str = Field(
        default="redis://redis:6379/0",
        description="Redis connection URL"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _assemble_cors_origins(cls, value):
        """Ensure CORS origins env value always becomes a list of strings."""
        if isinstance(value, str):
            # Support JSON-style lists or simple comma-separated strings
            value = value.strip()
            if value.startswith("[") and value.endswith("]"):
                import json
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, (list, tuple)):
            return list(value)
        return value


settings = Settings()
