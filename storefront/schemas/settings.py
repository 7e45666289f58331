"""Store settings schemas"""
from pydantic import BaseModel, Field
from typing import Optional
from storefront.schemas.pricing import ShippingConfig


class StoreSettings(BaseModel):
    store_name: str
    description: str = ""
    whatsapp_number: str = ""
    logo_url: str = ""
    courier_charges: int
    free_shipping_threshold: int
    gst_message: str

    @property
    def shipping_config(self) -> ShippingConfig:
        return ShippingConfig(
            default_charge=self.courier_charges,
            free_shipping_threshold=self.free_shipping_threshold,
            tax_disclaimer_text=self.gst_message,
        )


class StoreSettingsUpdate(BaseModel):
    store_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    whatsapp_number: Optional[str] = Field(default=None, max_length=30)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    courier_charges: Optional[int] = Field(default=None, ge=0)
    free_shipping_threshold: Optional[int] = Field(default=None, ge=0)
    gst_message: Optional[str] = Field(default=None, max_length=200)
