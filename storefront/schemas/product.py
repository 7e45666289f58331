"""Product schemas"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional, List


class Variant(BaseModel):
    """Named size/variant, optionally with its own image"""
    name: str
    image: Optional[str] = None


def normalize_variant(raw: Any) -> Optional[Variant]:
    """Accept both stored shapes: a bare string or a {name, image} mapping"""
    if isinstance(raw, Variant):
        return raw
    if isinstance(raw, str):
        name = raw.strip()
        return Variant(name=name) if name else None
    if isinstance(raw, dict):
        name = str(raw.get("name") or "").strip()
        if not name:
            return None
        image = raw.get("image") or None
        return Variant(name=name, image=image)
    return None


class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: int
    sale_price: Optional[int] = None
    stock_count: int = 0
    in_stock: bool = True
    images: List[str] = []
    courier_charges: Optional[int] = None
    sizes: List[Variant] = []
    is_featured: bool = False

    model_config = {"from_attributes": True}

    @field_validator("images", mode="before")
    @classmethod
    def _images_list(cls, value):
        return value or []

    @field_validator("sizes", mode="before")
    @classmethod
    def _normalize_sizes(cls, value):
        variants = [normalize_variant(raw) for raw in (value or [])]
        return [v for v in variants if v is not None]

    @property
    def image_url(self) -> str:
        return self.images[0] if self.images else ""

    def find_variant(self, name: str) -> Optional[Variant]:
        for variant in self.sizes:
            if variant.name == name:
                return variant
        return None


class ProductList(BaseModel):
    products: List[ProductResponse]
    total: int


class StockReduction(BaseModel):
    quantity: int = Field(ge=1)


class StockReductionResponse(BaseModel):
    product_id: str
    stock_count: int
    in_stock: bool
