"""
Tests for product reads and cart snapshots
"""
from storefront.schemas.product import ProductResponse, Variant, normalize_variant
from storefront.services.product_service import product_service


class TestNormalizeVariant:

    def test_string(self):
        assert normalize_variant(" M ") == Variant(name="M")

    def test_mapping_with_image(self):
        assert normalize_variant({"name": "L", "image": "x.jpg"}) == Variant(name="L", image="x.jpg")

    def test_blank_entries_dropped(self):
        assert normalize_variant("") is None
        assert normalize_variant({"image": "x.jpg"}) is None
        assert normalize_variant(42) is None

    def test_mixed_sizes_on_product(self):
        product = ProductResponse(id="p", name="P", price=10, sizes=["S", {"name": "M"}, ""])

        assert [v.name for v in product.sizes] == ["S", "M"]


class TestToCartItem:

    async def _product(self, db, product_id):
        return ProductResponse.model_validate(await product_service.get_by_id(db, product_id))

    async def test_plain_product(self, db):
        item, error = product_service.to_cart_item(await self._product(db, "bangle"))

        assert error is None
        assert item.key == ("bangle", None)
        assert item.display_name == "Glass Bangle"
        assert item.image_url == "https://img.example/bangle.jpg"
        assert item.per_unit_shipping_charge == 50
        assert item.available_stock == 5

    async def test_variant_image_overrides(self, db):
        item, _ = product_service.to_cart_item(await self._product(db, "anklet"), "M")

        assert item.key == ("anklet", "M")
        assert item.image_url == "https://img.example/anklet-m.jpg"
        assert item.unit_sale_price == 250
        assert item.effective_price == 250

    async def test_variant_without_image_keeps_product_image(self, db):
        item, _ = product_service.to_cart_item(await self._product(db, "anklet"), "S")

        assert item.image_url == "https://img.example/anklet.jpg"

    async def test_unknown_variant(self, db):
        item, error = product_service.to_cart_item(await self._product(db, "anklet"), "XL")

        assert item is None
        assert error == "Size 'XL' is not available for this product"

    async def test_out_of_stock_product_has_no_stock(self, db):
        item, _ = product_service.to_cart_item(await self._product(db, "sold-out"))

        assert item.available_stock == 0


class TestListProducts:

    async def test_filters(self, db):
        _, total = await product_service.list_products(db)
        available, available_total = await product_service.list_products(db, in_stock=True)

        assert total == 5
        assert available_total == 4
        assert "sold-out" not in {p.id for p in available}
