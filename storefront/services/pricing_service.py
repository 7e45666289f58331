"""Cart pricing: subtotal, shipping and grand total"""
from typing import Iterable, List
from storefront.schemas.cart import CartLineItem
from storefront.schemas.pricing import ShippingConfig, ShippingLineItem, PriceBreakdown


class PricingService:
    """
    Stateless price computation shared by the cart view, checkout and invoices.

    Inputs are trusted: negative prices or quantities are rejected by the
    request schemas before they reach a cart, not here.
    """

    @staticmethod
    def compute_subtotal(cart: Iterable[CartLineItem]) -> int:
        return sum(item.effective_price * item.quantity for item in cart)

    @staticmethod
    def compute_breakdown(cart: List[CartLineItem], config: ShippingConfig) -> PriceBreakdown:
        """
        Compute the price breakdown for a cart.

        Shipping is free when the subtotal reaches the threshold (inclusive).
        Below it every line pays its per-unit charge (or the store default)
        times its quantity, and gets one entry in shipping_line_items.
        """
        subtotal = PricingService.compute_subtotal(cart)

        shipping_total = 0
        shipping_lines: List[ShippingLineItem] = []

        if subtotal < config.free_shipping_threshold:
            for item in cart:
                per_unit = item.per_unit_shipping_charge
                if per_unit is None:
                    per_unit = config.default_charge
                charge = per_unit * item.quantity
                shipping_total += charge
                shipping_lines.append(ShippingLineItem(item_name=item.display_name, charge=charge))

        if shipping_total == 0:
            shipping_lines = []

        return PriceBreakdown(
            subtotal=subtotal,
            shipping_total=shipping_total,
            shipping_line_items=shipping_lines,
            grand_total=subtotal + shipping_total,
        )

    @staticmethod
    def count_items(cart: Iterable[CartLineItem]) -> int:
        """Total number of units in the cart"""
        return sum(item.quantity for item in cart)


pricing_service = PricingService()
