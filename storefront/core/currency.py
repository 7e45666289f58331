"""Currency formatting for rupee amounts"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CURRENCY_SYMBOL = "₹"


def _group_indian(digits: str) -> str:
    """Group a digit string the en-IN way: last three digits, then pairs."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Union[int, float, Decimal]) -> str:
    """
    Format an amount as a whole-rupee string, e.g. 150000 -> "₹1,50,000".
    Fractions are rounded half away from zero.
    """
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    return f"{CURRENCY_SYMBOL}{sign}{_group_indian(str(abs(rounded)))}"
