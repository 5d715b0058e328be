"""Order pricing rules shared by the cart summary and checkout.

Amounts are computed in ``Decimal`` and rounded half-up to cents, then
handed back as floats for storage and JSON.
"""

from decimal import ROUND_HALF_UP, Decimal

from urbanmart import config

_CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity) -> float:
    return float(to_money(to_money(unit_price) * quantity))


def price_lines(lines) -> dict:
    """Price ``(unit_price, quantity)`` pairs.

    Returns ``{"subtotal", "tax", "shipping", "total"}``. Shipping is free
    once the subtotal is strictly above the threshold.
    """
    subtotal = to_money(sum((to_money(price) * quantity for price, quantity in lines), Decimal("0")))
    tax = to_money(subtotal * config.TAX_RATE)
    shipping = Decimal("0.00") if subtotal > config.FREE_SHIPPING_THRESHOLD else to_money(config.FLAT_SHIPPING_FEE)
    total = to_money(subtotal + tax + shipping)

    return {
        "subtotal": float(subtotal),
        "tax": float(tax),
        "shipping": float(shipping),
        "total": float(total),
    }


def totals_match(subtotal, tax, shipping, total) -> bool:
    return to_money(to_money(subtotal) + to_money(tax) + to_money(shipping)) == to_money(total)
