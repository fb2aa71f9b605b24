"""Discount code evaluation.

Codes live in the `DISCOUNT_CODES` setting, e.g.::

    DISCOUNT_CODES = {
        "MACLA10": {"type": "percent", "value": 10, "min_subtotal": 60000, "label": "10% en tu compra"},
        "ENVIOFREE": {"type": "shipping", "min_subtotal": 90000, "label": "Envío gratis"},
        "VIP20": {"type": "percent", "value": 20, "max_cents": 60000, "min_subtotal": 150000},
    }

`percent` takes a share of the subtotal (optionally capped), `flat` takes a
fixed amount and `shipping` waives the shipping cost.
"""

from dataclasses import dataclass
from typing import Optional

from common.normalize import to_non_negative_int
from django.conf import settings


@dataclass(frozen=True)
class DiscountResult:
    valid: bool
    code: str
    discount_cents: int = 0
    shipping_discount_cents: int = 0
    label: str = ""
    kind: str = ""
    reason: str = ""

    @property
    def total_cents(self) -> int:
        return self.discount_cents + self.shipping_discount_cents


def normalize_code(code: Optional[str]) -> str:
    return str(code or "").strip().upper()


def calculate_discount(*, code: Optional[str], subtotal_cents: int, shipping_cents: int = 0) -> DiscountResult:
    """Evaluate `code` against the order amounts.

    The product discount never exceeds the subtotal and the shipping
    discount never exceeds the shipping cost.
    """

    normalized = normalize_code(code)
    rule = getattr(settings, "DISCOUNT_CODES", {}).get(normalized)
    subtotal = to_non_negative_int(subtotal_cents)
    shipping = to_non_negative_int(shipping_cents)

    if not rule:
        return DiscountResult(valid=False, code=normalized, reason="Discount code is not valid.")

    min_subtotal = to_non_negative_int(rule.get("min_subtotal"))
    if subtotal < min_subtotal:
        return DiscountResult(
            valid=False,
            code=normalized,
            reason=f"A minimum subtotal of {min_subtotal} is required for this code.",
        )

    kind = rule.get("type", "percent")
    discount = 0
    shipping_discount = 0
    if kind == "percent":
        discount = subtotal * to_non_negative_int(rule.get("value")) // 100
        if rule.get("max_cents") is not None:
            discount = min(discount, to_non_negative_int(rule.get("max_cents")))
    elif kind == "flat":
        discount = to_non_negative_int(rule.get("value"))
    elif kind == "shipping":
        shipping_discount = shipping

    discount = min(discount, subtotal)
    valid = discount > 0 or shipping_discount > 0
    return DiscountResult(
        valid=valid,
        code=normalized,
        discount_cents=discount,
        shipping_discount_cents=shipping_discount,
        label=rule.get("label") or normalized,
        kind=kind,
        reason="" if valid else "Discount code does not apply to this order.",
    )
