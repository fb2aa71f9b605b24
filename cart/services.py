"""Cart services: full-replace writes and guest cart merging."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from catalog.selectors import products_by_id
from catalog.snapshots import ProductSnapshot, build_snapshot, default_currency, snapshot_from_product
from common.normalize import parse_opaque_json, to_non_negative_int
from django.db import transaction
from django.utils import timezone

from .models import Cart, CartItem
from .reconciliation import merge_carts
from .selectors import cart_items_as_payload, load_active_cart


class CartError(Exception):
    """Raised for cart mutation failures."""


class CartConflictError(CartError):
    """Raised when a write is based on a stale cart version."""


logger = logging.getLogger("storefront.cart")


@dataclass
class CartLine:
    """Normalized line ready to be stored on a cart or an order."""

    snapshot: ProductSnapshot
    quantity: int
    unit_price_cents: int
    product: Any = None

    @property
    def line_total_cents(self) -> int:
        return self.quantity * self.unit_price_cents


def normalize_cart_lines(items: Iterable[Mapping[str, Any]]) -> list[CartLine]:
    """Turn untrusted `{product, quantity}` entries into priced lines.

    Entries whose quantity normalizes to zero are dropped and repeated
    product ids are folded into one line. When the product exists in the
    catalog its current price and details win over the client snapshot.
    """

    entries = []
    for entry in items or []:
        if not isinstance(entry, Mapping):
            continue
        quantity = to_non_negative_int(entry.get("quantity"))
        if quantity <= 0:
            continue
        raw = parse_opaque_json(entry.get("product")) or {}
        snapshot = build_snapshot(raw, id=entry.get("productId"), unit_price=entry.get("unitPrice"))
        entries.append((snapshot, quantity))

    catalog = products_by_id(product_ids=[snapshot.id for snapshot, _ in entries])
    lines: dict[str, CartLine] = {}
    for snapshot, quantity in entries:
        product = catalog.get(snapshot.id)
        if product is not None:
            snapshot = snapshot_from_product(product)
            unit_price = product.price_cents
        else:
            unit_price = snapshot.price
        existing = lines.get(snapshot.id)
        if existing is not None:
            existing.quantity += quantity
            continue
        lines[snapshot.id] = CartLine(snapshot=snapshot, quantity=quantity, unit_price_cents=unit_price, product=product)
    return list(lines.values())


def lines_from_cart(cart: Cart) -> list[CartLine]:
    """Lines stored on `cart`, using the unit prices captured at write time."""

    return [
        CartLine(
            snapshot=item.snapshot,
            quantity=item.quantity,
            unit_price_cents=item.unit_price_cents,
            product=item.product,
        )
        for item in cart.items.select_related("product").order_by("id")
    ]


@transaction.atomic
def replace_cart_items(*, user, items, expected_version: Optional[int] = None) -> Cart:
    """Replace the contents of the user's active cart.

    Locates (or lazily creates) the active cart, deletes every existing
    line, inserts the normalized input lines, recomputes the cached totals
    and abandons any other active cart of the user. Repeating the call with
    the same input leaves the same items and totals.

    Raises CartConflictError when `expected_version` is given and does not
    match the stored cart version.
    """

    lines = normalize_cart_lines(items)
    cart = load_active_cart(user=user, for_update=True)
    if cart is None:
        cart = Cart.objects.create(user=user)
        logger.info(
            "cart.created",
            extra={"event": "cart.created", "cart_id": cart.id, "user_id": getattr(user, "id", None)},
        )

    if expected_version is not None and int(expected_version) != cart.version:
        raise CartConflictError("Cart was modified by another request.")

    CartItem.objects.filter(cart=cart).delete()
    CartItem.objects.bulk_create(
        [
            CartItem(
                cart=cart,
                product=line.product,
                product_snapshot=line.snapshot.as_json(),
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
                line_total_cents=line.line_total_cents,
            )
            for line in lines
        ]
    )

    if not cart.currency:
        cart.currency = lines[0].snapshot.currency if lines else default_currency()
    cart.total_items = sum(line.quantity for line in lines)
    cart.total_cents = sum(line.line_total_cents for line in lines)
    cart.version += 1
    cart.last_activity_at = timezone.now()
    cart.save(
        update_fields=["currency", "total_items", "total_cents", "version", "last_activity_at", "updated_at"]
    )

    abandoned = (
        Cart.objects.filter(user=user, status=Cart.STATUS_ACTIVE)
        .exclude(pk=cart.pk)
        .update(status=Cart.STATUS_ABANDONED, updated_at=timezone.now())
    )
    logger.info(
        "cart.replaced",
        extra={
            "event": "cart.replaced",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "items": len(lines),
            "total_items": cart.total_items,
            "total_cents": cart.total_cents,
            "version": cart.version,
            "abandoned_carts": abandoned,
        },
    )
    return cart


def touch_cart(*, cart: Cart) -> None:
    """Record read activity on the cart without bumping `updated_at`."""

    now = timezone.now()
    Cart.objects.filter(pk=cart.pk).update(last_activity_at=now)
    cart.last_activity_at = now


@transaction.atomic
def merge_guest_items(*, user, guest_items) -> Optional[Cart]:
    """Merge a guest (client-local) cart into the user's server cart.

    Quantities of shared products are summed and every line is clamped to
    the live catalog stock. Nothing is written when the guest list is empty.
    """

    cart = load_active_cart(user=user, for_update=True)
    guest = [
        entry
        for entry in guest_items or []
        if isinstance(entry, Mapping) and to_non_negative_int(entry.get("quantity")) > 0
    ]
    if not guest:
        return cart

    server = cart_items_as_payload(cart=cart)
    catalog = products_by_id(
        product_ids=[(parse_opaque_json(e.get("product")) or {}).get("id") for e in server + guest]
    )

    def stock_of(product_id: str) -> Optional[int]:
        product = catalog.get(product_id)
        return product.stock if product is not None else None

    merged = merge_carts(server, guest, stock_of=stock_of)
    cart = replace_cart_items(user=user, items=merged)
    logger.info(
        "cart.merged",
        extra={
            "event": "cart.merged",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "guest_items": len(guest),
            "merged_items": len(merged),
        },
    )
    return cart
