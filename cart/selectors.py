"""Selectors for read-only cart queries."""

from typing import Optional

from .models import Cart


def load_active_cart(*, user, for_update: bool = False) -> Optional[Cart]:
    """Return the user's most recently updated active cart, or None."""

    qs = Cart.objects.filter(user=user, status=Cart.STATUS_ACTIVE)
    if for_update:
        qs = qs.select_for_update()
    return qs.order_by("-updated_at", "-id").first()


def cart_items(*, cart: Cart):
    return cart.items.select_related("product").order_by("id")


def cart_items_as_payload(*, cart: Optional[Cart]) -> list[dict]:
    """Return the cart's items in the `{product, quantity}` wire shape."""

    if cart is None:
        return []
    return [{"product": item.snapshot.as_json(), "quantity": item.quantity} for item in cart_items(cart=cart)]
