"""Read-only queries for catalog and checkout reference data."""

from typing import Iterable, Optional

from .models import PaymentMethod, Product, ShippingOption


def list_active_products():
    return Product.objects.filter(is_active=True).order_by("name")


def products_by_id(*, product_ids: Iterable[str]) -> dict[str, Product]:
    """Map catalog products (active or not) by id for the given ids."""

    ids = {str(pid) for pid in product_ids if pid}
    if not ids:
        return {}
    return {p.pk: p for p in Product.objects.filter(pk__in=ids)}


def list_active_shipping_options():
    return ShippingOption.objects.filter(is_active=True).order_by("sort_order", "label")


def list_active_payment_methods():
    return PaymentMethod.objects.filter(is_active=True).order_by("sort_order", "label")


def get_active_shipping_option(*, option_id: str) -> Optional[ShippingOption]:
    """Return the shipping option when it exists and is active."""

    return ShippingOption.objects.filter(pk=option_id, is_active=True).first()


def get_active_payment_method(*, method_id: str) -> Optional[PaymentMethod]:
    """Return the payment method when it exists and is active."""

    return PaymentMethod.objects.filter(pk=method_id, is_active=True).first()
