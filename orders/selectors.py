"""Selectors for read-only order queries."""

from typing import Optional

from django.conf import settings
from django.db.models import Prefetch

from .models import Order, OrderItem, OrderStatusHistory


def clamp_order_limit(raw) -> int:
    """Parse a `limit` query value; invalid input yields the default."""

    default = getattr(settings, "ORDERS_LIST_DEFAULT_LIMIT", 20)
    maximum = getattr(settings, "ORDERS_LIST_MAX_LIMIT", 100)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(1, min(value, maximum))


def _orders_queryset():
    return Order.objects.select_related("shipping_option", "payment_method").prefetch_related(
        Prefetch("items", queryset=OrderItem.objects.order_by("id"))
    )


def list_orders_for_user(*, user, limit=None) -> list[Order]:
    """Return the user's orders, newest submission first."""

    qs = _orders_queryset().filter(user=user).order_by("-submitted_at", "-id")
    return list(qs[: clamp_order_limit(limit)])


def get_order_for_user(*, user, code: str) -> Optional[Order]:
    return (
        _orders_queryset()
        .prefetch_related(Prefetch("status_history", queryset=OrderStatusHistory.objects.order_by("created_at", "id")))
        .filter(user=user, code=code)
        .first()
    )


def get_order_by_code(*, code: str) -> Optional[Order]:
    return Order.objects.filter(code=code).first()
