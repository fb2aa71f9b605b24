"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("storefront.orders")


def _order_url(order) -> str:
    frontend = getattr(settings, "FRONTEND_URL", "")
    if not frontend:
        return ""
    return f"{frontend.rstrip('/')}/pedidos/{order.code}"


def _format_amount(cents: int, currency: str) -> str:
    return f"{cents:,} {currency}".replace(",", ".")


def _send(order, subject: str, body: str, kind: str) -> None:
    to_email = order.customer_email or getattr(order.user, "email", None)
    if not to_email:
        return
    sent = send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [to_email],
        fail_silently=True,
    )
    logger.info(
        "order.email",
        extra={"event": "order.email", "kind": kind, "order_id": order.id, "code": order.code, "sent": sent},
    )


def send_order_created_email(order) -> None:
    """Send the order receipt right after checkout.

    Silently no-ops if no email is present.
    """
    lines = "\n".join(
        f"- {item.product_name} x{item.quantity}: {_format_amount(item.line_total_cents, order.currency)}"
        for item in order.items.all()
    )
    url = _order_url(order)
    body = (
        f"Hola {order.customer_name},\n\n"
        "We received your order.\n\n"
        f"Order: {order.code}\n"
        f"{lines}\n\n"
        f"Total: {_format_amount(order.total_cents, order.currency)}\n"
    )
    if url:
        body += f"\nYou can follow your order here: {url}\n"
    _send(order, f"We received your order {order.code}", body, "created")


def send_order_status_email(order) -> None:
    """Notify the customer of a status change (paid, shipped, cancelled)."""
    url = _order_url(order)
    body = (
        f"Hola {order.customer_name},\n\n"
        f"Order: {order.code}\n"
        f"Status: {order.status}\n"
    )
    if url:
        body += f"\nYou can view your order here: {url}\n"
    _send(order, f"Your order {order.code} is now {order.status}", body, order.status)
