"""Order services: checkout assembly and status transitions."""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from cart.models import Cart
from cart.selectors import load_active_cart
from cart.services import CartLine, lines_from_cart, normalize_cart_lines
from catalog.selectors import get_active_payment_method, get_active_shipping_option
from catalog.snapshots import default_currency
from common.normalize import is_negative_number, parse_opaque_json
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from .discounts import calculate_discount
from .emails import send_order_created_email, send_order_status_email
from .models import Order, OrderItem, OrderStatusHistory

logger = logging.getLogger("storefront.orders")

SYSTEM_ACTOR = "system"

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {Order.STATUS_PAID, Order.STATUS_CANCELLED},
    Order.STATUS_PAID: {Order.STATUS_SHIPPED, Order.STATUS_CANCELLED},
    Order.STATUS_SHIPPED: set(),
    Order.STATUS_CANCELLED: set(),
}


class OrderError(Exception):
    """Base class for order failures."""


class OrderValidationError(OrderError):
    """Raised when checkout input is missing or malformed."""


class EmptyCartError(OrderValidationError):
    """Raised when there is nothing billable to order."""


class OrderCodeError(OrderError):
    """Raised when no unique order code could be generated."""


class OrderTransitionError(OrderError):
    """Raised for a status change the order lifecycle does not allow."""


@dataclass(frozen=True)
class CustomerDetails:
    name: str
    email: str
    phone: str
    city: str
    address: str
    notes: str = ""


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())


def validate_customer(data: Optional[Mapping[str, Any]]) -> CustomerDetails:
    """Validate checkout contact fields; all but `notes` are required."""

    data = data or {}
    email = _clean(data.get("email")).lower()
    if not email or "@" not in email:
        raise OrderValidationError("A valid email is required.")
    details = CustomerDetails(
        name=_clean(data.get("name")),
        email=email,
        phone=_clean(data.get("phone")),
        city=_clean(data.get("city")),
        address=_clean(data.get("address")),
        notes=str(data.get("notes") or "").strip(),
    )
    for field_name in ("name", "phone", "city", "address"):
        if not getattr(details, field_name):
            raise OrderValidationError(f"Customer {field_name} is required.")
    return details


def generate_order_code() -> str:
    """Return `<prefix>-<8 hex chars>`, e.g. `MAC-3FA94C1B`."""

    prefix = getattr(settings, "ORDER_CODE_PREFIX", "MAC")
    return f"{prefix}-{secrets.token_hex(4).upper()}"


def _client_lines(items: Optional[Iterable[Mapping[str, Any]]]) -> list[CartLine]:
    entries = [entry for entry in items or [] if isinstance(entry, Mapping)]
    for entry in entries:
        product = parse_opaque_json(entry.get("product")) or {}
        if is_negative_number(entry.get("unitPrice")) or is_negative_number(product.get("price")):
            raise OrderValidationError("Item prices cannot be negative.")
    return normalize_cart_lines(entries)


def _create_with_unique_code(**fields) -> Order:
    """Insert the order, regenerating the code on a uniqueness collision."""

    attempts = getattr(settings, "ORDER_CODE_MAX_ATTEMPTS", 5)
    for attempt in range(1, attempts + 1):
        code = generate_order_code()
        try:
            with transaction.atomic():
                return Order.objects.create(code=code, **fields)
        except IntegrityError:
            if not Order.objects.filter(code=code).exists():
                raise
            logger.warning(
                "order.code_collision",
                extra={"event": "order.code_collision", "code": code, "attempt": attempt},
            )
    raise OrderCodeError("Could not generate the order, please retry.")


@transaction.atomic
def assemble_order(
    *,
    user,
    customer: Optional[Mapping[str, Any]],
    shipping_option_id: Optional[str] = None,
    payment_method_id: Optional[str] = None,
    discount_code: Optional[str] = None,
    billing_address: Optional[Mapping[str, Any]] = None,
    items: Optional[Iterable[Mapping[str, Any]]] = None,
    origin: str = "checkout-web",
) -> Order:
    """Freeze the user's cart (or the given items) into a pending order.

    Steps run in a single transaction: validate the customer, resolve and
    price the lines, re-validate shipping and payment references, apply the
    discount, insert the order with a unique code, its items and the first
    history row, then mark the source cart submitted. Any failure rolls all
    of it back.

    `items` is only used when the active cart has no lines.
    """

    details = validate_customer(customer)

    cart = load_active_cart(user=user, for_update=True) if user is not None else None
    lines = lines_from_cart(cart) if cart is not None else []
    source_cart: Optional[Cart] = cart if lines else None
    if not lines:
        lines = _client_lines(items)
    subtotal = sum(line.line_total_cents for line in lines)
    if not lines or subtotal <= 0:
        raise EmptyCartError("Your cart is empty.")

    shipping_option = None
    shipping_cost = 0
    if shipping_option_id:
        shipping_option = get_active_shipping_option(option_id=shipping_option_id)
        if shipping_option is None:
            raise OrderValidationError("The selected shipping option is not available.")
        shipping_cost = shipping_option.price_cents

    payment_method = None
    if payment_method_id:
        payment_method = get_active_payment_method(method_id=payment_method_id)
        if payment_method is None:
            raise OrderValidationError("The selected payment method is not available.")

    discount = None
    if discount_code:
        discount = calculate_discount(code=discount_code, subtotal_cents=subtotal, shipping_cents=shipping_cost)
        if not discount.valid:
            raise OrderValidationError(discount.reason)
    discount_cents = discount.total_cents if discount else 0
    total = subtotal + shipping_cost - discount_cents

    currency = (source_cart.currency if source_cart else "") or lines[0].snapshot.currency or default_currency()
    now = timezone.now()
    shipping_address = {
        "name": details.name,
        "phone": details.phone,
        "city": details.city,
        "address": details.address,
        "notes": details.notes,
    }
    order = _create_with_unique_code(
        user=user,
        cart=source_cart,
        customer_name=details.name,
        customer_email=details.email,
        customer_phone=details.phone,
        customer_city=details.city,
        customer_address=details.address,
        notes=details.notes,
        shipping_option=shipping_option,
        payment_method=payment_method,
        subtotal_cents=subtotal,
        shipping_cost_cents=shipping_cost,
        discount_cents=discount_cents,
        discount_code=discount.code if discount else "",
        total_cents=total,
        currency=currency,
        submitted_at=now,
        billing_address=dict(billing_address) if billing_address else shipping_address,
        shipping_address=shipping_address,
        metadata={
            "origin": origin,
            "submittedAt": now.isoformat(),
            "shippingOptionLabel": shipping_option.label if shipping_option else None,
            "paymentMethodLabel": payment_method.label if payment_method else None,
            "discount": {
                "code": discount.code,
                "label": discount.label,
                "products": discount.discount_cents,
                "shipping": discount.shipping_discount_cents,
            }
            if discount
            else None,
            "itemsCount": sum(line.quantity for line in lines),
        },
    )

    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                product_id=line.snapshot.id,
                product_name=line.snapshot.name,
                product_sku=line.snapshot.sku or line.snapshot.id,
                unit_price_cents=line.unit_price_cents,
                quantity=line.quantity,
                line_total_cents=line.line_total_cents,
                product_snapshot=line.snapshot.as_json(),
            )
            for line in lines
        ]
    )
    OrderStatusHistory.objects.create(
        order=order,
        from_status=None,
        to_status=Order.STATUS_PENDING,
        changed_by=SYSTEM_ACTOR,
        note="Order created from web checkout.",
        created_at=now,
    )

    if source_cart is not None:
        source_cart.status = Cart.STATUS_SUBMITTED
        source_cart.submitted_at = now
        source_cart.save(update_fields=["status", "submitted_at", "updated_at"])

    logger.info(
        "order.created",
        extra={
            "event": "order.created",
            "order_id": order.id,
            "code": order.code,
            "user_id": getattr(user, "id", None),
            "cart_id": source_cart.id if source_cart else None,
            "items": len(lines),
            "subtotal_cents": subtotal,
            "shipping_cost_cents": shipping_cost,
            "discount_cents": discount_cents,
            "total_cents": total,
        },
    )
    transaction.on_commit(lambda: send_order_created_email(order))
    return order


@transaction.atomic
def transition_order_status(*, order: Order, to_status: str, changed_by: str, note: str = "") -> Order:
    """Move `order` to `to_status`, appending one history row.

    Re-applying the current status is a no-op. Transitions outside
    `ALLOWED_TRANSITIONS` raise OrderTransitionError.
    """

    locked = Order.objects.select_for_update().get(pk=order.pk)
    if locked.status == to_status:
        return locked
    if to_status not in ALLOWED_TRANSITIONS.get(locked.status, set()):
        raise OrderTransitionError(f"Cannot change order status from {locked.status} to {to_status}.")

    previous = locked.status
    locked.status = to_status
    locked.save(update_fields=["status", "updated_at"])
    OrderStatusHistory.objects.create(
        order=locked,
        from_status=previous,
        to_status=to_status,
        changed_by=changed_by[:64],
        note=note,
    )
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": locked.id,
            "code": locked.code,
            "user_id": locked.user_id,
            "status_from": previous,
            "status_to": to_status,
            "changed_by": changed_by,
        },
    )
    transaction.on_commit(lambda: send_order_status_email(locked))
    return locked


def pay_order(*, order: Order, changed_by: str, reference: str = "") -> Order:
    """Mark an order as paid; paying an already paid order is a no-op."""

    note = f"Payment approved ({reference})." if reference else "Payment approved."
    return transition_order_status(order=order, to_status=Order.STATUS_PAID, changed_by=changed_by, note=note)


def cancel_order(*, order: Order, changed_by: str, note: str = "") -> Order:
    """Cancel a pending or paid order."""

    return transition_order_status(
        order=order, to_status=Order.STATUS_CANCELLED, changed_by=changed_by, note=note or "Order cancelled."
    )
