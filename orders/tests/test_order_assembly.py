from unittest import mock

import pytest
from cart.models import Cart
from cart.services import replace_cart_items
from cart.tests.factories import UserFactory
from catalog.tests.factories import PaymentMethodFactory, ProductFactory, ShippingOptionFactory
from django.db import DatabaseError, IntegrityError
from orders.models import Order, OrderItem, OrderStatusHistory
from orders.services import (
    EmptyCartError,
    OrderCodeError,
    OrderValidationError,
    assemble_order,
    generate_order_code,
    validate_customer,
)
from orders.tests.factories import OrderFactory

CUSTOMER = {
    "name": "Ana Gómez",
    "email": "Ana@Example.com",
    "phone": "3001234567",
    "city": "Medellín",
    "address": "Calle 10 # 43-12",
}


def _fill_cart(user, *pairs):
    return replace_cart_items(user=user, items=[{"product": {"id": p.id}, "quantity": q} for p, q in pairs])


@pytest.mark.django_db
def test_assemble_order_from_active_cart():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    p2 = ProductFactory(price_cents=30000)
    shipping = ShippingOptionFactory(price_cents=15000)
    payment = PaymentMethodFactory()
    cart = _fill_cart(user, (p1, 2), (p2, 1))

    order = assemble_order(
        user=user, customer=CUSTOMER, shipping_option_id=shipping.id, payment_method_id=payment.id
    )

    assert order.status == Order.STATUS_PENDING
    assert order.code.startswith("MAC-")
    assert order.subtotal_cents == 230000
    assert order.shipping_cost_cents == 15000
    assert order.discount_cents == 0
    assert order.total_cents == order.subtotal_cents + order.shipping_cost_cents - order.discount_cents
    assert order.customer_email == "ana@example.com"
    assert order.cart_id == cart.id
    assert order.metadata["origin"] == "checkout-web"
    assert order.metadata["shippingOptionLabel"] == shipping.label
    assert order.metadata["itemsCount"] == 3
    assert [(i.product_id, i.quantity, i.line_total_cents) for i in order.items.all()] == [
        (p1.id, 2, 200000),
        (p2.id, 1, 30000),
    ]
    history = list(order.status_history.all())
    assert [(h.from_status, h.to_status, h.changed_by) for h in history] == [(None, "pending", "system")]

    cart.refresh_from_db()
    assert cart.status == Cart.STATUS_SUBMITTED
    assert cart.submitted_at is not None


@pytest.mark.django_db
def test_order_keeps_cart_prices_even_if_catalog_changes():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    _fill_cart(user, (p1, 1))
    p1.price_cents = 999999
    p1.save()

    order = assemble_order(user=user, customer=CUSTOMER)

    assert order.items.get().unit_price_cents == 100000
    assert order.total_cents == 100000


@pytest.mark.django_db
def test_client_items_are_used_when_no_active_cart():
    user = UserFactory()
    p1 = ProductFactory(price_cents=50000)

    order = assemble_order(
        user=user,
        customer=CUSTOMER,
        items=[{"product": {"id": p1.id, "price": 1}, "quantity": 2}, {"product": {"id": p1.id}, "quantity": 0}],
    )

    assert order.cart_id is None
    assert order.subtotal_cents == 100000
    assert order.items.count() == 1


@pytest.mark.django_db
def test_empty_cart_is_rejected_without_writes():
    user = UserFactory()

    with pytest.raises(EmptyCartError):
        assemble_order(user=user, customer=CUSTOMER, items=[])

    assert Order.objects.count() == 0
    assert OrderItem.objects.count() == 0
    assert OrderStatusHistory.objects.count() == 0


@pytest.mark.django_db
def test_zero_priced_items_count_as_empty():
    user = UserFactory()

    with pytest.raises(EmptyCartError):
        assemble_order(user=user, customer=CUSTOMER, items=[{"product": {"id": "free", "price": 0}, "quantity": 1}])


@pytest.mark.django_db
def test_negative_client_prices_are_rejected():
    user = UserFactory()

    with pytest.raises(OrderValidationError, match="negative"):
        assemble_order(user=user, customer=CUSTOMER, items=[{"product": {"id": "x", "price": -5}, "quantity": 1}])


@pytest.mark.django_db
@pytest.mark.parametrize("field", ["name", "email", "phone", "city", "address"])
def test_missing_customer_field_fails_before_any_write(field):
    user = UserFactory()
    p1 = ProductFactory()
    cart = _fill_cart(user, (p1, 1))

    with pytest.raises(OrderValidationError):
        assemble_order(user=user, customer={**CUSTOMER, field: "  "})

    assert Order.objects.count() == 0
    cart.refresh_from_db()
    assert cart.status == Cart.STATUS_ACTIVE


def test_validate_customer_requires_at_sign_and_allows_missing_notes():
    with pytest.raises(OrderValidationError):
        validate_customer({**CUSTOMER, "email": "ana.example.com"})

    details = validate_customer({**CUSTOMER, "name": "  Ana   Gómez "})
    assert details.name == "Ana Gómez"
    assert details.notes == ""


@pytest.mark.django_db
def test_unknown_or_inactive_shipping_option_is_rejected():
    user = UserFactory()
    p1 = ProductFactory()
    inactive = ShippingOptionFactory(is_active=False)
    cart = _fill_cart(user, (p1, 1))

    with pytest.raises(OrderValidationError, match="shipping"):
        assemble_order(user=user, customer=CUSTOMER, shipping_option_id=inactive.id)
    with pytest.raises(OrderValidationError, match="shipping"):
        assemble_order(user=user, customer=CUSTOMER, shipping_option_id="teleport")

    assert Order.objects.count() == 0
    cart.refresh_from_db()
    assert cart.status == Cart.STATUS_ACTIVE


@pytest.mark.django_db
def test_unknown_payment_method_is_rejected():
    user = UserFactory()
    p1 = ProductFactory()
    _fill_cart(user, (p1, 1))

    with pytest.raises(OrderValidationError, match="payment"):
        assemble_order(user=user, customer=CUSTOMER, payment_method_id="bitcoin")

    assert Order.objects.count() == 0


@pytest.mark.django_db
def test_discount_code_reduces_total():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    shipping = ShippingOptionFactory(price_cents=15000)
    _fill_cart(user, (p1, 1))

    order = assemble_order(user=user, customer=CUSTOMER, shipping_option_id=shipping.id, discount_code="macla10")

    assert order.discount_code == "MACLA10"
    assert order.discount_cents == 10000
    assert order.total_cents == 100000 + 15000 - 10000
    assert order.metadata["discount"]["products"] == 10000


@pytest.mark.django_db
def test_shipping_discount_waives_shipping_cost():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    shipping = ShippingOptionFactory(price_cents=15000)
    _fill_cart(user, (p1, 1))

    order = assemble_order(user=user, customer=CUSTOMER, shipping_option_id=shipping.id, discount_code="ENVIOFREE")

    assert order.shipping_cost_cents == 15000
    assert order.discount_cents == 15000
    assert order.total_cents == 100000


@pytest.mark.django_db
def test_invalid_discount_code_is_rejected():
    user = UserFactory()
    p1 = ProductFactory(price_cents=1000)
    _fill_cart(user, (p1, 1))

    with pytest.raises(OrderValidationError):
        assemble_order(user=user, customer=CUSTOMER, discount_code="MACLA10")
    with pytest.raises(OrderValidationError):
        assemble_order(user=user, customer=CUSTOMER, discount_code="NOPE")

    assert Order.objects.count() == 0


def test_generate_order_code_format(settings):
    settings.ORDER_CODE_PREFIX = "MAC"

    code = generate_order_code()

    assert code.startswith("MAC-")
    suffix = code.split("-", 1)[1]
    assert len(suffix) == 8
    assert suffix == suffix.upper()
    int(suffix, 16)


@pytest.mark.django_db
def test_code_collision_is_retried():
    OrderFactory(code="MAC-00000001")
    user = UserFactory()
    p1 = ProductFactory()
    _fill_cart(user, (p1, 1))

    with mock.patch("orders.services.generate_order_code", side_effect=["MAC-00000001", "MAC-00000002"]):
        order = assemble_order(user=user, customer=CUSTOMER)

    assert order.code == "MAC-00000002"
    assert Order.objects.count() == 2


@pytest.mark.django_db
def test_code_generation_gives_up_after_max_attempts(settings):
    settings.ORDER_CODE_MAX_ATTEMPTS = 3
    OrderFactory(code="MAC-00000001")
    user = UserFactory()
    p1 = ProductFactory()
    cart = _fill_cart(user, (p1, 1))

    with mock.patch("orders.services.generate_order_code", return_value="MAC-00000001") as generator:
        with pytest.raises(OrderCodeError):
            assemble_order(user=user, customer=CUSTOMER)

    assert generator.call_count == 3
    assert Order.objects.count() == 1
    cart.refresh_from_db()
    assert cart.status == Cart.STATUS_ACTIVE


@pytest.mark.django_db
def test_integrity_errors_other_than_code_collision_propagate():
    user = UserFactory()
    p1 = ProductFactory()
    _fill_cart(user, (p1, 1))

    with mock.patch("orders.models.Order.objects.create", side_effect=IntegrityError("boom")):
        with pytest.raises(IntegrityError):
            assemble_order(user=user, customer=CUSTOMER)


@pytest.mark.django_db(transaction=True)
def test_order_created_email_is_sent_after_commit(mailoutbox):
    user = UserFactory()
    p1 = ProductFactory()
    _fill_cart(user, (p1, 1))

    order = assemble_order(user=user, customer=CUSTOMER)

    assert len(mailoutbox) == 1
    assert order.code in mailoutbox[0].subject
    assert mailoutbox[0].to == ["ana@example.com"]
    assert f"/pedidos/{order.code}" in mailoutbox[0].body


@pytest.mark.django_db
def test_failure_after_items_are_written_rolls_back_everything():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    shipping = ShippingOptionFactory()
    payment = PaymentMethodFactory()
    cart = _fill_cart(user, (p1, 2))

    with mock.patch.object(OrderStatusHistory.objects, "create", side_effect=DatabaseError("connection lost")):
        with pytest.raises(DatabaseError):
            assemble_order(user=user, customer=CUSTOMER, shipping_option_id=shipping.id, payment_method_id=payment.id)

    assert Order.objects.count() == 0
    assert OrderItem.objects.count() == 0
    assert OrderStatusHistory.objects.count() == 0
    cart.refresh_from_db()
    assert cart.status == Cart.STATUS_ACTIVE
    assert cart.submitted_at is None
    assert cart.items.count() == 1
