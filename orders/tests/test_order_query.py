from datetime import timedelta

import pytest
from cart.services import replace_cart_items
from cart.tests.factories import UserFactory
from catalog.models import Product
from catalog.tests.factories import ProductFactory, ShippingOptionFactory
from django.utils import timezone
from orders.selectors import clamp_order_limit, list_orders_for_user
from orders.serializers import OrderSerializer
from orders.services import assemble_order
from orders.tests.factories import OrderFactory, OrderItemFactory

CUSTOMER = {
    "name": "Ana Gómez",
    "email": "ana@example.com",
    "phone": "3001234567",
    "city": "Medellín",
    "address": "Calle 10 # 43-12",
}


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 20), ("", 20), ("abc", 20), ("5", 5), (0, 1), (-4, 1), (100, 100), (1000, 100)],
)
def test_clamp_order_limit(raw, expected):
    assert clamp_order_limit(raw) == expected


@pytest.mark.django_db
def test_orders_are_listed_newest_first_with_id_tiebreak():
    user = UserFactory()
    now = timezone.now()
    oldest = OrderFactory(user=user, submitted_at=now - timedelta(days=2))
    same_time_a = OrderFactory(user=user, submitted_at=now)
    same_time_b = OrderFactory(user=user, submitted_at=now)
    OrderFactory()

    orders = list_orders_for_user(user=user)

    assert [o.id for o in orders] == [same_time_b.id, same_time_a.id, oldest.id]


@pytest.mark.django_db
def test_list_orders_respects_limit():
    user = UserFactory()
    for _ in range(3):
        OrderFactory(user=user)

    assert len(list_orders_for_user(user=user, limit=2)) == 2
    assert len(list_orders_for_user(user=user, limit="0")) == 1


@pytest.mark.django_db
def test_snapshot_survives_product_deletion():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000, name="Plancha")
    replace_cart_items(user=user, items=[{"product": {"id": p1.id}, "quantity": 1}])
    order = assemble_order(user=user, customer=CUSTOMER)
    Product.objects.filter(pk=p1.pk).delete()

    data = OrderSerializer(list_orders_for_user(user=user), many=True).data

    product = data[0]["items"][0]["product"]
    assert product["id"] == p1.id
    assert product["name"] == "Plancha"
    assert product["price"] == 100000
    assert data[0]["code"] == order.code


@pytest.mark.django_db
def test_missing_snapshot_falls_back_to_denormalized_columns():
    item = OrderItemFactory(product_snapshot={}, product_id="legacy-1", product_name="Antiguo", unit_price_cents=700)

    product = OrderSerializer(item.order).data["items"][0]["product"]

    assert product["id"] == "legacy-1"
    assert product["name"] == "Antiguo"
    assert product["price"] == 700
    assert product["currency"] == "COP"


@pytest.mark.django_db
def test_order_representation_resolves_shipping_and_payment():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    shipping = ShippingOptionFactory(id="medellin", label="Envío Medellín", price_cents=10000)
    replace_cart_items(user=user, items=[{"product": {"id": p1.id}, "quantity": 1}])
    order = assemble_order(user=user, customer=CUSTOMER, shipping_option_id="medellin")

    data = OrderSerializer(order).data

    assert data["shippingOption"] == {
        "id": "medellin",
        "label": "Envío Medellín",
        "description": shipping.description,
        "price": 10000,
    }
    assert data["paymentMethod"] is None
    assert data["total"] == 110000

    shipping.delete()
    order.refresh_from_db()
    assert OrderSerializer(order).data["shippingOption"]["label"] == "Envío Medellín"
