import factory
from factory.django import DjangoModelFactory
from orders.models import Order, OrderItem


class OrderFactory(DjangoModelFactory):
    class Meta:
        model = Order

    code = factory.Sequence(lambda n: f"MAC-{n:08X}")
    user = factory.SubFactory("cart.tests.factories.UserFactory")
    customer_name = "Ana Gómez"
    customer_email = factory.LazyAttribute(lambda o: o.user.email if o.user else "ana@example.com")
    customer_phone = "3001234567"
    customer_city = "Medellín"
    customer_address = "Calle 10 # 43-12"
    subtotal_cents = 100000
    shipping_cost_cents = 0
    discount_cents = 0
    total_cents = factory.LazyAttribute(lambda o: o.subtotal_cents + o.shipping_cost_cents - o.discount_cents)
    currency = "COP"


class OrderItemFactory(DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    product_id = factory.Sequence(lambda n: f"product-{n}")
    product_name = "Plancha secadora"
    product_sku = "SKU-1"
    unit_price_cents = 100000
    quantity = 1
    line_total_cents = factory.LazyAttribute(lambda o: o.quantity * o.unit_price_cents)
    product_snapshot = factory.LazyAttribute(
        lambda o: {"id": o.product_id, "name": o.product_name, "price": o.unit_price_cents, "currency": "COP"}
    )
