import factory
from cart.models import Cart, CartItem
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "pass")


class CartFactory(DjangoModelFactory):
    class Meta:
        model = Cart

    user = factory.SubFactory(UserFactory)
    status = Cart.STATUS_ACTIVE
    currency = "COP"


class CartItemFactory(DjangoModelFactory):
    class Meta:
        model = CartItem

    cart = factory.SubFactory(CartFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    quantity = 1
    unit_price_cents = factory.LazyAttribute(lambda o: o.product.price_cents if o.product else 0)
    line_total_cents = factory.LazyAttribute(lambda o: o.quantity * o.unit_price_cents)
    product_snapshot = factory.LazyAttribute(
        lambda o: {"id": o.product.id, "name": o.product.name, "price": o.unit_price_cents, "currency": "COP"}
        if o.product
        else {}
    )
