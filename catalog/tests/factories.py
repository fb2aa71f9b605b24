import factory
from catalog.models import PaymentMethod, Product, ShippingOption
from factory import Faker
from factory.django import DjangoModelFactory


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product
        django_get_or_create = ("id",)

    id = factory.Sequence(lambda n: f"product-{n}")
    name = Faker("sentence", nb_words=3)
    sku = factory.Faker("bothify", text="SKU-####-???")
    category = "Cuidado del cabello"
    price_cents = 100000
    currency = "COP"
    stock = 10
    images = factory.LazyFunction(lambda: ["/plancha.png"])
    is_active = True


class ShippingOptionFactory(DjangoModelFactory):
    class Meta:
        model = ShippingOption
        django_get_or_create = ("id",)

    id = factory.Sequence(lambda n: f"shipping-{n}")
    label = Faker("sentence", nb_words=2)
    description = Faker("sentence")
    price_cents = 10000
    is_active = True


class PaymentMethodFactory(DjangoModelFactory):
    class Meta:
        model = PaymentMethod
        django_get_or_create = ("id",)

    id = factory.Sequence(lambda n: f"payment-{n}")
    label = Faker("sentence", nb_words=2)
    description = Faker("sentence")
    is_active = True
