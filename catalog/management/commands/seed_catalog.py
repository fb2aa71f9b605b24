"""Seed the catalog with the storefront's launch data.

Creates the flagship product plus the shipping options and payment methods
offered at checkout. Re-running is idempotent; rows are upserted by id.
"""

from catalog.models import PaymentMethod, Product, ShippingOption
from django.core.management.base import BaseCommand
from django.db import transaction

PRODUCTS = [
    {
        "id": "plancha-secadora-2en1",
        "name": "Plancha secadora 2 en 1",
        "sku": "MAC-PL-001",
        "category": "Cuidado del cabello",
        "short_description": "Seca y alisa en un solo paso con placas de cerámica y turmalina.",
        "price_cents": 380000,
        "currency": "COP",
        "stock": 20,
        "images": ["/plancha.png"],
    },
]

SHIPPING_OPTIONS = [
    {
        "id": "medellin",
        "label": "Envío Medellín y área metropolitana",
        "description": "Entrega en 24 a 48 horas hábiles.",
        "price_cents": 15000,
        "regions": ["Medellín", "Bello", "Envigado", "Itagüí", "Sabaneta"],
        "sort_order": 0,
    },
    {
        "id": "nacional",
        "label": "Envío nacional",
        "description": "Entrega en 3 a 5 días hábiles con transportadora aliada.",
        "price_cents": 25000,
        "regions": [],
        "sort_order": 1,
    },
]

PAYMENT_METHODS = [
    {
        "id": "contraentrega",
        "label": "Pago contra entrega",
        "description": "Paga en efectivo al recibir tu pedido.",
        "sort_order": 0,
    },
    {
        "id": "pasarela",
        "label": "Pasarela de pagos",
        "description": "Tarjeta, PSE o Nequi a través de la pasarela segura.",
        "sort_order": 1,
    },
]


class Command(BaseCommand):
    help = "Seed initial catalog data (products, shipping options, payment methods)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        for data in PRODUCTS:
            values = {k: v for k, v in data.items() if k != "id"}
            Product.objects.update_or_create(id=data["id"], defaults={**values, "is_active": True})

        for data in SHIPPING_OPTIONS:
            values = {k: v for k, v in data.items() if k != "id"}
            ShippingOption.objects.update_or_create(id=data["id"], defaults={**values, "is_active": True})

        for data in PAYMENT_METHODS:
            values = {k: v for k, v in data.items() if k != "id"}
            PaymentMethod.objects.update_or_create(id=data["id"], defaults={**values, "is_active": True})

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(PRODUCTS)} product(s), {len(SHIPPING_OPTIONS)} shipping option(s), "
                f"{len(PAYMENT_METHODS)} payment method(s)."
            )
        )
