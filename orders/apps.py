"""Django app configuration for the orders app."""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """Checkout, order history and payment status."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
