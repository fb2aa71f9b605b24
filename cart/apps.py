"""Django app configuration for the Cart app."""

from django.apps import AppConfig


class CartConfig(AppConfig):
    """Server-side carts and guest cart reconciliation."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"
