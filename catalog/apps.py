"""Django app configuration for catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Products plus the shipping and payment reference tables."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
