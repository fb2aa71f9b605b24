"""Catalog app models.

Defines the sellable products plus the checkout reference data (shipping
options and payment methods) that order assembly re-validates on submit.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Sellable product keyed by a stable slug id.

    Prices are integer minor units (cents) in `currency`.
    """

    id = models.SlugField(max_length=64, primary_key=True)
    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, blank=True)
    category = models.CharField(max_length=120, blank=True)
    short_description = models.CharField(max_length=300, blank=True)
    description = models.TextField(blank=True)
    price_cents = models.PositiveBigIntegerField(default=0)
    currency = models.CharField(max_length=3, default="COP")
    stock = models.PositiveIntegerField(default=0)
    images = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class ShippingOption(TimeStampedModel):
    """Shipping choice offered at checkout."""

    id = models.SlugField(max_length=64, primary_key=True)
    label = models.CharField(max_length=120)
    description = models.CharField(max_length=300, blank=True)
    price_cents = models.PositiveBigIntegerField(default=0)
    regions = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "label"]

    def __str__(self) -> str:  # pragma: no cover
        return self.label


class PaymentMethod(TimeStampedModel):
    """Payment method offered at checkout."""

    id = models.SlugField(max_length=64, primary_key=True)
    label = models.CharField(max_length=120)
    description = models.CharField(max_length=300, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "label"]

    def __str__(self) -> str:  # pragma: no cover
        return self.label
