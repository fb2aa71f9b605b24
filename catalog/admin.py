"""Admin registration for catalog models."""

from django.contrib import admin

from .models import PaymentMethod, Product, ShippingOption


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "sku", "price_cents", "currency", "stock", "is_active", "updated_at")
    list_filter = ("is_active", "currency", "category")
    search_fields = ("id", "name", "sku")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(ShippingOption)
class ShippingOptionAdmin(admin.ModelAdmin):
    list_display = ("id", "label", "price_cents", "is_active", "sort_order")
    list_filter = ("is_active",)
    ordering = ("sort_order", "label")


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("id", "label", "is_active", "sort_order")
    list_filter = ("is_active",)
    ordering = ("sort_order", "label")
