"""Admin registration for cart models.

Provides admin interfaces for `Cart` and `CartItem`, with inline items on
the cart page for support. Carts are read-mostly here; contents change
only through the cart API.
"""

from django.contrib import admin, messages
from django.utils import timezone

from .models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "product_snapshot", "quantity", "unit_price_cents", "line_total_cents")
    readonly_fields = fields
    raw_id_fields = ("product",)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "total_items", "total_cents", "currency", "version", "updated_at")
    list_filter = ("status", "currency")
    search_fields = ("user__username", "user__email")
    ordering = ("-updated_at",)
    readonly_fields = (
        "total_items",
        "total_cents",
        "version",
        "last_activity_at",
        "submitted_at",
        "created_at",
        "updated_at",
    )
    inlines = [CartItemInline]
    list_select_related = ("user",)
    actions = ["action_abandon_cart"]

    @admin.action(description="Abandon selected active carts")
    def action_abandon_cart(self, request, queryset):
        updated = queryset.filter(status=Cart.STATUS_ACTIVE).update(
            status=Cart.STATUS_ABANDONED, updated_at=timezone.now()
        )
        messages.success(request, f"Abandoned {updated} cart(s).")


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "product", "quantity", "unit_price_cents", "line_total_cents", "updated_at")
    search_fields = ("product__id", "cart__user__email")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("cart", "product")
