from django.contrib import admin

from .models import Order, OrderItem, OrderStatusHistory


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product_id", "product_name", "product_sku", "quantity", "unit_price_cents", "line_total_cents")
    readonly_fields = fields
    can_delete = False


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    fields = ("from_status", "to_status", "changed_by", "note", "created_at")
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "status", "user", "customer_email", "total_cents", "currency", "submitted_at")
    list_filter = ("status", "submitted_at", "shipping_option", "payment_method")
    search_fields = ("code", "customer_email", "customer_name", "customer_phone")
    date_hierarchy = "submitted_at"
    readonly_fields = ("subtotal_cents", "shipping_cost_cents", "discount_cents", "total_cents", "metadata")
    inlines = [OrderItemInline, OrderStatusHistoryInline]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product_id", "product_name", "quantity", "unit_price_cents")
    search_fields = ("product_id", "product_name", "product_sku", "order__code")
