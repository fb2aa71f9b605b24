"""Orders app models.

An order freezes a cart at checkout. Apart from `status` (tracked one row
per transition in `OrderStatusHistory`) rows are never updated after
assembly.
"""

from catalog.snapshots import ProductSnapshot, build_snapshot
from common.choices import OrderStatus
from django.conf import settings
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Order(TimeStampedModel):
    """Purchase order capturing a snapshot of a checkout.

    Customer contact fields are denormalized at submission time and money
    columns are integer cents with `total = subtotal + shipping - discount`
    enforced by the database.
    """

    STATUS_PENDING = OrderStatus.PENDING
    STATUS_PAID = OrderStatus.PAID
    STATUS_SHIPPED = OrderStatus.SHIPPED
    STATUS_CANCELLED = OrderStatus.CANCELLED
    STATUS_CHOICES = OrderStatus.choices

    code = models.CharField(max_length=32, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="orders", on_delete=models.SET_NULL
    )
    cart = models.ForeignKey("cart.Cart", null=True, blank=True, related_name="orders", on_delete=models.SET_NULL)
    customer_name = models.CharField(max_length=200)
    customer_email = models.CharField(max_length=254)
    customer_phone = models.CharField(max_length=32)
    customer_city = models.CharField(max_length=120)
    customer_address = models.CharField(max_length=255)
    notes = models.TextField(blank=True)
    shipping_option = models.ForeignKey(
        "catalog.ShippingOption", null=True, blank=True, related_name="orders", on_delete=models.SET_NULL
    )
    payment_method = models.ForeignKey(
        "catalog.PaymentMethod", null=True, blank=True, related_name="orders", on_delete=models.SET_NULL
    )
    subtotal_cents = models.PositiveBigIntegerField()
    shipping_cost_cents = models.PositiveBigIntegerField(default=0)
    discount_cents = models.PositiveBigIntegerField(default=0)
    discount_code = models.CharField(max_length=32, blank=True)
    total_cents = models.PositiveBigIntegerField()
    currency = models.CharField(max_length=3, default="COP")
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    billing_address = models.JSONField(null=True, blank=True)
    shipping_address = models.JSONField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["-submitted_at", "-id"]
        indexes = [
            models.Index(fields=["user", "submitted_at"], name="order_user_submitted_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                name="order_total_consistent",
                condition=models.Q(
                    total_cents=models.F("subtotal_cents")
                    + models.F("shipping_cost_cents")
                    - models.F("discount_cents")
                ),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order {self.code} user={self.user_id} status={self.status}"


class OrderItem(TimeStampedModel):
    """Line item within an order.

    Product identity, name, sku and price are copied so historical orders
    render after the catalog product changes or disappears.
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product_id = models.CharField(max_length=64, blank=True)
    product_name = models.CharField(max_length=200)
    product_sku = models.CharField(max_length=64, blank=True)
    unit_price_cents = models.PositiveBigIntegerField()
    quantity = models.PositiveIntegerField()
    line_total_cents = models.PositiveBigIntegerField()
    product_snapshot = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gte=1)),
            models.CheckConstraint(
                name="orderitem_line_total_consistent",
                condition=models.Q(line_total_cents=models.F("quantity") * models.F("unit_price_cents")),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"

    @property
    def snapshot(self) -> ProductSnapshot:
        return build_snapshot(
            self.product_snapshot,
            id=self.product_id or None,
            name=self.product_name,
            unit_price=self.unit_price_cents,
        )


class OrderStatusHistory(models.Model):
    """Append-only log of order status transitions."""

    order = models.ForeignKey(Order, related_name="status_history", on_delete=models.CASCADE)
    from_status = models.CharField(max_length=16, choices=OrderStatus.choices, null=True, blank=True)
    to_status = models.CharField(max_length=16, choices=OrderStatus.choices)
    changed_by = models.CharField(max_length=64)
    note = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name_plural = "order status history"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.order_id}: {self.from_status} -> {self.to_status} by {self.changed_by}"
