"""Cart app models.

A user owns at most one active cart at a time. Items are replaced
wholesale on every save and carry a frozen product snapshot so they keep
rendering after the catalog product is edited or removed.
"""

from catalog.snapshots import ProductSnapshot, build_snapshot
from common.choices import CartStatus
from django.conf import settings
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Cart(TimeStampedModel):
    """Shopping cart bound to a user.

    `total_items`, `total_cents` and `currency` cache the aggregate of the
    current items; `version` increments on every replacement so clients can
    detect concurrent writes.
    """

    STATUS_ACTIVE = CartStatus.ACTIVE
    STATUS_SUBMITTED = CartStatus.SUBMITTED
    STATUS_ABANDONED = CartStatus.ABANDONED
    STATUS_CHOICES = CartStatus.choices

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="carts", on_delete=models.CASCADE)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    total_items = models.PositiveIntegerField(default=0)
    total_cents = models.PositiveBigIntegerField(default=0)
    currency = models.CharField(max_length=3, blank=True, default="")
    version = models.PositiveIntegerField(default=0)
    last_activity_at = models.DateTimeField(default=timezone.now)
    submitted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="cart_user_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Cart#{self.id} ({self.user_id}) {self.status}"


class CartItem(TimeStampedModel):
    """Line item in a shopping cart.

    `unit_price_cents` is captured when the cart is written and never
    re-read from the catalog; `line_total_cents` is always recomputed.
    """

    cart = models.ForeignKey(Cart, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey(
        "catalog.Product",
        null=True,
        blank=True,
        related_name="cart_items",
        on_delete=models.SET_NULL,
    )
    product_snapshot = models.JSONField(default=dict, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    unit_price_cents = models.PositiveBigIntegerField(default=0)
    line_total_cents = models.PositiveBigIntegerField(default=0)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                name="cartitem_quantity_positive",
                condition=models.Q(quantity__gte=1),
            ),
            models.CheckConstraint(
                name="cartitem_line_total_consistent",
                condition=models.Q(line_total_cents=models.F("quantity") * models.F("unit_price_cents")),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} cart={self.cart_id} product={self.product_id} qty={self.quantity}"

    @property
    def snapshot(self) -> ProductSnapshot:
        return build_snapshot(self.product_snapshot, id=self.product_id, unit_price=self.unit_price_cents)
