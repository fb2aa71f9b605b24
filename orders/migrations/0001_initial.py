import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

ORDER_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("paid", "Paid"),
    ("shipped", "Shipped"),
    ("cancelled", "Cancelled"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("cart", "0001_initial"),
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("code", models.CharField(max_length=32, unique=True)),
                ("customer_name", models.CharField(max_length=200)),
                ("customer_email", models.CharField(max_length=254)),
                ("customer_phone", models.CharField(max_length=32)),
                ("customer_city", models.CharField(max_length=120)),
                ("customer_address", models.CharField(max_length=255)),
                ("notes", models.TextField(blank=True)),
                ("subtotal_cents", models.PositiveBigIntegerField()),
                ("shipping_cost_cents", models.PositiveBigIntegerField(default=0)),
                ("discount_cents", models.PositiveBigIntegerField(default=0)),
                ("discount_code", models.CharField(blank=True, max_length=32)),
                ("total_cents", models.PositiveBigIntegerField()),
                ("currency", models.CharField(default="COP", max_length=3)),
                (
                    "status",
                    models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default="pending", max_length=16),
                ),
                ("submitted_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("billing_address", models.JSONField(blank=True, null=True)),
                ("shipping_address", models.JSONField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                (
                    "cart",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="cart.cart",
                    ),
                ),
                (
                    "payment_method",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="catalog.paymentmethod",
                    ),
                ),
                (
                    "shipping_option",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="catalog.shippingoption",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-submitted_at", "-id"],
                "indexes": [models.Index(fields=["user", "submitted_at"], name="order_user_submitted_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            total_cents=models.F("subtotal_cents")
                            + models.F("shipping_cost_cents")
                            - models.F("discount_cents")
                        ),
                        name="order_total_consistent",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product_id", models.CharField(blank=True, max_length=64)),
                ("product_name", models.CharField(max_length=200)),
                ("product_sku", models.CharField(blank=True, max_length=64)),
                ("unit_price_cents", models.PositiveBigIntegerField()),
                ("quantity", models.PositiveIntegerField()),
                ("line_total_cents", models.PositiveBigIntegerField()),
                ("product_snapshot", models.JSONField(blank=True, default=dict)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(quantity__gte=1), name="orderitem_quantity_positive"),
                    models.CheckConstraint(
                        condition=models.Q(line_total_cents=models.F("quantity") * models.F("unit_price_cents")),
                        name="orderitem_line_total_consistent",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderStatusHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "from_status",
                    models.CharField(blank=True, choices=ORDER_STATUS_CHOICES, max_length=16, null=True),
                ),
                ("to_status", models.CharField(choices=ORDER_STATUS_CHOICES, max_length=16)),
                ("changed_by", models.CharField(max_length=64)),
                ("note", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_history",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "verbose_name_plural": "order status history",
            },
        ),
    ]
