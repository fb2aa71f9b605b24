"""DRF serializers for Orders.

Input serializers only validate the request envelope; business validation
happens in `orders.services`. Output uses the storefront client's camelCase
keys and integer amounts in the smallest currency unit.
"""

from rest_framework import serializers

from .models import Order, OrderItem, OrderStatusHistory


class CustomerSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    """Checkout request body."""

    customer = CustomerSerializer()
    shippingOptionId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    paymentMethodId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    discountCode = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    billingAddress = serializers.DictField(required=False, allow_null=True)
    items = serializers.ListField(child=serializers.DictField(), required=False, allow_empty=True)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class PaymentWebhookSerializer(serializers.Serializer):
    """Payment gateway notification for an order."""

    reference = serializers.CharField()
    status = serializers.CharField()
    amount = serializers.IntegerField(required=False, min_value=0)
    transactionId = serializers.CharField(required=False, allow_blank=True, default="")


class DiscountValidateSerializer(serializers.Serializer):
    code = serializers.CharField()
    subtotal = serializers.IntegerField(min_value=0)
    shipping = serializers.IntegerField(required=False, min_value=0, default=0)


class OrderItemSerializer(serializers.ModelSerializer):
    """Order line with its product snapshot rehydrated."""

    product = serializers.SerializerMethodField()
    unitPrice = serializers.IntegerField(source="unit_price_cents")
    lineTotal = serializers.IntegerField(source="line_total_cents")

    class Meta:
        model = OrderItem
        fields = ["product", "quantity", "unitPrice", "lineTotal"]

    def get_product(self, obj: OrderItem) -> dict:
        return obj.snapshot.as_json()


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    fromStatus = serializers.CharField(source="from_status", allow_null=True)
    toStatus = serializers.CharField(source="to_status")
    changedBy = serializers.CharField(source="changed_by")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = OrderStatusHistory
        fields = ["fromStatus", "toStatus", "changedBy", "note", "createdAt"]


class OrderSerializer(serializers.ModelSerializer):
    """Order summary as rendered by the checkout receipt and order history."""

    subtotal = serializers.IntegerField(source="subtotal_cents")
    shippingCost = serializers.IntegerField(source="shipping_cost_cents")
    discount = serializers.IntegerField(source="discount_cents")
    discountCode = serializers.CharField(source="discount_code")
    total = serializers.IntegerField(source="total_cents")
    submittedAt = serializers.DateTimeField(source="submitted_at")
    customerName = serializers.CharField(source="customer_name")
    customerEmail = serializers.CharField(source="customer_email")
    customerCity = serializers.CharField(source="customer_city")
    shippingOption = serializers.SerializerMethodField()
    paymentMethod = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "code",
            "status",
            "subtotal",
            "shippingCost",
            "discount",
            "discountCode",
            "total",
            "currency",
            "submittedAt",
            "customerName",
            "customerEmail",
            "customerCity",
            "notes",
            "shippingOption",
            "paymentMethod",
            "items",
        ]

    def get_shippingOption(self, obj: Order):
        option = obj.shipping_option
        if option is None:
            label = (obj.metadata or {}).get("shippingOptionLabel")
            if not label:
                return None
            return {"id": None, "label": label, "description": "", "price": obj.shipping_cost_cents}
        return {
            "id": option.id,
            "label": option.label,
            "description": option.description,
            "price": obj.shipping_cost_cents,
        }

    def get_paymentMethod(self, obj: Order):
        method = obj.payment_method
        if method is None:
            label = (obj.metadata or {}).get("paymentMethodLabel")
            return {"id": None, "label": label, "description": ""} if label else None
        return {"id": method.id, "label": method.label, "description": method.description}


class OrderDetailSerializer(OrderSerializer):
    statusHistory = OrderStatusHistorySerializer(source="status_history", many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["statusHistory"]
