"""Cart serializers for read and write operations.

Responses use the storefront client's camelCase keys.
"""

from catalog.snapshots import default_currency
from rest_framework import serializers

from .models import Cart, CartItem


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line with its rehydrated snapshot."""

    product = serializers.SerializerMethodField()
    unitPrice = serializers.IntegerField(source="unit_price_cents")
    lineTotal = serializers.IntegerField(source="line_total_cents")

    class Meta:
        model = CartItem
        fields = ["product", "quantity", "unitPrice", "lineTotal"]

    def get_product(self, obj: CartItem) -> dict:
        return obj.snapshot.as_json()


class CartReadSerializer(serializers.ModelSerializer):
    """Read serializer for the cart summary and items."""

    items = serializers.SerializerMethodField()
    cartId = serializers.IntegerField(source="id")
    totalItems = serializers.IntegerField(source="total_items")
    totalAmount = serializers.IntegerField(source="total_cents")
    currency = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ["items", "cartId", "status", "totalItems", "totalAmount", "currency", "version"]

    def get_items(self, obj: Cart) -> list:
        items = obj.items.select_related("product").order_by("id")
        return CartItemReadSerializer(items, many=True).data

    def get_currency(self, obj: Cart) -> str:
        return obj.currency or default_currency()

    @classmethod
    def from_cart(cls, *, cart):
        return cls(cart)


class AdminCartSerializer(CartReadSerializer):
    """Cart representation for support staff, including the owner."""

    userId = serializers.IntegerField(source="user_id")
    userEmail = serializers.EmailField(source="user.email")
    lastActivityAt = serializers.DateTimeField(source="last_activity_at")
    submittedAt = serializers.DateTimeField(source="submitted_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta(CartReadSerializer.Meta):
        fields = CartReadSerializer.Meta.fields + [
            "userId",
            "userEmail",
            "lastActivityAt",
            "submittedAt",
            "createdAt",
            "updatedAt",
        ]


class CartReplaceSerializer(serializers.Serializer):
    """Write serializer for a full cart replacement.

    Item contents are normalized by the service; only the envelope is
    validated here.
    """

    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    version = serializers.IntegerField(required=False, min_value=0)


class CartMergeSerializer(serializers.Serializer):
    """Guest cart items to merge into the authenticated user's cart."""

    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
