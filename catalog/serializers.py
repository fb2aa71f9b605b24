"""Serializers for the catalog app (read-only)."""

from rest_framework import serializers

from .models import PaymentMethod, Product, ShippingOption
from .snapshots import snapshot_from_product


class ProductSerializer(serializers.ModelSerializer):
    """Products are exposed in the same shape stored in cart snapshots."""

    class Meta:
        model = Product
        fields = ["id", "name", "sku", "price_cents", "currency", "stock", "images"]

    def to_representation(self, instance):
        data = snapshot_from_product(instance).as_json()
        if instance.description:
            data["description"] = instance.description
        return data


class ShippingOptionSerializer(serializers.ModelSerializer):
    price = serializers.IntegerField(source="price_cents")

    class Meta:
        model = ShippingOption
        fields = ["id", "label", "description", "price", "regions"]


class PaymentMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentMethod
        fields = ["id", "label", "description"]
