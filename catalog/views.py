"""Read-only endpoints for products and checkout reference data."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import generics, viewsets
from rest_framework.permissions import AllowAny

from . import selectors
from .models import Product
from .serializers import PaymentMethodSerializer, ProductSerializer, ShippingOptionSerializer


class ProductFilterSet(filters.FilterSet):
    category = filters.CharFilter(field_name="category", lookup_expr="iexact")
    in_stock = filters.BooleanFilter(method="filter_in_stock")

    class Meta:
        model = Product
        fields = ["category", "in_stock"]

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(stock__gt=0) if value else queryset.filter(stock=0)


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description="Returns active products. Supports `category`, `in_stock` and `search` query params.",
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category"),
            OpenApiParameter("in_stock", OpenApiTypes.BOOL, location="query", description="Only products in stock"),
            OpenApiParameter("search", OpenApiTypes.STR, location="query", description="Search by name or sku"),
        ],
    ),
    retrieve=extend_schema(
        summary="Get product",
        description="Returns a single active product by id",
        tags=["Catalog Endpoints"],
        examples=[
            OpenApiExample(
                "Product",
                value={
                    "id": "plancha-secadora-2en1",
                    "name": "Plancha secadora 2 en 1",
                    "price": 380000,
                    "currency": "COP",
                    "stock": 20,
                    "images": ["/plancha.png"],
                    "image": "/plancha.png",
                    "imageUrl": "/plancha.png",
                },
                response_only=True,
            )
        ],
    ),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    filterset_class = ProductFilterSet
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter]
    search_fields = ["name", "sku"]
    throttle_scope = "catalog"

    def get_queryset(self):
        return selectors.list_active_products()


class ShippingOptionListView(generics.ListAPIView):
    """Active shipping options, cheapest configuration first by sort order."""

    serializer_class = ShippingOptionSerializer
    permission_classes = [AllowAny]
    pagination_class = None
    throttle_scope = "catalog"

    def get_queryset(self):
        return selectors.list_active_shipping_options()

    @extend_schema(tags=["Catalog Endpoints"], summary="List shipping options")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class PaymentMethodListView(generics.ListAPIView):
    serializer_class = PaymentMethodSerializer
    permission_classes = [AllowAny]
    pagination_class = None
    throttle_scope = "catalog"

    def get_queryset(self):
        return selectors.list_active_payment_methods()

    @extend_schema(tags=["Catalog Endpoints"], summary="List payment methods")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
