"""DRF views for cart operations."""

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsStoreAdmin

from .models import Cart
from .selectors import load_active_cart
from .serializers import AdminCartSerializer, CartMergeSerializer, CartReadSerializer, CartReplaceSerializer
from .services import CartConflictError, CartError, merge_guest_items, replace_cart_items, touch_cart

CART_EXAMPLE = {
    "items": [
        {
            "product": {
                "id": "plancha-secadora-2en1",
                "name": "Plancha secadora 2 en 1",
                "price": 380000,
                "currency": "COP",
                "stock": 20,
                "images": ["/plancha.png"],
                "image": "/plancha.png",
                "imageUrl": "/plancha.png",
            },
            "quantity": 2,
            "unitPrice": 380000,
            "lineTotal": 760000,
        }
    ],
    "cartId": 1,
    "status": "active",
    "totalItems": 2,
    "totalAmount": 760000,
    "currency": "COP",
    "version": 3,
}

MessageSerializer = inline_serializer(name="MessageResponse", fields={"message": rf_serializers.CharField()})


class CartDetailView(APIView):
    """Read or fully replace the authenticated user's active cart."""

    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "cart" if self.request.method == "GET" else "cart_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get active cart",
        description="Returns the active cart with items and totals, or `{items: []}` when there is none.",
        examples=[OpenApiExample("Cart", value=CART_EXAMPLE), OpenApiExample("No cart", value={"items": []})],
    )
    def get(self, request):
        cart = load_active_cart(user=request.user)
        if cart is None:
            return Response({"items": []}, status=status.HTTP_200_OK)
        touch_cart(cart=cart)
        return Response(CartReadSerializer.from_cart(cart=cart).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Replace cart",
        description=(
            "Replaces every item of the active cart. Items with quantity 0 are dropped. "
            "Send `version` to reject the write when the cart changed since it was read (409)."
        ),
        request=CartReplaceSerializer,
        responses={204: None, 400: MessageSerializer, 409: MessageSerializer},
        examples=[
            OpenApiExample(
                "Replace",
                value={"items": [{"product": {"id": "plancha-secadora-2en1"}, "quantity": 2}], "version": 3},
                request_only=True,
            )
        ],
    )
    def put(self, request):
        serializer = CartReplaceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            replace_cart_items(
                user=request.user,
                items=serializer.validated_data["items"],
                expected_version=serializer.validated_data.get("version"),
            )
        except CartConflictError as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)
        except CartError:
            return Response({"message": "Unable to update cart."}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartMergeView(APIView):
    """Merge the guest cart kept by the client into the user's cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Merge guest cart",
        description=(
            "Sums quantities of products present in both carts and clamps every line to available stock. "
            "An empty guest list leaves the server cart untouched."
        ),
        request=CartMergeSerializer,
        responses={200: CartReadSerializer},
        examples=[OpenApiExample("Merged", value=CART_EXAMPLE, response_only=True)],
    )
    def post(self, request):
        serializer = CartMergeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cart = merge_guest_items(user=request.user, guest_items=serializer.validated_data["items"])
        except CartError:
            return Response({"message": "Unable to update cart."}, status=status.HTTP_400_BAD_REQUEST)
        if cart is None:
            return Response({"items": []}, status=status.HTTP_200_OK)
        return Response(CartReadSerializer.from_cart(cart=cart).data, status=status.HTTP_200_OK)


class AdminCartFilterSet(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Cart.STATUS_CHOICES)
    user = filters.NumberFilter(field_name="user_id")

    class Meta:
        model = Cart
        fields = ["status", "user"]


def _clamp_limit(raw, *, default: int = 50, maximum: int = 200) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(1, min(value, maximum))


class AdminCartListView(generics.ListAPIView):
    """Recent carts for support staff, newest activity first."""

    permission_classes = [IsStoreAdmin]
    serializer_class = AdminCartSerializer
    filter_backends = [filters.DjangoFilterBackend]
    filterset_class = AdminCartFilterSet
    pagination_class = None
    throttle_scope = "cart"

    def get_queryset(self):
        return Cart.objects.select_related("user").order_by("-updated_at", "-id")

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        limit = _clamp_limit(request.query_params.get("limit"))
        data = self.get_serializer(queryset[:limit], many=True).data
        return Response({"carts": data})

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="List carts (admin)",
        parameters=[
            OpenApiParameter(name="status", description="Cart status filter", required=False, type=str),
            OpenApiParameter(name="user", description="Owner user id", required=False, type=int),
            OpenApiParameter(name="limit", description="1-200, default 50", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminCartDetailView(generics.RetrieveAPIView):
    permission_classes = [IsStoreAdmin]
    serializer_class = AdminCartSerializer
    throttle_scope = "cart"
    lookup_url_kwarg = "cart_id"

    def get_queryset(self):
        return Cart.objects.select_related("user")

    @extend_schema(tags=["Admin Endpoints"], summary="Get cart (admin)")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
