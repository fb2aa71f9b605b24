"""Orders API endpoints.

Checkout, order history, admin status changes, the payment gateway webhook
and discount code validation. Errors are returned as `{message}`.
"""

import hmac
import logging

from django.conf import settings
from django.http import Http404
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from users.permissions import IsStoreAdmin

from .discounts import calculate_discount
from .selectors import get_order_by_code, get_order_for_user, list_orders_for_user
from .serializers import (
    DiscountValidateSerializer,
    OrderCreateSerializer,
    OrderDetailSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    PaymentWebhookSerializer,
)
from .services import (
    OrderCodeError,
    OrderTransitionError,
    OrderValidationError,
    assemble_order,
    cancel_order,
    pay_order,
    transition_order_status,
)

logger = logging.getLogger("storefront.orders")

MessageSerializer = inline_serializer(name="OrderMessageResponse", fields={"message": rf_serializers.CharField()})

ORDER_EXAMPLE = {
    "id": 42,
    "code": "MAC-3FA94C1B",
    "status": "pending",
    "subtotal": 760000,
    "shippingCost": 15000,
    "discount": 0,
    "discountCode": "",
    "total": 775000,
    "currency": "COP",
    "submittedAt": "2025-01-01T12:00:00Z",
    "customerName": "Ana Gómez",
    "customerEmail": "ana@example.com",
    "customerCity": "Medellín",
    "notes": "",
    "shippingOption": {
        "id": "medellin",
        "label": "Envío Medellín",
        "description": "Entrega en 24 horas",
        "price": 15000,
    },
    "paymentMethod": {"id": "contraentrega", "label": "Pago contraentrega", "description": ""},
    "items": [
        {
            "product": {
                "id": "plancha-secadora-2en1",
                "name": "Plancha secadora 2 en 1",
                "price": 380000,
                "currency": "COP",
                "images": ["/plancha.png"],
                "image": "/plancha.png",
                "imageUrl": "/plancha.png",
            },
            "quantity": 2,
            "unitPrice": 380000,
            "lineTotal": 760000,
        }
    ],
}


class OrderListCreateView(APIView):
    """List the authenticated user's orders or check out the active cart."""

    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "orders" if self.request.method == "GET" else "orders_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="Current user's orders, newest first.",
        parameters=[
            OpenApiParameter(name="limit", description="1-100, default 20", required=False, type=int),
        ],
        examples=[OpenApiExample("Orders", value={"orders": [ORDER_EXAMPLE]}, response_only=True)],
    )
    def get(self, request):
        orders = list_orders_for_user(user=request.user, limit=request.query_params.get("limit"))
        return Response({"orders": OrderSerializer(orders, many=True).data})

    @extend_schema(
        tags=["Orders"],
        summary="Create order",
        description=(
            "Creates a pending order from the active cart. `items` is only used when the user has no "
            "active cart. Shipping, payment and discount references are re-validated server-side."
        ),
        request=OrderCreateSerializer,
        responses={201: OrderSerializer, 400: MessageSerializer, 500: MessageSerializer},
        examples=[
            OpenApiExample(
                "Checkout",
                value={
                    "customer": {
                        "name": "Ana Gómez",
                        "email": "ana@example.com",
                        "phone": "3001234567",
                        "city": "Medellín",
                        "address": "Calle 10 # 43-12",
                    },
                    "shippingOptionId": "medellin",
                    "paymentMethodId": "contraentrega",
                },
                request_only=True,
            ),
            OpenApiExample("Created", value={"order": ORDER_EXAMPLE}, response_only=True),
        ],
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            order = assemble_order(
                user=request.user,
                customer=data["customer"],
                shipping_option_id=data.get("shippingOptionId"),
                payment_method_id=data.get("paymentMethodId"),
                discount_code=data.get("discountCode"),
                billing_address=data.get("billingAddress"),
                items=data.get("items"),
            )
        except OrderValidationError as exc:
            return Response({"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except OrderCodeError as exc:
            logger.error("order.code_exhausted", extra={"event": "order.code_exhausted", "user_id": request.user.id})
            return Response({"message": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"order": OrderSerializer(order).data}, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Retrieve one of the authenticated user's orders by code."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Get order detail", responses={200: OrderDetailSerializer})
    def get(self, request, code: str):
        order = get_order_for_user(user=request.user, code=code)
        if order is None:
            raise Http404
        return Response({"order": OrderDetailSerializer(order).data})


class OrderStatusView(APIView):
    """Move an order through its lifecycle (store admins only)."""

    permission_classes = [IsStoreAdmin]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Change order status",
        description="Allowed: pending → paid|cancelled, paid → shipped|cancelled. Same status is a no-op.",
        request=OrderStatusUpdateSerializer,
        responses={200: OrderDetailSerializer, 404: MessageSerializer, 409: MessageSerializer},
    )
    def post(self, request, code: str):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = get_order_by_code(code=code)
        if order is None:
            raise Http404
        try:
            order = transition_order_status(
                order=order,
                to_status=serializer.validated_data["status"],
                changed_by=request.user.email or request.user.get_username(),
                note=serializer.validated_data["note"],
            )
        except OrderTransitionError as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)
        order = get_order_by_code(code=code)
        return Response({"order": OrderDetailSerializer(order).data})


class OrderPaymentWebhookView(APIView):
    """Payment gateway notifications.

    Authenticated by the shared secret in `X-Webhook-Secret`. An approved
    payment whose amount matches marks the order as paid; declined or voided
    payments cancel a pending order; anything else is acknowledged.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_scope = "orders_write"

    APPROVED = {"APPROVED", "PAID", "SUCCEEDED"}
    FAILED = {"DECLINED", "VOIDED", "ERROR"}

    @extend_schema(
        tags=["Orders"],
        summary="Payment webhook",
        parameters=[
            OpenApiParameter(
                name="X-Webhook-Secret",
                location=OpenApiParameter.HEADER,
                required=True,
                description="Shared secret configured as PAYMENT_WEBHOOK_SECRET",
                type=str,
            )
        ],
        request=PaymentWebhookSerializer,
        responses={200: MessageSerializer, 400: MessageSerializer, 401: MessageSerializer, 404: MessageSerializer},
        examples=[
            OpenApiExample(
                "Approved",
                value={"reference": "MAC-3FA94C1B", "status": "APPROVED", "amount": 775000, "transactionId": "tx-1"},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        secret = getattr(settings, "PAYMENT_WEBHOOK_SECRET", "")
        provided = request.headers.get("X-Webhook-Secret", "")
        if not secret or not hmac.compare_digest(str(provided), str(secret)):
            logger.warning("order.webhook_rejected", extra={"event": "order.webhook_rejected"})
            return Response({"message": "Invalid webhook signature."}, status=status.HTTP_401_UNAUTHORIZED)

        serializer = PaymentWebhookSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = get_order_by_code(code=data["reference"])
        if order is None:
            raise Http404

        outcome = str(data["status"]).strip().upper()
        reference = data.get("transactionId") or ""
        logger.info(
            "order.webhook_received",
            extra={"event": "order.webhook_received", "code": order.code, "status": outcome},
        )
        if outcome in self.APPROVED:
            amount = data.get("amount")
            if amount is not None and amount != order.total_cents:
                return Response(
                    {"message": "Payment amount does not match the order total."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            try:
                pay_order(order=order, changed_by="payment-gateway", reference=reference)
            except OrderTransitionError as exc:
                return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)
            return Response({"message": "Payment recorded."})
        if outcome in self.FAILED and order.status == order.STATUS_PENDING:
            cancel_order(order=order, changed_by="payment-gateway", note=f"Payment {outcome.lower()}.")
            return Response({"message": "Order cancelled."})
        return Response({"message": "Notification acknowledged."})


class DiscountValidateView(APIView):
    """Preview a discount code against cart amounts."""

    permission_classes = [AllowAny]
    throttle_scope = "catalog"

    @extend_schema(
        tags=["Orders"],
        summary="Validate discount code",
        request=DiscountValidateSerializer,
        responses={200: None, 400: MessageSerializer},
        examples=[
            OpenApiExample("Request", value={"code": "MACLA10", "subtotal": 760000, "shipping": 15000}, request_only=True),
            OpenApiExample(
                "Valid",
                value={"code": "MACLA10", "label": "10% en tu compra", "discount": 76000, "shippingDiscount": 0},
                response_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = DiscountValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = calculate_discount(code=data["code"], subtotal_cents=data["subtotal"], shipping_cents=data["shipping"])
        if not result.valid:
            return Response({"message": result.reason}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "code": result.code,
                "label": result.label,
                "type": result.kind,
                "discount": result.discount_cents,
                "shippingDiscount": result.shipping_discount_cents,
                "total": result.total_cents,
            }
        )
