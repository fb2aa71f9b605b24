"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import OrderDetailView, OrderListCreateView, OrderPaymentWebhookView, OrderStatusView

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("webhooks/payment/", OrderPaymentWebhookView.as_view(), name="order-webhook-payment"),
    path("<str:code>/", OrderDetailView.as_view(), name="order-detail"),
    path("<str:code>/status/", OrderStatusView.as_view(), name="order-status"),
]
