"""URL routes for the catalog app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import PaymentMethodListView, ProductViewSet, ShippingOptionListView

router = SimpleRouter()
router.register(r"products", ProductViewSet, basename="product")

urlpatterns = [
    path("", include(router.urls)),
    path("shipping-options/", ShippingOptionListView.as_view(), name="shipping-option-list"),
    path("payment-methods/", PaymentMethodListView.as_view(), name="payment-method-list"),
]
