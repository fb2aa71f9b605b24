"""Cart URL routes (v1)."""

from django.urls import path

from .views import CartDetailView, CartMergeView

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("merge/", CartMergeView.as_view(), name="cart-merge"),
]
