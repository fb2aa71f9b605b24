"""URL routes for discount code validation (v1)."""

from django.urls import path

from .views import DiscountValidateView

app_name = "discounts"

urlpatterns = [
    path("validate/", DiscountValidateView.as_view(), name="discount-validate"),
]
