"""Admin cart inspection routes (v1)."""

from django.urls import path

from .views import AdminCartDetailView, AdminCartListView

app_name = "cart_admin"

urlpatterns = [
    path("", AdminCartListView.as_view(), name="admin-cart-list"),
    path("<int:cart_id>/", AdminCartDetailView.as_view(), name="admin-cart-detail"),
]
