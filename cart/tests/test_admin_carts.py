import pytest
from cart.models import Cart
from cart.tests.factories import CartFactory, CartItemFactory, UserFactory
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient


def _admin_client():
    admin = UserFactory(role=get_user_model().ROLE_ADMIN)
    client = APIClient()
    client.force_authenticate(user=admin)
    return client


@pytest.mark.django_db
def test_customers_cannot_list_carts():
    client = APIClient()
    client.force_authenticate(user=UserFactory())

    resp = client.get("/api/v1/admin/carts/")

    assert resp.status_code == 403
    assert resp.json() == {"message": "Admin access required."}


@pytest.mark.django_db
def test_admin_lists_carts_with_owner_and_filters_by_status():
    active = CartFactory()
    CartItemFactory(cart=active, quantity=2)
    CartFactory(status=Cart.STATUS_SUBMITTED)
    client = _admin_client()

    resp = client.get("/api/v1/admin/carts/", {"status": "active"})

    assert resp.status_code == 200
    carts = resp.json()["carts"]
    assert [c["cartId"] for c in carts] == [active.id]
    assert carts[0]["userEmail"] == active.user.email
    assert len(carts[0]["items"]) == 1


@pytest.mark.django_db
def test_admin_cart_list_limit_is_clamped():
    for _ in range(3):
        CartFactory()
    client = _admin_client()

    assert len(client.get("/api/v1/admin/carts/", {"limit": 2}).json()["carts"]) == 2
    assert len(client.get("/api/v1/admin/carts/", {"limit": 0}).json()["carts"]) == 1
    assert len(client.get("/api/v1/admin/carts/", {"limit": "x"}).json()["carts"]) == 3


@pytest.mark.django_db
def test_admin_cart_detail_and_missing_cart():
    cart = CartFactory()
    client = _admin_client()

    assert client.get(f"/api/v1/admin/carts/{cart.id}/").json()["userId"] == cart.user_id
    missing = client.get("/api/v1/admin/carts/999999/")
    assert missing.status_code == 404
    assert "message" in missing.json()
