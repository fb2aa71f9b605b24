import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_register_creates_customer_with_normalized_email():
    client = APIClient()

    resp = client.post(
        "/api/v1/account/register/",
        {"email": " Ana@Example.com ", "password": "StrongPass123!", "first_name": "Ana", "city": "Medellín"},
        format="json",
    )

    assert resp.status_code == 201
    User = get_user_model()
    user = User.objects.get(email="ana@example.com")
    assert user.username == "ana@example.com"
    assert user.role == User.ROLE_CUSTOMER
    assert user.check_password("StrongPass123!")
    assert resp.data["city"] == "Medellín"


@pytest.mark.django_db
def test_register_duplicate_email_returns_message():
    User = get_user_model()
    User.objects.create_user(username="ana", email="ana@example.com", password="StrongPass123!")
    client = APIClient()

    resp = client.post(
        "/api/v1/account/register/",
        {"email": "ANA@example.com", "password": "StrongPass123!"},
        format="json",
    )

    assert resp.status_code == 400
    assert resp.json() == {"message": "email: Email is already registered."}


@pytest.mark.django_db
def test_register_rejects_weak_password():
    client = APIClient()

    resp = client.post("/api/v1/account/register/", {"email": "weak@example.com", "password": "123"}, format="json")

    assert resp.status_code == 400
    assert "message" in resp.json()
    assert not get_user_model().objects.filter(email="weak@example.com").exists()


@pytest.mark.django_db
def test_login_and_profile_pytest():
    User = get_user_model()
    user = User.objects.create_user(username="jdoe", email="jdoe@example.com", password="StrongPass123!")
    client = APIClient()

    resp = client.post(
        "/api/v1/auth/signin/",
        {"identifier": "JDOE@example.com", "password": "StrongPass123!"},
        format="json",
    )
    assert resp.status_code == 200
    access = resp.data["access"]

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    profile = client.get("/api/v1/account/profile/")
    assert profile.status_code == 200
    assert profile.data["email"] == user.email


@pytest.mark.django_db
def test_admin_role_grants_store_admin():
    User = get_user_model()
    admin = User.objects.create_user(username="boss", email="boss@example.com", password="x", role=User.ROLE_ADMIN)
    staff = User.objects.create_user(username="staff", email="staff@example.com", password="x", is_staff=True)
    customer = User.objects.create_user(username="c", email="c@example.com", password="x")

    assert admin.is_store_admin
    assert staff.is_store_admin
    assert not customer.is_store_admin
