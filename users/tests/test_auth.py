from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase


class AuthFlowTests(APITestCase):
    def setUp(self):
        self.User = get_user_model()
        self.password = "StrongPass123!"
        self.user = self.User.objects.create_user(
            username="jdoe",
            email="jdoe@example.com",
            password=self.password,
            first_name="John",
            last_name="Doe",
        )

    def test_login_returns_tokens_and_profile(self):
        resp = self.client.post(
            "/api/v1/auth/signin/",
            {"identifier": self.user.email, "password": self.password},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertEqual(resp.data["user"]["email"], self.user.email)
        self.assertEqual(resp.data["user"]["role"], "customer")

    def test_login_with_wrong_password_is_unauthorized(self):
        resp = self.client.post(
            "/api/v1/auth/signin/",
            {"identifier": self.user.email, "password": "nope"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json(), {"message": "Invalid credentials."})

    def test_profile_requires_auth(self):
        resp = self.client.get("/api/v1/account/profile/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json(), {"message": "Unauthorized."})

    def test_profile_with_access_token(self):
        signin = self.client.post(
            "/api/v1/auth/signin/",
            {"identifier": self.user.email, "password": self.password},
            format="json",
        )
        access = signin.data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        resp = self.client.get("/api/v1/account/profile/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["email"], self.user.email)

    def test_garbage_token_is_unauthorized(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        resp = self.client.get("/api/v1/account/profile/")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json(), {"message": "Unauthorized."})

    def test_deactivated_account_is_forbidden(self):
        signin = self.client.post(
            "/api/v1/auth/signin/",
            {"identifier": self.user.email, "password": self.password},
            format="json",
        )
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {signin.data['access']}")
        resp = self.client.get("/api/v1/account/profile/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json(), {"message": "Account is deactivated."})

    def test_refresh_rotates_tokens(self):
        signin = self.client.post(
            "/api/v1/auth/signin/",
            {"identifier": self.user.email, "password": self.password},
            format="json",
        )
        resp = self.client.post("/api/v1/auth/refresh/", {"refresh": signin.data["refresh"]}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn("access", resp.data)

    def test_login_with_phone_returns_tokens(self):
        self.user.phone = "3001234567"
        self.user.save(update_fields=["phone"])
        resp = self.client.post(
            "/api/v1/auth/signin/",
            {"identifier": self.user.phone, "password": self.password},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn("access", resp.data)
