"""Serializers for user profile, registration, and sign-in.

- UserMeSerializer: read-only profile data for the authenticated user.
- RegistrationSerializer: creates customer accounts with Django's password
  validators and unique email enforcement.
- EmailOrPhoneTokenObtainPairSerializer: obtain JWTs using email or phone.
"""

from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer returning basic profile fields for the current user."""

    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "last_name", "role", "phone", "city", "address"]
        read_only_fields = fields


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to register a new customer.

    `username` defaults to the email. New accounts always get the
    customer role.
    """

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    city = serializers.CharField(max_length=120, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_email(self, value: str) -> str:
        """Normalize and ensure the email is unique (case-insensitive)."""
        value = value.strip().lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate(self, attrs):
        username = (attrs.get("username") or "").strip() or attrs["email"]
        if User.objects.filter(username__iexact=username).exists():
            raise serializers.ValidationError({"username": "Username is already taken."})
        attrs["username"] = username

        from django.contrib.auth.password_validation import validate_password

        validate_password(attrs["password"], user=User(username=username, email=attrs["email"]))
        return attrs

    def create(self, validated_data):
        """Create a new user using secure password hashing."""
        password = validated_data.pop("password")
        user = User(role=User.ROLE_CUSTOMER, **validated_data)
        user.set_password(password)
        user.save()
        return user


class EmailOrPhoneTokenObtainPairSerializer(serializers.Serializer):
    """Obtain JWTs by authenticating with either email or phone.

    Accepts a single `identifier` field which may be an email address
    (case-insensitive) or a phone number, and a `password`.
    Returns `access` and `refresh` tokens plus the user profile.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("identifier") or "").strip()
        password = attrs.get("password") or ""

        if not identifier or not password:
            raise serializers.ValidationError({"detail": "identifier and password are required."})

        lookup = {"email": identifier.lower()} if "@" in identifier else {"phone": identifier}
        user = User.objects.filter(**lookup).first()

        if not user or not user.check_password(password) or not user.is_active:
            raise AuthenticationFailed("Invalid credentials.", code="invalid_credentials")

        refresh = RefreshToken.for_user(user)
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
            "user": UserMeSerializer(user).data,
        }
