"""User models for authentication and account management.

This module defines the custom `User` model which extends Django's
`AbstractUser` with a unique normalized email, a storefront role and the
default contact details offered to the checkout form.
"""

from common.choices import UserRole
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Storefront account.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - role: `customer` or `admin`; only changed through the Django admin.
    - phone/city/address: default contact details for checkout.
    """

    ROLE_CUSTOMER = UserRole.CUSTOMER
    ROLE_ADMIN = UserRole.ADMIN

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=UserRole.choices, default=ROLE_CUSTOMER, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    city = models.CharField(max_length=120, blank=True)
    address = models.CharField(max_length=255, blank=True)

    def save(self, *args, **kwargs):
        """Normalize email and phone before persisting.

        Email is stored lowercase without surrounding whitespace so
        uniqueness checks are reliable.
        """
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.phone.strip()
        super().save(*args, **kwargs)

    @property
    def is_store_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN or self.is_staff
