"""User model for storefront customers and back-office admins.

The ordering core only *references* users: it reads the role (for admin
operations), the active flag (inactive users cannot order) and the stored
default address (snapshotted into an order when no override is given).
"""

from __future__ import annotations

from typing import Dict, Optional

import uuid6
from django.contrib.auth.models import AbstractUser
from django.db import models


class UserRole(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    ADMIN = "admin", "Admin"


class User(AbstractUser):
    """Authenticated principal with role and default delivery address."""

    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CUSTOMER,
    )
    phone = models.CharField(max_length=20, blank=True, default="")
    street = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    zip_code = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        db_table = "users"
        ordering = ["-date_joined"]
        indexes = [
            models.Index(fields=["role"], name="users_role_idx"),
        ]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def default_address(self) -> Optional[Dict[str, str]]:
        """Return the stored address as an order snapshot, or ``None``.

        An address without a street is treated as absent.
        """
        if not self.street:
            return None
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "phone": self.phone,
        }

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
