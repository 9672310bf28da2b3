"""User models for authentication and role-based access.

This module defines the custom `User` model which extends Django's
`AbstractUser` with a unique normalized email, an inventory role and an
optional warehouse assignment for warehouse staff.
"""

from common.choices import UserRole
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user with unique email, role and warehouse assignment.

    Fields:
    - email: the primary email, unique at the database level (normalized).
    - name: display name shown on documents and ledger rows.
    - role: admin, manager or warehouse staff.
    - assigned_warehouse: the single warehouse a warehouse-role user may act on.
    """

    ROLE_ADMIN = UserRole.ADMIN
    ROLE_MANAGER = UserRole.MANAGER
    ROLE_WAREHOUSE = UserRole.WAREHOUSE
    ROLE_CHOICES = UserRole.choices

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_WAREHOUSE, db_index=True)
    assigned_warehouse = models.ForeignKey(
        "warehouses.Warehouse",
        null=True,
        blank=True,
        related_name="staff",
        on_delete=models.SET_NULL,
    )

    def save(self, *args, **kwargs):
        """Normalize email and persist.

        Stores `email` lowercase without surrounding whitespace so uniqueness
        checks are reliable.
        """
        if self.email:
            self.email = self.email.strip().lower()
        if self.name:
            self.name = self.name.strip()
        super().save(*args, **kwargs)

    @property
    def is_warehouse_staff(self) -> bool:
        return self.role == self.ROLE_WAREHOUSE

    class Meta:
        indexes = [
            models.Index(fields=["role", "is_active"], name="user_role_active_idx"),
        ]
