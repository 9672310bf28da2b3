"""Products app models.

A product carries identity metadata plus a denormalized `total_stock`.
Per-location quantities live in `inventory.StockLevel`; `total_stock` is
only ever written by `inventory.services.set_stock`.
"""

from common.choices import ActiveInactive
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


def default_reorder_level() -> int:
    return getattr(settings, "PRODUCT_DEFAULT_REORDER_LEVEL", 5)


def default_reorder_quantity() -> int:
    return getattr(settings, "PRODUCT_DEFAULT_REORDER_QUANTITY", 10)


class Product(TimeStampedModel):
    """Stock-keeping unit tracked across warehouse locations."""

    STATUS_ACTIVE = ActiveInactive.ACTIVE
    STATUS_INACTIVE = ActiveInactive.INACTIVE
    STATUS_CHOICES = ActiveInactive.choices

    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, unique=True)
    category = models.CharField(max_length=120, db_index=True)
    uom = models.CharField(max_length=32, help_text="Unit of measure label, e.g. pcs, kg, box")
    description = models.TextField(blank=True)
    total_stock = models.IntegerField(default=0)
    reorder_level = models.PositiveIntegerField(default=default_reorder_level)
    reorder_quantity = models.PositiveIntegerField(default=default_reorder_quantity)
    max_stock = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="product_total_stock_non_negative", condition=models.Q(total_stock__gte=0)),
        ]
        indexes = [
            models.Index(fields=["status", "category"], name="product_status_category_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_low_stock(self) -> bool:
        return self.total_stock < self.reorder_level

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.sku} {self.name}"


# EOF
