"""Inventory models: per-location stock and the append-only stock ledger.

`StockLevel` rows form a product's stock map: one non-negative quantity per
(product, location); a missing row means zero. `StockLedgerEntry` rows are
the immutable audit trail of every change to a stock level.
"""

from common.choices import MovementType
from django.conf import settings
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StockLevel(TimeStampedModel):
    product = models.ForeignKey("products.Product", related_name="stock_levels", on_delete=models.PROTECT)
    location = models.ForeignKey("warehouses.Location", related_name="stock_levels", on_delete=models.PROTECT)
    quantity = models.IntegerField(default=0)

    class Meta:
        ordering = ["product_id", "location_id"]
        constraints = [
            models.UniqueConstraint(fields=["product", "location"], name="unique_stocklevel_per_product_location"),
            models.CheckConstraint(name="stocklevel_non_negative", condition=models.Q(quantity__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"StockLevel<{self.product_id}@{self.location_id}> q={self.quantity}"


class LedgerImmutableError(Exception):
    pass


class StockLedgerEntry(models.Model):
    TYPE_RECEIPT = MovementType.RECEIPT
    TYPE_DELIVERY = MovementType.DELIVERY
    TYPE_TRANSFER = MovementType.TRANSFER
    TYPE_ADJUSTMENT = MovementType.ADJUSTMENT
    TYPE_CHOICES = MovementType.choices

    movement_type = models.CharField(max_length=16, choices=TYPE_CHOICES, db_index=True)
    document_id = models.PositiveBigIntegerField(db_index=True)
    document_number = models.CharField(max_length=32, db_index=True)
    product = models.ForeignKey("products.Product", related_name="ledger_entries", on_delete=models.PROTECT)
    warehouse = models.ForeignKey("warehouses.Warehouse", related_name="ledger_entries", on_delete=models.PROTECT)
    location = models.ForeignKey("warehouses.Location", related_name="ledger_entries", on_delete=models.PROTECT)
    quantity = models.IntegerField()  # signed: +increase, -decrease
    quantity_before = models.IntegerField()
    quantity_after = models.IntegerField()
    source_warehouse = models.ForeignKey(
        "warehouses.Warehouse", null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    source_location = models.ForeignKey(
        "warehouses.Location", null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    destination_warehouse = models.ForeignKey(
        "warehouses.Warehouse", null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    destination_location = models.ForeignKey(
        "warehouses.Location", null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    reference = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    performed_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="ledger_entries", on_delete=models.PROTECT)
    movement_date = models.DateTimeField(default=timezone.now, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-movement_date", "-id"]
        constraints = [
            models.CheckConstraint(
                name="ledger_quantity_reconciles",
                condition=models.Q(quantity_after=models.F("quantity_before") + models.F("quantity")),
            ),
            models.CheckConstraint(name="ledger_before_non_negative", condition=models.Q(quantity_before__gte=0)),
            models.CheckConstraint(name="ledger_after_non_negative", condition=models.Q(quantity_after__gte=0)),
        ]
        indexes = [
            models.Index(fields=["product", "movement_date"], name="ledger_product_date_idx"),
            models.Index(fields=["warehouse", "movement_date"], name="ledger_warehouse_date_idx"),
            models.Index(fields=["movement_type", "document_id"], name="ledger_type_document_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise LedgerImmutableError("Stock ledger entries cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise LedgerImmutableError("Stock ledger entries cannot be deleted")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.movement_type} {self.document_number} {self.quantity:+d} @ {self.location_id}"


# EOF
