"""Movement documents: receipts, deliveries, transfers and adjustments.

Documents are created in draft, edited only while draft, and reach `done`
at most once through the validation services in `movements.services`,
which are the only code allowed to touch stock on their behalf.
"""

from decimal import Decimal

from common.choices import DocumentStatus
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class MovementDocument(TimeStampedModel):
    """Fields shared by every movement document.

    `number` is assigned right after the first save as
    ``<PREFIX>-<zero padded id>``.
    """

    KIND = ""
    NUMBER_PREFIX = ""

    STATUS_DRAFT = DocumentStatus.DRAFT
    STATUS_WAITING = DocumentStatus.WAITING
    STATUS_PICKING = DocumentStatus.PICKING
    STATUS_PACKING = DocumentStatus.PACKING
    STATUS_READY = DocumentStatus.READY
    STATUS_DONE = DocumentStatus.DONE
    STATUS_CANCELED = DocumentStatus.CANCELED
    STATUS_CHOICES = DocumentStatus.choices

    number = models.CharField(max_length=32, unique=True, null=True, blank=True, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="+", on_delete=models.PROTECT)
    canceled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.STATUS_DONE, self.STATUS_CANCELED)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.number or self.KIND} status={self.status}"


class Receipt(MovementDocument):
    KIND = "receipt"
    NUMBER_PREFIX = "REC"

    supplier = models.CharField(max_length=200)
    supplier_email = models.EmailField(blank=True)
    supplier_phone = models.CharField(max_length=32, blank=True)
    warehouse = models.ForeignKey("warehouses.Warehouse", related_name="receipts", on_delete=models.PROTECT)
    receipt_date = models.DateTimeField(default=timezone.now)
    expected_date = models.DateTimeField(null=True, blank=True)
    reference_number = models.CharField(max_length=100, blank=True)
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    validated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["warehouse", "status"], name="receipt_warehouse_status_idx"),
            models.Index(fields=["supplier"], name="receipt_supplier_idx"),
        ]


class ReceiptItem(models.Model):
    receipt = models.ForeignKey(Receipt, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("products.Product", related_name="+", on_delete=models.PROTECT)
    location = models.ForeignKey("warehouses.Location", related_name="+", on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    expected_quantity = models.PositiveIntegerField(null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    notes = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="receiptitem_quantity_positive", condition=models.Q(quantity__gt=0)),
            models.CheckConstraint(name="receiptitem_price_non_negative", condition=models.Q(unit_price__gte=0)),
        ]


class Delivery(MovementDocument):
    """Outbound shipment with a pick and pack sub-flow before validation."""

    KIND = "delivery"
    NUMBER_PREFIX = "DEL"

    customer = models.CharField(max_length=200)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=32, blank=True)
    shipping_address = models.TextField(blank=True)
    warehouse = models.ForeignKey("warehouses.Warehouse", related_name="deliveries", on_delete=models.PROTECT)
    scheduled_date = models.DateTimeField(null=True, blank=True)
    reference_number = models.CharField(max_length=100, blank=True)
    picker = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="picking_tasks", on_delete=models.SET_NULL
    )
    packer = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="packing_tasks", on_delete=models.SET_NULL
    )
    picked_at = models.DateTimeField(null=True, blank=True)
    packed_at = models.DateTimeField(null=True, blank=True)
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    validated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name_plural = "deliveries"
        indexes = [
            models.Index(fields=["warehouse", "status"], name="delivery_warehouse_status_idx"),
        ]

    @property
    def is_fully_packed(self) -> bool:
        items = list(self.items.all())
        return bool(items) and all(i.packed_quantity >= i.quantity for i in items)


class DeliveryItem(models.Model):
    delivery = models.ForeignKey(Delivery, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("products.Product", related_name="+", on_delete=models.PROTECT)
    location = models.ForeignKey("warehouses.Location", related_name="+", on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    picked_quantity = models.PositiveIntegerField(default=0)
    packed_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="deliveryitem_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]


class Transfer(MovementDocument):
    """Move stock from one location to another, possibly across warehouses."""

    KIND = "transfer"
    NUMBER_PREFIX = "TRF"

    source_location = models.ForeignKey("warehouses.Location", related_name="+", on_delete=models.PROTECT)
    destination_location = models.ForeignKey("warehouses.Location", related_name="+", on_delete=models.PROTECT)
    scheduled_date = models.DateTimeField(null=True, blank=True)
    reference_number = models.CharField(max_length=100, blank=True)
    executed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    executed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                name="transfer_distinct_locations",
                condition=~models.Q(source_location=models.F("destination_location")),
            ),
        ]

    @property
    def source_warehouse_id(self):
        return self.source_location.warehouse_id

    @property
    def destination_warehouse_id(self):
        return self.destination_location.warehouse_id


class TransferItem(models.Model):
    transfer = models.ForeignKey(Transfer, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("products.Product", related_name="+", on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="transferitem_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]


class Adjustment(MovementDocument):
    """Physical count of one product at one location.

    `system_quantity` is the stock observed when the count was recorded;
    `difference` is re-derived against current stock at validation.
    """

    KIND = "adjustment"
    NUMBER_PREFIX = "ADJ"

    product = models.ForeignKey("products.Product", related_name="adjustments", on_delete=models.PROTECT)
    location = models.ForeignKey("warehouses.Location", related_name="adjustments", on_delete=models.PROTECT)
    system_quantity = models.PositiveIntegerField(default=0)
    counted_quantity = models.PositiveIntegerField()
    difference = models.IntegerField(default=0)
    reason = models.CharField(max_length=255)
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="+", on_delete=models.PROTECT
    )
    validated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    @property
    def warehouse_id(self):
        return self.location.warehouse_id


# EOF
