"""Shared enumerations and choices used across apps."""

from django.db import models


class ActiveInactive(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class UserRole(models.TextChoices):
    ADMIN = "admin", "Admin"
    MANAGER = "manager", "Manager"
    WAREHOUSE = "warehouse", "Warehouse staff"


class LocationType(models.TextChoices):
    AREA = "area", "Area"
    RACK = "rack", "Rack"
    SHELF = "shelf", "Shelf"
    BIN = "bin", "Bin"


class MovementType(models.TextChoices):
    RECEIPT = "receipt", "Receipt"
    DELIVERY = "delivery", "Delivery"
    TRANSFER = "transfer", "Transfer"
    ADJUSTMENT = "adjustment", "Adjustment"


class DocumentStatus(models.TextChoices):
    """Lifecycle statuses shared by receipts, deliveries, transfers and adjustments.

    Not every document kind uses every status; see ``movements.lifecycle``.
    """

    DRAFT = "draft", "Draft"
    WAITING = "waiting", "Waiting"
    PICKING = "picking", "Picking"
    PACKING = "packing", "Packing"
    READY = "ready", "Ready"
    DONE = "done", "Done"
    CANCELED = "canceled", "Canceled"


class AlertType(models.TextChoices):
    LOW_STOCK = "Low Stock", "Low Stock"
    OUT_OF_STOCK = "Out of Stock", "Out of Stock"
    CRITICAL_STOCK = "Critical Stock", "Critical Stock"
    REORDER_SUGGESTION = "Reorder Suggestion", "Reorder Suggestion"


class AlertSeverity(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"
    CRITICAL = "Critical", "Critical"


class AlertStatus(models.TextChoices):
    ACTIVE = "Active", "Active"
    ACKNOWLEDGED = "Acknowledged", "Acknowledged"
    RESOLVED = "Resolved", "Resolved"
