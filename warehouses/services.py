"""Warehouse services: guarded deletion of warehouses and locations."""

import logging

from common.exceptions import InvalidStateError
from django.db import transaction
from django.db.models import ProtectedError
from inventory.models import StockLedgerEntry, StockLevel

from .models import Location, Warehouse

logger = logging.getLogger("stockmaster.inventory")


@transaction.atomic
def delete_location(*, location: Location) -> None:
    """Delete a location that holds no stock and has no ledger history."""
    if StockLevel.objects.filter(location=location, quantity__gt=0).exists():
        raise InvalidStateError("Location still holds stock.")
    if StockLedgerEntry.objects.filter(location=location).exists():
        raise InvalidStateError("Location has stock history and cannot be deleted.")
    StockLevel.objects.filter(location=location).delete()
    location_id = location.id
    try:
        location.delete()
    except ProtectedError:
        raise InvalidStateError("Location is referenced by movement documents.")
    logger.info("location_deleted", extra={"event": "location_deleted", "location_id": location_id})


@transaction.atomic
def delete_warehouse(*, warehouse: Warehouse) -> None:
    """Delete a warehouse without locations; others must be deactivated instead."""
    if Location.objects.filter(warehouse=warehouse).exists():
        raise InvalidStateError("Warehouse has locations; deactivate it instead.")
    warehouse_id = warehouse.id
    try:
        warehouse.delete()
    except ProtectedError:
        raise InvalidStateError("Warehouse is referenced by movement documents; deactivate it instead.")
    logger.info("warehouse_deleted", extra={"event": "warehouse_deleted", "warehouse_id": warehouse_id})


# EOF
