"""Inventory services: the stock map accessor/mutator and the ledger writer.

Every stock change goes through `post_movement`, which computes the new
quantity once with `apply_movement` and threads that single result into both
the stock write and the ledger row. Callers run inside `transaction.atomic`
and lock the product row first (`lock_product`), so concurrent movements on
the same product are serialized and a failure leaves no partial writes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from common.exceptions import InsufficientStockError, InventoryError, NotFoundError
from django.db import transaction
from django.db.models import Sum
from products.models import Product
from warehouses.models import Location

from .models import StockLedgerEntry, StockLevel

logger = logging.getLogger("stockmaster.inventory")


@dataclass(frozen=True)
class MovementResult:
    quantity_before: int
    quantity_after: int
    quantity: int


def apply_movement(current: int, delta: int, *, label: str = "") -> MovementResult:
    """Apply a signed delta to a stock quantity.

    Pure function shared by every movement type. Raises InsufficientStockError
    when the result would be negative.
    """
    current = int(current)
    delta = int(delta)
    after = current + delta
    if after < 0:
        where = f" for {label}" if label else ""
        raise InsufficientStockError(f"Insufficient stock{where}: available {current}, requested {abs(delta)}")
    return MovementResult(quantity_before=current, quantity_after=after, quantity=delta)


def lock_product(product_id: int) -> Product:
    """Fetch a product with a row lock for the rest of the current transaction."""
    try:
        return Product.objects.select_for_update().get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFoundError(f"Product {product_id} not found")


def get_stock(product: Product, location: Location) -> int:
    quantity = (
        StockLevel.objects.filter(product_id=product.pk, location_id=location.pk)
        .values_list("quantity", flat=True)
        .first()
    )
    return int(quantity or 0)


@transaction.atomic
def set_stock(product: Product, location: Location, quantity: int) -> int:
    """Write the stock at (product, location) and recompute `product.total_stock`.

    Returns the new total. The map row and the total are saved in the same
    transaction; negative quantities are rejected.
    """
    quantity = int(quantity)
    if quantity < 0:
        raise InventoryError("Stock at a location cannot be negative")
    StockLevel.objects.update_or_create(product=product, location=location, defaults={"quantity": quantity})
    total = StockLevel.objects.filter(product=product).aggregate(total=Sum("quantity"))["total"] or 0
    product.total_stock = int(total)
    product.save(update_fields=["total_stock", "updated_at"])
    return product.total_stock


def record_ledger_entry(
    *,
    movement_type: str,
    document,
    product: Product,
    location: Location,
    quantity: int,
    performed_by,
    quantity_before: Optional[int] = None,
    quantity_after: Optional[int] = None,
    source_location: Optional[Location] = None,
    destination_location: Optional[Location] = None,
    reference: str = "",
    notes: str = "",
) -> StockLedgerEntry:
    """Append one immutable ledger row.

    `document` is any movement document exposing `id` and `number`. When
    before/after are omitted they are derived from the current stock through
    `apply_movement`, the same computation the movement operations use.
    """
    if quantity_before is None or quantity_after is None:
        result = apply_movement(get_stock(product, location), quantity)
        quantity_before, quantity_after = result.quantity_before, result.quantity_after
    if quantity_after != quantity_before + quantity:
        raise InventoryError("Ledger quantities do not reconcile")

    entry = StockLedgerEntry.objects.create(
        movement_type=movement_type,
        document_id=document.id,
        document_number=document.number,
        product=product,
        warehouse_id=location.warehouse_id,
        location=location,
        quantity=quantity,
        quantity_before=quantity_before,
        quantity_after=quantity_after,
        source_warehouse_id=source_location.warehouse_id if source_location else None,
        source_location=source_location,
        destination_warehouse_id=destination_location.warehouse_id if destination_location else None,
        destination_location=destination_location,
        reference=reference or "",
        notes=notes or "",
        performed_by=performed_by,
    )
    logger.info(
        "stock_movement_recorded",
        extra={
            "event": "stock_movement_recorded",
            "movement_type": movement_type,
            "document_number": document.number,
            "product_id": product.id,
            "location_id": location.id,
            "quantity": quantity,
            "quantity_before": quantity_before,
            "quantity_after": quantity_after,
        },
    )
    return entry


@transaction.atomic
def post_movement(
    *,
    movement_type: str,
    document,
    product: Product,
    location: Location,
    delta: int,
    performed_by,
    source_location: Optional[Location] = None,
    destination_location: Optional[Location] = None,
    reference: str = "",
    notes: str = "",
) -> StockLedgerEntry:
    """Change stock at (product, location) by `delta` and write its ledger row.

    Reads the current persisted stock, so quantities captured earlier on the
    document never drive the arithmetic.
    """
    label = f"{product.name} ({product.sku}) at location {location.code}"
    result = apply_movement(get_stock(product, location), delta, label=label)
    set_stock(product, location, result.quantity_after)
    return record_ledger_entry(
        movement_type=movement_type,
        document=document,
        product=product,
        location=location,
        quantity=result.quantity,
        quantity_before=result.quantity_before,
        quantity_after=result.quantity_after,
        performed_by=performed_by,
        source_location=source_location,
        destination_location=destination_location,
        reference=reference,
        notes=notes,
    )


# EOF
