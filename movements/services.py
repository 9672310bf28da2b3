"""Movement services: create, edit, advance and validate documents.

Validation runs in one transaction: the document row and every touched
product row are locked, stock is re-read from the database, and each line
goes through `inventory.services.post_movement`. Any error rolls the whole
document back, so no partial stock writes survive.
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from common.choices import DocumentStatus, MovementType
from common.exceptions import InsufficientStockError, InventoryError, NotFoundError
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from inventory.services import get_stock, post_movement
from products.models import Product
from users.permissions import ensure_warehouse_access
from warehouses.models import Location

from .lifecycle import check_transition, ensure_editable, ensure_open
from .models import Adjustment, Delivery, DeliveryItem, Receipt, ReceiptItem, Transfer, TransferItem

logger = logging.getLogger("stockmaster.movements")

# Statuses a caller may request directly; the rest have dedicated operations.
MANUAL_STATUSES = {
    "receipt": {DocumentStatus.WAITING, DocumentStatus.READY},
    "delivery": {DocumentStatus.WAITING},
    "transfer": {DocumentStatus.WAITING, DocumentStatus.READY},
    "adjustment": set(),
}


def document_warehouse_ids(document) -> tuple:
    if isinstance(document, Transfer):
        return (document.source_location.warehouse_id, document.destination_location.warehouse_id)
    if isinstance(document, Adjustment):
        return (document.location.warehouse_id,)
    return (document.warehouse_id,)


def _lock(document):
    model = type(document)
    try:
        return model.objects.select_for_update().get(pk=document.pk)
    except model.DoesNotExist:
        raise NotFoundError(f"{model.KIND.capitalize()} not found")


def _lock_products(product_ids: Iterable[int]) -> dict:
    ids = sorted(set(product_ids))
    products = {p.pk: p for p in Product.objects.select_for_update().filter(pk__in=ids).order_by("pk")}
    missing = [pid for pid in ids if pid not in products]
    if missing:
        raise NotFoundError(f"Product {missing[0]} not found")
    return products


def _assign_number(document) -> None:
    padding = getattr(settings, "DOCUMENT_NUMBER_PADDING", 6)
    document.number = f"{document.NUMBER_PREFIX}-{int(document.id):0{padding}d}"
    document.save(update_fields=["number"])


def _log_created(document, user) -> None:
    logger.info(
        "document_created",
        extra={
            "event": "document_created",
            "kind": document.KIND,
            "document_id": document.id,
            "document_number": document.number,
            "user_id": getattr(user, "id", None),
        },
    )


def _set_status(document, target: str, *, user, **stamps) -> None:
    """Move `document` to `target` after checking the allow-list, saving `stamps` too."""
    prev = document.status
    check_transition(document.KIND, prev, target)
    document.status = target
    for field, value in stamps.items():
        setattr(document, field, value)
    document.save(update_fields=["status", "updated_at", *stamps.keys()])
    if prev != target:
        logger.info(
            "document_status_changed",
            extra={
                "event": "document_status_changed",
                "kind": document.KIND,
                "document_id": document.id,
                "document_number": document.number,
                "status_from": prev,
                "status_to": target,
                "user_id": getattr(user, "id", None),
            },
        )


def _check_location(location: Location, warehouse_id) -> None:
    if location.warehouse_id != warehouse_id:
        raise NotFoundError(f"Location {location.code} not found in the document's warehouse")


def _check_items(items: list) -> None:
    if not items:
        raise InventoryError("At least one item is required")


# Receipts


@transaction.atomic
def create_receipt(*, user, warehouse, items: list, **fields) -> Receipt:
    ensure_warehouse_access(user, warehouse.pk)
    _check_items(items)
    receipt = Receipt.objects.create(created_by=user, warehouse=warehouse, **fields)
    _replace_receipt_items(receipt, items)
    _assign_number(receipt)
    _log_created(receipt, user)
    return receipt


def _replace_receipt_items(receipt: Receipt, items: list) -> None:
    receipt.items.all().delete()
    for item in items:
        _check_location(item["location"], receipt.warehouse_id)
        ReceiptItem.objects.create(receipt=receipt, **item)


@transaction.atomic
def update_receipt(*, receipt: Receipt, user, items: Optional[list] = None, **fields) -> Receipt:
    receipt = _lock(receipt)
    ensure_warehouse_access(user, receipt.warehouse_id)
    ensure_editable(receipt.KIND, receipt.status)
    if "warehouse" in fields:
        ensure_warehouse_access(user, fields["warehouse"].pk)
    for field, value in fields.items():
        setattr(receipt, field, value)
    receipt.save()
    if items is not None:
        _check_items(items)
        _replace_receipt_items(receipt, items)
    elif "warehouse" in fields:
        for item in receipt.items.select_related("location"):
            _check_location(item.location, receipt.warehouse_id)
    return receipt


@transaction.atomic
def validate_receipt(*, receipt: Receipt, user) -> Receipt:
    """Add every line's quantity to stock at its location and mark the receipt done."""
    receipt = _lock(receipt)
    ensure_warehouse_access(user, receipt.warehouse_id)
    check_transition(receipt.KIND, receipt.status, DocumentStatus.DONE)
    items = list(receipt.items.select_related("location").order_by("id"))
    _check_items(items)
    products = _lock_products(i.product_id for i in items)
    for item in items:
        _check_location(item.location, receipt.warehouse_id)
        post_movement(
            movement_type=MovementType.RECEIPT,
            document=receipt,
            product=products[item.product_id],
            location=item.location,
            delta=item.quantity,
            performed_by=user,
            reference=receipt.reference_number,
            notes=item.notes,
        )
    _set_status(receipt, DocumentStatus.DONE, user=user, validated_by=user, validated_at=timezone.now())
    return receipt


# Deliveries


@transaction.atomic
def create_delivery(*, user, warehouse, items: list, **fields) -> Delivery:
    ensure_warehouse_access(user, warehouse.pk)
    _check_items(items)
    delivery = Delivery.objects.create(created_by=user, warehouse=warehouse, **fields)
    _replace_delivery_items(delivery, items)
    _assign_number(delivery)
    _log_created(delivery, user)
    return delivery


def _replace_delivery_items(delivery: Delivery, items: list) -> None:
    delivery.items.all().delete()
    for item in items:
        _check_location(item["location"], delivery.warehouse_id)
        DeliveryItem.objects.create(delivery=delivery, **item)


@transaction.atomic
def update_delivery(*, delivery: Delivery, user, items: Optional[list] = None, **fields) -> Delivery:
    delivery = _lock(delivery)
    ensure_warehouse_access(user, delivery.warehouse_id)
    ensure_editable(delivery.KIND, delivery.status)
    if "warehouse" in fields:
        ensure_warehouse_access(user, fields["warehouse"].pk)
    for field, value in fields.items():
        setattr(delivery, field, value)
    delivery.save()
    if items is not None:
        _check_items(items)
        _replace_delivery_items(delivery, items)
    elif "warehouse" in fields:
        for item in delivery.items.select_related("location"):
            _check_location(item.location, delivery.warehouse_id)
    return delivery


def _check_assignee(delivery: Delivery, assignee, role: str) -> None:
    if not assignee.is_active:
        raise InventoryError(f"Cannot assign an inactive user as {role}")
    if assignee.is_warehouse_staff and assignee.assigned_warehouse_id != delivery.warehouse_id:
        raise InventoryError(f"The {role} must be assigned to warehouse {delivery.warehouse.code}")


@transaction.atomic
def assign_picker(*, delivery: Delivery, picker, user) -> Delivery:
    delivery = _lock(delivery)
    ensure_warehouse_access(user, delivery.warehouse_id)
    ensure_open(delivery.KIND, delivery.status)
    _check_assignee(delivery, picker, "picker")
    delivery.picker = picker
    delivery.save(update_fields=["picker", "updated_at"])
    logger.info(
        "delivery_picker_assigned",
        extra={"event": "delivery_picker_assigned", "document_id": delivery.id, "picker_id": picker.id},
    )
    return delivery


@transaction.atomic
def assign_packer(*, delivery: Delivery, packer, user) -> Delivery:
    delivery = _lock(delivery)
    ensure_warehouse_access(user, delivery.warehouse_id)
    ensure_open(delivery.KIND, delivery.status)
    _check_assignee(delivery, packer, "packer")
    delivery.packer = packer
    delivery.save(update_fields=["packer", "updated_at"])
    logger.info(
        "delivery_packer_assigned",
        extra={"event": "delivery_packer_assigned", "document_id": delivery.id, "packer_id": packer.id},
    )
    return delivery


def _line_quantities(delivery: Delivery, lines: Optional[list], field: str) -> dict:
    """Map item id to the quantity to record.

    Each line carries `item_id` plus `field` (`picked_quantity` or
    `packed_quantity`) or the generic `quantity`. An empty or missing `lines`
    means every item at its full requested quantity.
    """
    items = {i.id: i for i in delivery.items.all()}
    if not lines:
        return {item_id: item.quantity for item_id, item in items.items()}
    result = {}
    for line in lines:
        item_id = int(line["item_id"])
        if item_id not in items:
            raise NotFoundError(f"Delivery item {item_id} not found")
        quantity = line.get(field)
        if quantity is None:
            quantity = line.get("quantity")
        if quantity is None:
            raise InventoryError(f"Line for delivery item {item_id} needs {field} or quantity")
        quantity = int(quantity)
        if quantity < 0:
            raise InventoryError("Quantities cannot be negative")
        result[item_id] = quantity
    return result


@transaction.atomic
def pick_delivery(*, delivery: Delivery, user, lines: Optional[list] = None) -> Delivery:
    delivery = _lock(delivery)
    ensure_warehouse_access(user, delivery.warehouse_id)
    check_transition(delivery.KIND, delivery.status, DocumentStatus.PICKING)
    for item_id, quantity in _line_quantities(delivery, lines, "picked_quantity").items():
        DeliveryItem.objects.filter(pk=item_id).update(picked_quantity=quantity)
    stamps = {"picked_at": timezone.now()}
    if delivery.picker_id is None:
        stamps["picker"] = user
    _set_status(delivery, DocumentStatus.PICKING, user=user, **stamps)
    return delivery


@transaction.atomic
def pack_delivery(*, delivery: Delivery, user, lines: Optional[list] = None) -> Delivery:
    """Record packed quantities; the delivery becomes ready once every line is fully packed."""
    delivery = _lock(delivery)
    ensure_warehouse_access(user, delivery.warehouse_id)
    check_transition(delivery.KIND, delivery.status, DocumentStatus.PACKING)
    for item_id, quantity in _line_quantities(delivery, lines, "packed_quantity").items():
        DeliveryItem.objects.filter(pk=item_id).update(packed_quantity=quantity)
    stamps = {"packed_at": timezone.now()}
    if delivery.packer_id is None:
        stamps["packer"] = user
    _set_status(delivery, DocumentStatus.PACKING, user=user, **stamps)
    if delivery.is_fully_packed:
        _set_status(delivery, DocumentStatus.READY, user=user)
    return delivery


def _ensure_available(demand: dict, products: dict, locations: dict) -> None:
    """Check cumulative demand per (product, location) against current stock."""
    for (product_id, location_id), required in demand.items():
        product = products[product_id]
        location = locations[location_id]
        available = get_stock(product, location)
        if available < required:
            raise InsufficientStockError(
                f"Insufficient stock for {product.name} ({product.sku}) at location {location.code}: "
                f"available {available}, requested {required}"
            )


@transaction.atomic
def validate_delivery(*, delivery: Delivery, user) -> Delivery:
    """Remove every line's quantity from stock and mark the delivery done.

    All lines are checked against current stock before anything is written.
    """
    delivery = _lock(delivery)
    ensure_warehouse_access(user, delivery.warehouse_id)
    check_transition(delivery.KIND, delivery.status, DocumentStatus.DONE)
    items = list(delivery.items.select_related("location").order_by("id"))
    _check_items(items)
    products = _lock_products(i.product_id for i in items)

    demand = defaultdict(int)
    locations = {}
    for item in items:
        _check_location(item.location, delivery.warehouse_id)
        demand[(item.product_id, item.location_id)] += item.quantity
        locations[item.location_id] = item.location
    _ensure_available(demand, products, locations)

    for item in items:
        post_movement(
            movement_type=MovementType.DELIVERY,
            document=delivery,
            product=products[item.product_id],
            location=item.location,
            delta=-item.quantity,
            performed_by=user,
            reference=delivery.reference_number,
        )
    _set_status(delivery, DocumentStatus.DONE, user=user, validated_by=user, validated_at=timezone.now())
    return delivery


# Transfers


def _check_transfer_locations(source: Location, destination: Location) -> None:
    if source.pk == destination.pk:
        raise InventoryError("Source and destination locations must differ")


@transaction.atomic
def create_transfer(*, user, source_location: Location, destination_location: Location, items: list, **fields):
    _check_transfer_locations(source_location, destination_location)
    ensure_warehouse_access(user, source_location.warehouse_id, destination_location.warehouse_id)
    _check_items(items)
    transfer = Transfer.objects.create(
        created_by=user,
        source_location=source_location,
        destination_location=destination_location,
        **fields,
    )
    for item in items:
        TransferItem.objects.create(transfer=transfer, **item)
    _assign_number(transfer)
    _log_created(transfer, user)
    return transfer


@transaction.atomic
def update_transfer(*, transfer: Transfer, user, items: Optional[list] = None, **fields) -> Transfer:
    transfer = _lock(transfer)
    ensure_warehouse_access(user, *document_warehouse_ids(transfer))
    ensure_editable(transfer.KIND, transfer.status)
    for field, value in fields.items():
        setattr(transfer, field, value)
    _check_transfer_locations(transfer.source_location, transfer.destination_location)
    ensure_warehouse_access(user, *document_warehouse_ids(transfer))
    transfer.save()
    if items is not None:
        _check_items(items)
        transfer.items.all().delete()
        for item in items:
            TransferItem.objects.create(transfer=transfer, **item)
    return transfer


@transaction.atomic
def execute_transfer(*, transfer: Transfer, user) -> Transfer:
    """Move every line from the source to the destination location.

    Each line writes two ledger rows: a decrease at the source and an increase
    at the destination, both carrying the source and destination references.
    """
    transfer = _lock(transfer)
    source = transfer.source_location
    destination = transfer.destination_location
    ensure_warehouse_access(user, source.warehouse_id, destination.warehouse_id)
    check_transition(transfer.KIND, transfer.status, DocumentStatus.DONE)
    _check_transfer_locations(source, destination)
    items = list(transfer.items.order_by("id"))
    _check_items(items)
    products = _lock_products(i.product_id for i in items)

    demand = defaultdict(int)
    for item in items:
        demand[(item.product_id, source.pk)] += item.quantity
    _ensure_available(demand, products, {source.pk: source})

    for item in items:
        product = products[item.product_id]
        legs = ((source, -item.quantity), (destination, item.quantity))
        for location, delta in legs:
            post_movement(
                movement_type=MovementType.TRANSFER,
                document=transfer,
                product=product,
                location=location,
                delta=delta,
                performed_by=user,
                source_location=source,
                destination_location=destination,
                reference=transfer.reference_number,
                notes=transfer.notes,
            )
    _set_status(transfer, DocumentStatus.DONE, user=user, executed_by=user, executed_at=timezone.now())
    return transfer


# Adjustments


@transaction.atomic
def create_adjustment(*, user, product: Product, location: Location, counted_quantity: int, reason: str, notes=""):
    ensure_warehouse_access(user, location.warehouse_id)
    if int(counted_quantity) < 0:
        raise InventoryError("Counted quantity cannot be negative")
    system_quantity = get_stock(product, location)
    adjustment = Adjustment.objects.create(
        created_by=user,
        product=product,
        location=location,
        system_quantity=system_quantity,
        counted_quantity=counted_quantity,
        difference=int(counted_quantity) - system_quantity,
        reason=reason,
        notes=notes,
    )
    _assign_number(adjustment)
    _log_created(adjustment, user)
    return adjustment


@transaction.atomic
def update_adjustment(*, adjustment: Adjustment, user, **fields) -> Adjustment:
    adjustment = _lock(adjustment)
    ensure_warehouse_access(user, adjustment.location.warehouse_id)
    ensure_editable(adjustment.KIND, adjustment.status)
    for field, value in fields.items():
        setattr(adjustment, field, value)
    ensure_warehouse_access(user, adjustment.location.warehouse_id)
    adjustment.system_quantity = get_stock(adjustment.product, adjustment.location)
    adjustment.difference = int(adjustment.counted_quantity) - adjustment.system_quantity
    adjustment.save()
    return adjustment


@transaction.atomic
def validate_adjustment(*, adjustment: Adjustment, user) -> Adjustment:
    """Set stock to the counted quantity.

    The difference is recomputed against current stock so that the ledger row
    always reconciles, even if stock moved since the count was recorded.
    """
    adjustment = _lock(adjustment)
    ensure_warehouse_access(user, adjustment.location.warehouse_id)
    check_transition(adjustment.KIND, adjustment.status, DocumentStatus.DONE)
    product = _lock_products([adjustment.product_id])[adjustment.product_id]
    current = get_stock(product, adjustment.location)
    difference = int(adjustment.counted_quantity) - current
    post_movement(
        movement_type=MovementType.ADJUSTMENT,
        document=adjustment,
        product=product,
        location=adjustment.location,
        delta=difference,
        performed_by=user,
        reference=adjustment.reason,
        notes=adjustment.notes,
    )
    _set_status(
        adjustment,
        DocumentStatus.DONE,
        user=user,
        difference=difference,
        validated_by=user,
        validated_at=timezone.now(),
    )
    return adjustment


# Shared operations


@transaction.atomic
def set_document_status(*, document, status: str, user):
    """Move a document to one of the manually selectable statuses (waiting, ready)."""
    document = _lock(document)
    ensure_warehouse_access(user, *document_warehouse_ids(document))
    ensure_open(document.KIND, document.status)
    if status not in MANUAL_STATUSES[document.KIND]:
        raise InventoryError(f"Status {status} cannot be set directly on a {document.KIND}")
    _set_status(document, status, user=user)
    return document


@transaction.atomic
def cancel_document(*, document, user):
    """Cancel a non-terminal document. Stock is untouched."""
    document = _lock(document)
    ensure_warehouse_access(user, *document_warehouse_ids(document))
    _set_status(document, DocumentStatus.CANCELED, user=user, canceled_at=timezone.now())
    return document


@transaction.atomic
def delete_document(*, document, user) -> None:
    document = _lock(document)
    ensure_warehouse_access(user, *document_warehouse_ids(document))
    ensure_editable(document.KIND, document.status)
    logger.info(
        "document_deleted",
        extra={
            "event": "document_deleted",
            "kind": document.KIND,
            "document_id": document.id,
            "document_number": document.number,
            "user_id": getattr(user, "id", None),
        },
    )
    document.delete()


# EOF
