import pytest
from common.exceptions import InsufficientStockError, InvalidStateError, InventoryError, NotFoundError, ScopeError
from inventory.models import StockLedgerEntry
from inventory.services import get_stock, set_stock
from inventory.tests.factories import stocked_product
from movements import services
from movements.models import Delivery
from users.tests.factories import AdminFactory, StaffFactory
from warehouses.tests.factories import LocationFactory


def _total(product):
    product.refresh_from_db()
    return product.total_stock


@pytest.mark.django_db
def test_receipt_validation_adds_stock_and_writes_one_row():
    user = AdminFactory()
    product, location = stocked_product(5)
    receipt = services.create_receipt(
        user=user,
        warehouse=location.warehouse,
        supplier="Acme",
        items=[{"product": product, "location": location, "quantity": 10}],
    )
    assert receipt.number == f"REC-{receipt.id:06d}"

    receipt = services.validate_receipt(receipt=receipt, user=user)

    assert receipt.status == "done"
    assert receipt.validated_by == user
    assert get_stock(product, location) == 15
    assert _total(product) == 15
    row = StockLedgerEntry.objects.get(document_number=receipt.number)
    assert (row.movement_type, row.quantity, row.quantity_before, row.quantity_after) == ("receipt", 10, 5, 15)


@pytest.mark.django_db
def test_revalidating_done_receipt_is_rejected_without_effect():
    user = AdminFactory()
    product, location = stocked_product(5)
    receipt = services.create_receipt(
        user=user,
        warehouse=location.warehouse,
        supplier="Acme",
        items=[{"product": product, "location": location, "quantity": 10}],
    )
    services.validate_receipt(receipt=receipt, user=user)

    with pytest.raises(InvalidStateError) as exc:
        services.validate_receipt(receipt=receipt, user=user)
    assert exc.value.message == "Receipt already validated"
    with pytest.raises(InvalidStateError):
        services.cancel_document(document=receipt, user=user)

    assert get_stock(product, location) == 15
    assert StockLedgerEntry.objects.count() == 1


@pytest.mark.django_db
def test_receipt_item_location_must_belong_to_receipt_warehouse():
    user = AdminFactory()
    product, location = stocked_product(0)
    elsewhere = LocationFactory()
    with pytest.raises(NotFoundError):
        services.create_receipt(
            user=user,
            warehouse=location.warehouse,
            supplier="Acme",
            items=[{"product": product, "location": elsewhere, "quantity": 1}],
        )


@pytest.mark.django_db
def test_delivery_with_insufficient_stock_writes_nothing():
    user = AdminFactory()
    product, location = stocked_product(5)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": 8}],
    )

    with pytest.raises(InsufficientStockError):
        services.validate_delivery(delivery=delivery, user=user)

    delivery.refresh_from_db()
    assert delivery.status == "draft"
    assert get_stock(product, location) == 5
    assert StockLedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_delivery_checks_every_line_before_writing():
    user = AdminFactory()
    first, location = stocked_product(10)
    second, _ = stocked_product(1, location=location)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[
            {"product": first, "location": location, "quantity": 4},
            {"product": second, "location": location, "quantity": 2},
        ],
    )

    with pytest.raises(InsufficientStockError):
        services.validate_delivery(delivery=delivery, user=user)

    assert get_stock(first, location) == 10
    assert StockLedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_delivery_lines_for_same_stock_are_checked_cumulatively():
    user = AdminFactory()
    product, location = stocked_product(5)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[
            {"product": product, "location": location, "quantity": 3},
            {"product": product, "location": location, "quantity": 3},
        ],
    )
    with pytest.raises(InsufficientStockError):
        services.validate_delivery(delivery=delivery, user=user)
    assert get_stock(product, location) == 5


@pytest.mark.django_db
def test_delivery_uses_current_stock_not_stock_at_creation():
    user = AdminFactory()
    product, location = stocked_product(2)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": 6}],
    )
    set_stock(product, location, 6)

    services.validate_delivery(delivery=delivery, user=user)

    assert get_stock(product, location) == 0
    row = StockLedgerEntry.objects.get(movement_type="delivery")
    assert (row.quantity, row.quantity_before, row.quantity_after) == (-6, 6, 0)


@pytest.mark.django_db
def test_pick_and_pack_advance_delivery_to_ready():
    user = AdminFactory()
    product, location = stocked_product(10)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": 4}],
    )
    item = delivery.items.get()

    delivery = services.pick_delivery(delivery=delivery, user=user)
    assert delivery.status == "picking"
    item.refresh_from_db()
    assert item.picked_quantity == 4

    delivery = services.pack_delivery(delivery=delivery, user=user, lines=[{"item_id": item.id, "quantity": 2}])
    assert delivery.status == "packing"

    delivery = services.pack_delivery(delivery=delivery, user=user, lines=[{"item_id": item.id, "quantity": 4}])
    assert delivery.status == "ready"
    assert delivery.packer == user

    delivery = services.validate_delivery(delivery=delivery, user=user)
    assert delivery.status == "done"
    assert get_stock(product, location) == 6


@pytest.mark.django_db
def test_pick_unknown_item_is_not_found():
    user = AdminFactory()
    product, location = stocked_product(10)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": 4}],
    )
    with pytest.raises(NotFoundError):
        services.pick_delivery(delivery=delivery, user=user, lines=[{"item_id": 999999, "quantity": 1}])
    assert Delivery.objects.get(pk=delivery.pk).status == "draft"


@pytest.mark.django_db
def test_transfer_moves_stock_and_writes_paired_rows():
    user = AdminFactory()
    product, source = stocked_product(10)
    destination = LocationFactory()
    transfer = services.create_transfer(
        user=user,
        source_location=source,
        destination_location=destination,
        items=[{"product": product, "quantity": 3}],
    )

    transfer = services.execute_transfer(transfer=transfer, user=user)

    assert transfer.status == "done"
    assert transfer.executed_by == user
    assert get_stock(product, source) == 7
    assert get_stock(product, destination) == 3
    assert _total(product) == 10
    rows = list(StockLedgerEntry.objects.filter(movement_type="transfer").order_by("id"))
    assert [(r.location_id, r.quantity) for r in rows] == [(source.id, -3), (destination.id, 3)]
    assert sum(r.quantity for r in rows) == 0
    for row in rows:
        assert row.source_location_id == source.id
        assert row.destination_location_id == destination.id
        assert row.source_warehouse_id == source.warehouse_id
        assert row.destination_warehouse_id == destination.warehouse_id


@pytest.mark.django_db
def test_transfer_with_insufficient_source_stock_is_rejected_entirely():
    user = AdminFactory()
    product, source = stocked_product(2)
    destination = LocationFactory()
    transfer = services.create_transfer(
        user=user,
        source_location=source,
        destination_location=destination,
        items=[{"product": product, "quantity": 3}],
    )

    with pytest.raises(InsufficientStockError):
        services.execute_transfer(transfer=transfer, user=user)

    assert get_stock(product, source) == 2
    assert get_stock(product, destination) == 0
    assert StockLedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_adjustment_sets_stock_to_counted_quantity():
    user = AdminFactory()
    product, location = stocked_product(20)
    adjustment = services.create_adjustment(
        user=user, product=product, location=location, counted_quantity=17, reason="Cycle count"
    )
    assert (adjustment.system_quantity, adjustment.difference) == (20, -3)

    adjustment = services.validate_adjustment(adjustment=adjustment, user=user)

    assert adjustment.status == "done"
    assert adjustment.difference == -3
    assert get_stock(product, location) == 17
    row = StockLedgerEntry.objects.get(movement_type="adjustment")
    assert (row.quantity, row.quantity_before, row.quantity_after) == (-3, 20, 17)


@pytest.mark.django_db
def test_adjustment_difference_is_recomputed_when_stock_moved():
    user = AdminFactory()
    product, location = stocked_product(20)
    adjustment = services.create_adjustment(
        user=user, product=product, location=location, counted_quantity=17, reason="Cycle count"
    )
    set_stock(product, location, 25)

    adjustment = services.validate_adjustment(adjustment=adjustment, user=user)

    assert adjustment.difference == -8
    assert adjustment.system_quantity == 20
    assert get_stock(product, location) == 17
    row = StockLedgerEntry.objects.get(movement_type="adjustment")
    assert (row.quantity, row.quantity_before, row.quantity_after) == (-8, 25, 17)


@pytest.mark.django_db
def test_cancel_has_no_stock_effect_and_is_terminal():
    user = AdminFactory()
    product, location = stocked_product(5)
    receipt = services.create_receipt(
        user=user,
        warehouse=location.warehouse,
        supplier="Acme",
        items=[{"product": product, "location": location, "quantity": 10}],
    )

    receipt = services.cancel_document(document=receipt, user=user)
    assert receipt.status == "canceled"
    assert receipt.canceled_at is not None

    with pytest.raises(InvalidStateError) as exc:
        services.validate_receipt(receipt=receipt, user=user)
    assert exc.value.message == "Receipt is canceled"
    assert get_stock(product, location) == 5


@pytest.mark.django_db
def test_warehouse_staff_cannot_touch_other_warehouses():
    product, location = stocked_product(10)
    other = LocationFactory()
    staff = StaffFactory(assigned_warehouse=other.warehouse)

    with pytest.raises(ScopeError):
        services.create_receipt(
            user=staff,
            warehouse=location.warehouse,
            supplier="Acme",
            items=[{"product": product, "location": location, "quantity": 1}],
        )


@pytest.mark.django_db
def test_warehouse_staff_cannot_transfer_across_warehouses():
    product, source = stocked_product(10)
    destination = LocationFactory()
    staff = StaffFactory(assigned_warehouse=source.warehouse)

    with pytest.raises(ScopeError):
        services.create_transfer(
            user=staff,
            source_location=source,
            destination_location=destination,
            items=[{"product": product, "quantity": 1}],
        )


@pytest.mark.django_db
def test_warehouse_staff_without_assignment_is_denied():
    product, location = stocked_product(10)
    staff = StaffFactory()
    with pytest.raises(ScopeError):
        services.create_adjustment(user=staff, product=product, location=location, counted_quantity=1, reason="x")


@pytest.mark.django_db
def test_pick_and_pack_read_their_own_quantity_fields():
    user = AdminFactory()
    product, location = stocked_product(10)
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": 5}],
    )
    item = delivery.items.get()

    delivery = services.pick_delivery(delivery=delivery, user=user, lines=[{"item_id": item.id, "picked_quantity": 2}])
    item.refresh_from_db()
    assert (delivery.status, item.picked_quantity) == ("picking", 2)

    delivery = services.pack_delivery(delivery=delivery, user=user, lines=[{"item_id": item.id, "packed_quantity": 2}])
    item.refresh_from_db()
    assert (delivery.status, item.packed_quantity) == ("packing", 2)

    with pytest.raises(InventoryError):
        services.pack_delivery(delivery=delivery, user=user, lines=[{"item_id": item.id}])
    item.refresh_from_db()
    assert item.packed_quantity == 2


def _done_delivery(user, product, location, quantity):
    delivery = services.create_delivery(
        user=user,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": quantity}],
    )
    return services.validate_delivery(delivery=delivery, user=user)


@pytest.mark.django_db
def test_done_delivery_cannot_be_validated_or_canceled_again():
    user = AdminFactory()
    product, location = stocked_product(10)
    delivery = _done_delivery(user, product, location, 4)
    rows = StockLedgerEntry.objects.count()

    with pytest.raises(InvalidStateError) as exc:
        services.validate_delivery(delivery=delivery, user=user)
    assert exc.value.message == "Delivery already validated"
    with pytest.raises(InvalidStateError):
        services.cancel_document(document=delivery, user=user)

    assert get_stock(product, location) == 6
    assert _total(product) == 6
    assert StockLedgerEntry.objects.count() == rows
    assert Delivery.objects.get(pk=delivery.pk).status == "done"


@pytest.mark.django_db
def test_done_transfer_cannot_be_executed_or_canceled_again():
    user = AdminFactory()
    product, source = stocked_product(10)
    destination = LocationFactory(warehouse=source.warehouse)
    transfer = services.create_transfer(
        user=user,
        source_location=source,
        destination_location=destination,
        items=[{"product": product, "quantity": 3}],
    )
    transfer = services.execute_transfer(transfer=transfer, user=user)
    rows = StockLedgerEntry.objects.count()

    with pytest.raises(InvalidStateError) as exc:
        services.execute_transfer(transfer=transfer, user=user)
    assert exc.value.message == "Transfer already executed"
    with pytest.raises(InvalidStateError):
        services.cancel_document(document=transfer, user=user)

    assert (get_stock(product, source), get_stock(product, destination)) == (7, 3)
    assert _total(product) == 10
    assert StockLedgerEntry.objects.count() == rows


@pytest.mark.django_db
def test_done_adjustment_cannot_be_validated_or_canceled_again():
    user = AdminFactory()
    product, location = stocked_product(10)
    adjustment = services.create_adjustment(
        user=user, product=product, location=location, counted_quantity=7, reason="Cycle count"
    )
    adjustment = services.validate_adjustment(adjustment=adjustment, user=user)
    set_stock(product, location, 9)
    rows = StockLedgerEntry.objects.count()

    with pytest.raises(InvalidStateError) as exc:
        services.validate_adjustment(adjustment=adjustment, user=user)
    assert exc.value.message == "Adjustment already validated"
    with pytest.raises(InvalidStateError):
        services.cancel_document(document=adjustment, user=user)

    assert get_stock(product, location) == 9
    assert StockLedgerEntry.objects.count() == rows
