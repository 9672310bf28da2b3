import pytest
from common.exceptions import InsufficientStockError, InventoryError
from inventory.models import LedgerImmutableError, StockLedgerEntry, StockLevel
from inventory.selectors import stock_by_location
from inventory.services import apply_movement, get_stock, post_movement, record_ledger_entry, set_stock
from inventory.tests.factories import stocked_product
from products.tests.factories import ProductFactory
from users.tests.factories import AdminFactory
from warehouses.tests.factories import LocationFactory


class _Doc:
    def __init__(self, id=1, number="REC-000001"):
        self.id = id
        self.number = number


def test_apply_movement_increase_and_decrease():
    up = apply_movement(5, 10)
    assert (up.quantity_before, up.quantity_after, up.quantity) == (5, 15, 10)
    down = apply_movement(15, -15)
    assert (down.quantity_before, down.quantity_after, down.quantity) == (15, 0, -15)


def test_apply_movement_rejects_negative_result():
    with pytest.raises(InsufficientStockError) as exc:
        apply_movement(5, -8, label="Cable at A-01")
    assert "available 5" in exc.value.message
    assert "requested 8" in exc.value.message


@pytest.mark.django_db
def test_get_stock_defaults_to_zero():
    product = ProductFactory()
    location = LocationFactory()
    assert get_stock(product, location) == 0
    assert stock_by_location(product) == {}


@pytest.mark.django_db
def test_set_stock_keeps_total_equal_to_sum_of_locations():
    product = ProductFactory()
    loc1 = LocationFactory()
    loc2 = LocationFactory(warehouse=loc1.warehouse)

    set_stock(product, loc1, 7)
    total = set_stock(product, loc2, 5)
    assert total == 12
    set_stock(product, loc1, 0)

    product.refresh_from_db()
    assert product.total_stock == 5
    assert stock_by_location(product) == {str(loc1.pk): 0, str(loc2.pk): 5}
    assert product.total_stock == sum(stock_by_location(product).values())


@pytest.mark.django_db
def test_set_stock_rejects_negative_quantity():
    product, location = stocked_product(3)
    with pytest.raises(InventoryError):
        set_stock(product, location, -1)
    assert get_stock(product, location) == 3


@pytest.mark.django_db
def test_post_movement_updates_stock_and_writes_reconciled_row():
    user = AdminFactory()
    product, location = stocked_product(5)

    entry = post_movement(
        movement_type="receipt",
        document=_Doc(),
        product=product,
        location=location,
        delta=10,
        performed_by=user,
    )

    assert get_stock(product, location) == 15
    product.refresh_from_db()
    assert product.total_stock == 15
    assert (entry.quantity, entry.quantity_before, entry.quantity_after) == (10, 5, 15)
    assert entry.warehouse_id == location.warehouse_id
    assert entry.document_number == "REC-000001"


@pytest.mark.django_db
def test_post_movement_insufficient_leaves_stock_and_ledger_untouched():
    user = AdminFactory()
    product, location = stocked_product(5)

    with pytest.raises(InsufficientStockError):
        post_movement(
            movement_type="delivery",
            document=_Doc(number="DEL-000001"),
            product=product,
            location=location,
            delta=-8,
            performed_by=user,
        )

    assert get_stock(product, location) == 5
    assert StockLedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_record_ledger_entry_derives_before_after_from_current_stock():
    user = AdminFactory()
    product, location = stocked_product(4)

    entry = record_ledger_entry(
        movement_type="adjustment",
        document=_Doc(number="ADJ-000001"),
        product=product,
        location=location,
        quantity=-1,
        performed_by=user,
    )

    assert (entry.quantity_before, entry.quantity_after) == (4, 3)


@pytest.mark.django_db
def test_record_ledger_entry_rejects_unreconciled_quantities():
    user = AdminFactory()
    product, location = stocked_product(4)
    with pytest.raises(InventoryError):
        record_ledger_entry(
            movement_type="receipt",
            document=_Doc(),
            product=product,
            location=location,
            quantity=2,
            quantity_before=4,
            quantity_after=7,
            performed_by=user,
        )


@pytest.mark.django_db
def test_ledger_rows_are_immutable():
    user = AdminFactory()
    product, location = stocked_product(0)
    entry = post_movement(
        movement_type="receipt",
        document=_Doc(),
        product=product,
        location=location,
        delta=3,
        performed_by=user,
    )

    entry.notes = "edited"
    with pytest.raises(LedgerImmutableError):
        entry.save()
    with pytest.raises(LedgerImmutableError):
        entry.delete()
    assert StockLedgerEntry.objects.get(pk=entry.pk).notes == ""


@pytest.mark.django_db
def test_stock_level_rows_are_unique_per_product_and_location():
    product, location = stocked_product(2)
    set_stock(product, location, 9)
    assert StockLevel.objects.filter(product=product, location=location).count() == 1
