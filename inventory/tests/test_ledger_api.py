import pytest
from django.utils import timezone
from inventory.tests.factories import stocked_product
from movements import services
from products.tests.factories import ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, StaffFactory
from warehouses.tests.factories import LocationFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def _receive(user, product, location, quantity):
    receipt = services.create_receipt(
        user=user,
        warehouse=location.warehouse,
        supplier="Acme",
        items=[{"product": product, "location": location, "quantity": quantity}],
    )
    return services.validate_receipt(receipt=receipt, user=user)


@pytest.mark.django_db
def test_ledger_lists_rows_newest_first_with_filters():
    admin = AdminFactory()
    product, location = stocked_product(0)
    other, _ = stocked_product(0, location=location)
    _receive(admin, product, location, 5)
    _receive(admin, other, location, 2)
    client = _client(admin)

    resp = client.get("/api/v1/ledger/")
    assert resp.status_code == 200
    assert resp.data["count"] == 2
    first = resp.data["results"][0]
    assert first["product"]["id"] == other.id
    assert (first["quantity"], first["quantity_before"], first["quantity_after"]) == (2, 0, 2)

    resp = client.get("/api/v1/ledger/", {"product": product.id, "movement_type": "receipt"})
    assert [row["product"]["id"] for row in resp.data["results"]] == [product.id]

    resp = client.get("/api/v1/ledger/", {"movement_type": "delivery"})
    assert resp.data["count"] == 0


@pytest.mark.django_db
def test_product_and_warehouse_ledger_views():
    admin = AdminFactory()
    product, source = stocked_product(0)
    destination = LocationFactory()
    _receive(admin, product, source, 10)
    transfer = services.create_transfer(
        user=admin,
        source_location=source,
        destination_location=destination,
        items=[{"product": product, "quantity": 4}],
    )
    services.execute_transfer(transfer=transfer, user=admin)
    client = _client(admin)

    resp = client.get(f"/api/v1/ledger/product/{product.id}/")
    assert resp.data["count"] == 3

    resp = client.get(f"/api/v1/ledger/warehouse/{destination.warehouse_id}/")
    assert resp.data["count"] == 2

    assert client.get("/api/v1/ledger/product/999999/").status_code == 404


@pytest.mark.django_db
def test_warehouse_staff_only_see_their_own_rows_in_their_warehouse():
    product, location = stocked_product(0)
    staff = StaffFactory(assigned_warehouse=location.warehouse)
    _receive(staff, product, location, 3)
    _receive(AdminFactory(), product, location, 4)
    elsewhere = LocationFactory()
    _receive(AdminFactory(), ProductFactory(), elsewhere, 1)

    client = _client(staff)
    resp = client.get("/api/v1/ledger/")
    assert resp.data["count"] == 1
    assert resp.data["results"][0]["performed_by"]["id"] == staff.id

    assert client.get(f"/api/v1/ledger/warehouse/{elsewhere.warehouse_id}/").status_code == 403


@pytest.mark.django_db
def test_dashboard_and_warehouse_stock():
    admin = AdminFactory()
    product, location = stocked_product(0)
    ProductFactory()
    _receive(admin, product, location, 15)
    services.create_delivery(
        user=admin,
        warehouse=location.warehouse,
        customer="Bob",
        items=[{"product": product, "location": location, "quantity": 1}],
    )
    client = _client(admin)

    resp = client.get("/api/v1/dashboard/")
    assert resp.status_code == 200
    data = resp.data["data"]
    assert data["total_products"] == 2
    assert data["out_of_stock_products"] == 1
    assert data["low_stock_products"] == 1
    assert data["pending_receipts"] == 0
    assert data["pending_deliveries"] == 1

    resp = client.get("/api/v1/dashboard/warehouse-stock/")
    assert {row["warehouse"]: row["total_units"] for row in resp.data["data"]} == {location.warehouse_id: 15}


@pytest.mark.django_db
def test_warehouse_staff_filtering_by_another_warehouse_is_forbidden():
    product, location = stocked_product(0)
    staff = StaffFactory(assigned_warehouse=location.warehouse)
    _receive(staff, product, location, 3)
    elsewhere = LocationFactory()
    _receive(AdminFactory(), ProductFactory(), elsewhere, 1)
    client = _client(staff)

    resp = client.get("/api/v1/ledger/", {"warehouse": elsewhere.warehouse_id})
    assert resp.status_code == 403
    assert resp.data["success"] is False

    resp = client.get("/api/v1/ledger/", {"warehouse": location.warehouse_id})
    assert resp.status_code == 200
    assert resp.data["count"] == 1


@pytest.mark.parametrize(
    "params,field",
    [
        ({"start_date": "not-a-date"}, "start_date"),
        ({"end_date": "2024-13-40"}, "end_date"),
        ({"product": "abc"}, "product"),
        ({"warehouse": "x1"}, "warehouse"),
    ],
)
@pytest.mark.django_db
def test_malformed_ledger_filters_return_400(params, field):
    resp = _client(AdminFactory()).get("/api/v1/ledger/", params)

    assert resp.status_code == 400
    assert resp.data["success"] is False
    assert field in resp.data["errors"]


@pytest.mark.django_db
def test_date_only_bounds_cover_the_whole_day():
    admin = AdminFactory()
    product, location = stocked_product(0)
    _receive(admin, product, location, 5)
    today = timezone.localdate().isoformat()
    client = _client(admin)

    assert client.get("/api/v1/ledger/", {"start_date": today, "end_date": today}).data["count"] == 1
    assert client.get("/api/v1/ledger/", {"end_date": "2000-01-01"}).data["count"] == 0
