import pytest
from inventory.services import set_stock
from products.tests.factories import ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, ManagerFactory, StaffFactory
from warehouses.models import Location, Warehouse
from warehouses.tests.factories import LocationFactory, WarehouseFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_admin_creates_warehouse_and_locations():
    client = _client(AdminFactory())
    resp = client.post("/api/v1/warehouses/", {"name": "Main", "code": "wh-main"}, format="json")
    assert resp.status_code == 201, resp.data
    assert resp.data["code"] == "WH-MAIN"
    warehouse_id = resp.data["id"]

    resp = client.post(
        f"/api/v1/warehouses/{warehouse_id}/locations/", {"name": "Shelf A", "code": "a-01", "type": "shelf"}
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["code"] == "A-01"
    assert resp.data["warehouse"] == warehouse_id

    resp = client.post(f"/api/v1/warehouses/{warehouse_id}/locations/", {"name": "Dup", "code": "A-01"})
    assert resp.status_code == 400

    listed = client.get(f"/api/v1/warehouses/{warehouse_id}/locations/")
    assert [loc["code"] for loc in listed.data] == ["A-01"]


@pytest.mark.django_db
def test_same_location_code_allowed_in_different_warehouses():
    existing = LocationFactory(code="A-01")
    other = WarehouseFactory()
    client = _client(AdminFactory())
    resp = client.post(f"/api/v1/warehouses/{other.id}/locations/", {"name": "Shelf", "code": "A-01"})
    assert resp.status_code == 201
    assert Location.objects.filter(code="A-01").count() == 2
    assert existing.warehouse_id != other.id


@pytest.mark.django_db
def test_location_with_stock_cannot_be_deleted():
    location = LocationFactory()
    set_stock(ProductFactory(), location, 3)
    client = _client(AdminFactory())

    resp = client.delete(f"/api/v1/warehouses/{location.warehouse_id}/locations/{location.id}/")

    assert resp.status_code == 400
    assert resp.data == {"success": False, "message": "Location still holds stock."}
    assert Location.objects.filter(pk=location.pk).exists()


@pytest.mark.django_db
def test_empty_location_can_be_deleted():
    location = LocationFactory()
    client = _client(AdminFactory())
    resp = client.delete(f"/api/v1/warehouses/{location.warehouse_id}/locations/{location.id}/")
    assert resp.status_code == 204
    assert not Location.objects.filter(pk=location.pk).exists()


@pytest.mark.django_db
def test_warehouse_with_locations_cannot_be_deleted():
    location = LocationFactory()
    client = _client(AdminFactory())
    resp = client.delete(f"/api/v1/warehouses/{location.warehouse_id}/")
    assert resp.status_code == 400
    assert Warehouse.objects.filter(pk=location.warehouse_id).exists()


@pytest.mark.django_db
def test_only_admin_can_modify_warehouses():
    warehouse = WarehouseFactory()
    assert _client(StaffFactory()).get("/api/v1/warehouses/").status_code == 200
    resp = _client(ManagerFactory()).patch(f"/api/v1/warehouses/{warehouse.id}/", {"name": "X"}, format="json")
    assert resp.status_code == 403
