import pytest
from inventory.services import set_stock
from products.models import Product
from products.services import generate_sku, sku_prefix
from products.tests.factories import ProductFactory
from rest_framework.test import APIClient
from users.tests.factories import ManagerFactory, StaffFactory
from warehouses.tests.factories import LocationFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def test_sku_prefix_pads_and_strips():
    assert sku_prefix("Electronics") == "ELE"
    assert sku_prefix("a-b") == "ABX"
    assert sku_prefix("") == "XXX"


@pytest.mark.django_db
def test_generate_sku_continues_the_category_sequence():
    ProductFactory(sku="ELE-0007")
    ProductFactory(sku="ELE-CUSTOM")
    assert generate_sku("Electronics") == "ELE-0008"
    assert generate_sku("Furniture") == "FUR-0001"


@pytest.mark.django_db
def test_create_product_generates_sku_and_starts_empty():
    client = _client(ManagerFactory())
    resp = client.post(
        "/api/v1/products/",
        {"name": "Cable", "category": "Electronics", "uom": "pcs", "reorder_level": 5},
        format="json",
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["sku"] == "ELE-0001"
    assert resp.data["total_stock"] == 0
    assert resp.data["stock_by_location"] == {}


@pytest.mark.django_db
def test_duplicate_sku_is_rejected():
    ProductFactory(sku="ELE-0001")
    client = _client(ManagerFactory())
    resp = client.post(
        "/api/v1/products/",
        {"name": "Cable", "sku": "ele-0001", "category": "Electronics", "uom": "pcs"},
        format="json",
    )
    assert resp.status_code == 400
    assert "sku" in resp.data["errors"]


@pytest.mark.django_db
def test_total_stock_is_not_writable():
    product = ProductFactory()
    client = _client(ManagerFactory())
    resp = client.patch(f"/api/v1/products/{product.id}/", {"total_stock": 99, "name": "Renamed"}, format="json")
    assert resp.status_code == 200
    product.refresh_from_db()
    assert (product.name, product.total_stock) == ("Renamed", 0)


@pytest.mark.django_db
def test_delete_deactivates_product():
    product = ProductFactory()
    client = _client(ManagerFactory())
    resp = client.delete(f"/api/v1/products/{product.id}/")
    assert resp.status_code == 200
    assert resp.data["success"] is True
    product.refresh_from_db()
    assert product.status == Product.STATUS_INACTIVE


@pytest.mark.django_db
def test_stock_endpoint_lists_each_location():
    product = ProductFactory()
    a = LocationFactory()
    b = LocationFactory(warehouse=a.warehouse)
    set_stock(product, a, 4)
    set_stock(product, b, 6)

    resp = _client(StaffFactory()).get(f"/api/v1/products/{product.id}/stock/")

    assert resp.status_code == 200
    assert resp.data["total_stock"] == 10
    assert sorted((row["location"], row["quantity"]) for row in resp.data["locations"]) == [(a.id, 4), (b.id, 6)]


@pytest.mark.django_db
def test_low_stock_filter():
    low = ProductFactory(reorder_level=10)
    ok = ProductFactory(reorder_level=0)
    client = _client(StaffFactory())
    ids = [p["id"] for p in client.get("/api/v1/products/", {"low_stock": "true"}).data["results"]]
    assert low.id in ids
    assert ok.id not in ids


@pytest.mark.django_db
def test_warehouse_staff_cannot_create_products():
    resp = _client(StaffFactory()).post(
        "/api/v1/products/", {"name": "Cable", "category": "Electronics", "uom": "pcs"}, format="json"
    )
    assert resp.status_code == 403


@pytest.mark.django_db
def test_categories_are_distinct_and_sorted():
    ProductFactory(category="Furniture")
    ProductFactory(category="Electronics")
    ProductFactory(category="Electronics")
    ProductFactory(category="Apparel", status=Product.STATUS_INACTIVE)

    resp = _client(StaffFactory()).get("/api/v1/products/categories/")

    assert resp.status_code == 200
    assert resp.data == {"success": True, "data": ["Apparel", "Electronics", "Furniture"]}


@pytest.mark.django_db
def test_categories_require_authentication():
    assert APIClient().get("/api/v1/products/categories/").status_code == 401
