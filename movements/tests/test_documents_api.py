import pytest
from inventory.models import StockLedgerEntry
from inventory.services import get_stock
from inventory.tests.factories import stocked_product
from rest_framework.test import APIClient
from users.tests.factories import AdminFactory, ManagerFactory, StaffFactory
from warehouses.tests.factories import LocationFactory


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_create_and_validate_receipt_returns_populated_document():
    user = ManagerFactory()
    product, location = stocked_product(5)
    client = _client(user)

    resp = client.post(
        "/api/v1/receipts/",
        {
            "supplier": "Acme",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 10}],
        },
        format="json",
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["status"] == "draft"
    assert resp.data["number"].startswith("REC-")
    receipt_id = resp.data["id"]

    resp = client.post(f"/api/v1/receipts/{receipt_id}/validate/")
    assert resp.status_code == 200
    assert resp.data["status"] == "done"
    assert resp.data["validated_by"]["id"] == user.id
    assert resp.data["items"][0]["product_detail"]["sku"] == product.sku
    assert get_stock(product, location) == 15

    resp = client.post(f"/api/v1/receipts/{receipt_id}/validate/")
    assert resp.status_code == 400
    assert resp.data == {"success": False, "message": "Receipt already validated"}
    assert get_stock(product, location) == 15
    assert StockLedgerEntry.objects.count() == 1


@pytest.mark.django_db
def test_receipt_requires_items():
    client = _client(AdminFactory())
    location = LocationFactory()
    resp = client.post(
        "/api/v1/receipts/",
        {"supplier": "Acme", "warehouse": location.warehouse_id, "items": []},
        format="json",
    )
    assert resp.status_code == 400
    assert resp.data["success"] is False
    assert "items" in resp.data["errors"]


@pytest.mark.django_db
def test_draft_receipt_can_be_edited_but_not_after_validation():
    user = AdminFactory()
    product, location = stocked_product(0)
    client = _client(user)
    resp = client.post(
        "/api/v1/receipts/",
        {
            "supplier": "Acme",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 1}],
        },
        format="json",
    )
    receipt_id = resp.data["id"]

    resp = client.patch(
        f"/api/v1/receipts/{receipt_id}/",
        {"items": [{"product": product.id, "location": location.id, "quantity": 4}]},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.data["items"][0]["quantity"] == 4

    client.post(f"/api/v1/receipts/{receipt_id}/validate/")
    resp = client.patch(f"/api/v1/receipts/{receipt_id}/", {"supplier": "Other"}, format="json")
    assert resp.status_code == 400
    resp = client.delete(f"/api/v1/receipts/{receipt_id}/")
    assert resp.status_code == 400
    assert get_stock(product, location) == 4


@pytest.mark.django_db
def test_delivery_validation_with_insufficient_stock_returns_400():
    product, location = stocked_product(5)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/deliveries/",
        {
            "customer": "Bob",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 8}],
        },
        format="json",
    )
    delivery_id = resp.data["id"]

    resp = client.post(f"/api/v1/deliveries/{delivery_id}/validate/")

    assert resp.status_code == 400
    assert resp.data["success"] is False
    assert "Insufficient stock" in resp.data["message"]
    assert get_stock(product, location) == 5
    assert StockLedgerEntry.objects.count() == 0


@pytest.mark.django_db
def test_pick_pack_endpoints_accept_empty_body_and_bare_list():
    product, location = stocked_product(5)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/deliveries/",
        {
            "customer": "Bob",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 2}],
        },
        format="json",
    )
    delivery_id = resp.data["id"]
    item_id = resp.data["items"][0]["id"]

    resp = client.post(f"/api/v1/deliveries/{delivery_id}/pick/", {}, format="json")
    assert resp.status_code == 200
    assert resp.data["status"] == "picking"
    assert resp.data["items"][0]["picked_quantity"] == 2

    resp = client.post(f"/api/v1/deliveries/{delivery_id}/pack/", [{"item_id": item_id, "quantity": 2}], format="json")
    assert resp.status_code == 200
    assert resp.data["status"] == "ready"


@pytest.mark.django_db
def test_assign_picker_records_user():
    product, location = stocked_product(5)
    picker = StaffFactory(assigned_warehouse=location.warehouse)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/deliveries/",
        {
            "customer": "Bob",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 2}],
        },
        format="json",
    )
    delivery_id = resp.data["id"]

    resp = client.post(f"/api/v1/deliveries/{delivery_id}/assign-picker/", {"user": picker.id}, format="json")

    assert resp.status_code == 200
    assert resp.data["picker"]["id"] == picker.id

    tasks = _client(picker).get("/api/v1/deliveries/my-tasks/")
    assert tasks.status_code == 200
    assert [d["id"] for d in tasks.data["picking"]] == [delivery_id]


@pytest.mark.django_db
def test_transfer_execute_endpoint():
    product, source = stocked_product(10)
    destination = LocationFactory(warehouse=source.warehouse)
    staff = StaffFactory(assigned_warehouse=source.warehouse)
    client = _client(staff)
    resp = client.post(
        "/api/v1/transfers/",
        {
            "source_location": source.id,
            "destination_location": destination.id,
            "items": [{"product": product.id, "quantity": 3}],
        },
        format="json",
    )
    assert resp.status_code == 201, resp.data
    transfer_id = resp.data["id"]

    resp = client.post(f"/api/v1/transfers/{transfer_id}/execute/")

    assert resp.status_code == 200
    assert resp.data["status"] == "done"
    assert resp.data["executed_by"]["id"] == staff.id
    assert get_stock(product, source) == 7
    assert get_stock(product, destination) == 3

    resp = client.post(f"/api/v1/transfers/{transfer_id}/execute/")
    assert resp.status_code == 400
    assert resp.data["message"] == "Transfer already executed"


@pytest.mark.django_db
def test_transfer_to_same_location_is_rejected():
    product, source = stocked_product(10)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/transfers/",
        {
            "source_location": source.id,
            "destination_location": source.id,
            "items": [{"product": product.id, "quantity": 3}],
        },
        format="json",
    )
    assert resp.status_code == 400


@pytest.mark.django_db
def test_adjustment_api_flow():
    product, location = stocked_product(20)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/adjustments/",
        {"product": product.id, "location": location.id, "counted_quantity": 17, "reason": "Damaged"},
        format="json",
    )
    assert resp.status_code == 201
    assert resp.data["system_quantity"] == 20
    assert resp.data["difference"] == -3

    resp = client.post(f"/api/v1/adjustments/{resp.data['id']}/validate/")

    assert resp.status_code == 200
    assert resp.data["status"] == "done"
    assert get_stock(product, location) == 17


@pytest.mark.django_db
def test_staff_of_other_warehouse_gets_403_on_validation():
    product, location = stocked_product(5)
    admin_client = _client(AdminFactory())
    resp = admin_client.post(
        "/api/v1/receipts/",
        {
            "supplier": "Acme",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 1}],
        },
        format="json",
    )
    receipt_id = resp.data["id"]

    # Staff of the right warehouse can see it; others get 404 from the scoped queryset.
    staff = StaffFactory(assigned_warehouse=location.warehouse)
    assert _client(staff).get(f"/api/v1/receipts/{receipt_id}/").status_code == 200
    outsider = StaffFactory(assigned_warehouse=LocationFactory().warehouse)
    assert _client(outsider).post(f"/api/v1/receipts/{receipt_id}/validate/").status_code == 404

    resp = _client(outsider).post(
        "/api/v1/receipts/",
        {
            "supplier": "Acme",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 1}],
        },
        format="json",
    )
    assert resp.status_code == 403
    assert resp.data["success"] is False


@pytest.mark.django_db
def test_status_and_cancel_actions():
    product, location = stocked_product(0)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/receipts/",
        {
            "supplier": "Acme",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 1}],
        },
        format="json",
    )
    receipt_id = resp.data["id"]

    resp = client.post(f"/api/v1/receipts/{receipt_id}/status/", {"status": "waiting"}, format="json")
    assert resp.data["status"] == "waiting"
    resp = client.post(f"/api/v1/receipts/{receipt_id}/cancel/")
    assert resp.data["status"] == "canceled"
    resp = client.post(f"/api/v1/receipts/{receipt_id}/cancel/")
    assert resp.status_code == 400
    assert resp.data["message"] == "Receipt is canceled"


@pytest.mark.django_db
def test_unauthenticated_requests_are_rejected():
    resp = APIClient().get("/api/v1/receipts/")
    assert resp.status_code == 401
    assert resp.data["success"] is False


@pytest.mark.django_db
def test_partial_pick_and_pack_keep_the_requested_quantities():
    product, location = stocked_product(10)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/deliveries/",
        {
            "customer": "Bob",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 5}],
        },
        format="json",
    )
    delivery_id = resp.data["id"]
    item_id = resp.data["items"][0]["id"]

    resp = client.post(
        f"/api/v1/deliveries/{delivery_id}/pick/",
        {"items": [{"item_id": item_id, "picked_quantity": 2}]},
        format="json",
    )
    assert resp.status_code == 200, resp.data
    assert resp.data["status"] == "picking"
    assert resp.data["items"][0]["picked_quantity"] == 2

    resp = client.post(
        f"/api/v1/deliveries/{delivery_id}/pack/",
        [{"item_id": item_id, "packed_quantity": 2}],
        format="json",
    )
    assert resp.status_code == 200, resp.data
    assert resp.data["status"] == "packing"
    assert resp.data["items"][0]["packed_quantity"] == 2

    resp = client.post(
        f"/api/v1/deliveries/{delivery_id}/pack/",
        [{"item_id": item_id, "packed_quantity": 5}],
        format="json",
    )
    assert resp.data["status"] == "ready"
    assert get_stock(product, location) == 10


@pytest.mark.django_db
def test_pick_line_without_a_quantity_is_rejected():
    product, location = stocked_product(10)
    client = _client(AdminFactory())
    resp = client.post(
        "/api/v1/deliveries/",
        {
            "customer": "Bob",
            "warehouse": location.warehouse_id,
            "items": [{"product": product.id, "location": location.id, "quantity": 5}],
        },
        format="json",
    )
    delivery_id = resp.data["id"]
    item_id = resp.data["items"][0]["id"]

    resp = client.post(f"/api/v1/deliveries/{delivery_id}/pick/", [{"item_id": item_id}], format="json")

    assert resp.status_code == 400
    assert resp.data["success"] is False
    assert client.get(f"/api/v1/deliveries/{delivery_id}/").data["status"] == "draft"
