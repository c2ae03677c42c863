"""End-to-end tests for the inventory HTTP API."""
from decimal import Decimal

import pytest

API = "/api"


@pytest.fixture
def electronics(client):
    resp = client.post(f"{API}/categories", json={"name": "Electronics", "description": "Devices"})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def phone(client, electronics):
    resp = client.post(
        f"{API}/products",
        json={
            "name": "Smartphone Pro",
            "price": 899.99,
            "inventory_quantity": 50,
            "sku": "PHONE-001",
            "category_id": electronics["id"],
            "low_stock_threshold": 10,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_and_fetch_product(client, phone, electronics):
    assert phone["low_stock"] is False
    assert phone["category_name"] == "Electronics"
    assert Decimal(str(phone["price"])) == Decimal("899.99")

    assert client.get(f"{API}/products/{phone['id']}").json()["sku"] == "PHONE-001"
    assert client.get(f"{API}/products/sku/PHONE-001").json()["id"] == phone["id"]
    assert client.get(f"{API}/categories/{electronics['id']}").json()["product_count"] == 1


def test_inventory_flow(client, phone):
    pid = phone["id"]
    resp = client.post(f"{API}/products/{pid}/inventory/decrease", json={"quantity": 45})
    assert resp.status_code == 200
    assert resp.json()["inventory_quantity"] == 5
    assert resp.json()["low_stock"] is True

    resp = client.post(f"{API}/products/{pid}/inventory/decrease", json={"quantity": 10})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Cannot decrease inventory below zero. Current inventory: 5, Requested decrease: 10"
    assert body["details"]["current_quantity"] == 5
    assert body["details"]["requested"] == 10
    assert body["path"] == f"{API}/products/{pid}/inventory/decrease"
    assert {"timestamp", "status", "error"} <= body.keys()

    assert client.get(f"{API}/products/{pid}/inventory").json() == 5

    resp = client.post(f"{API}/products/{pid}/inventory/increase", json={"quantity": 20})
    assert resp.json()["inventory_quantity"] == 25
    resp = client.put(f"{API}/products/{pid}/inventory", json={"quantity": 3})
    assert resp.json()["inventory_quantity"] == 3
    assert [p["id"] for p in client.get(f"{API}/products/low-stock").json()] == [pid]


def test_negative_quantity_is_bad_request(client, phone):
    resp = client.put(f"{API}/products/{phone['id']}/inventory", json={"quantity": -1})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Bad Request"


def test_missing_quantity_is_validation_error(client, phone):
    resp = client.post(f"{API}/products/{phone['id']}/inventory/increase", json={})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"
    assert resp.json()["details"] == {"quantity": "Quantity is required"}


def test_invalid_product_payload(client):
    resp = client.post(f"{API}/products", json={"name": "", "price": -3, "sku": "X"})
    assert resp.status_code == 400
    details = resp.json()["details"]
    assert set(details) == {"name", "price"}


def test_malformed_json_types(client):
    resp = client.post(f"{API}/products", json={"name": "X", "price": "cheap", "sku": "X"})
    assert resp.status_code == 400
    assert "price" in resp.json()["details"]


def test_unknown_product_is_404(client):
    resp = client.get(f"{API}/products/12345")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Not Found"
    assert resp.json()["message"] == "Product not found with id: 12345"


def test_update_and_delete_product(client, phone):
    pid = phone["id"]
    resp = client.put(
        f"{API}/products/{pid}",
        json={"name": "Smartphone Max", "price": 999, "sku": "PHONE-001", "low_stock_threshold": 60},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["category_id"] is None
    assert body["inventory_quantity"] == 50
    assert body["low_stock"] is True

    assert client.delete(f"{API}/products/{pid}").status_code == 204
    assert client.get(f"{API}/products/{pid}").status_code == 404


def test_category_delete_guard(client, phone, electronics):
    resp = client.delete(f"{API}/categories/{electronics['id']}")
    assert resp.status_code == 409
    assert resp.json()["error"] == "Conflict"

    page = client.get(f"{API}/categories/{electronics['id']}/products").json()
    assert page["total_elements"] == 1
    assert page["items"][0]["id"] == phone["id"]


def test_duplicate_category(client, electronics):
    resp = client.post(f"{API}/categories", json={"name": "Electronics"})
    assert resp.status_code == 409


def test_search_precedence_over_http(client, electronics):
    other = client.post(f"{API}/categories", json={"name": "Accessories"}).json()
    client.post(
        f"{API}/products",
        json={"name": "Smartphone Pro", "price": 899.99, "sku": "P-1", "category_id": other["id"]},
    )
    client.post(
        f"{API}/products",
        json={"name": "Tablet", "price": 499, "sku": "T-1", "category_id": electronics["id"]},
    )
    resp = client.get(f"{API}/products/search", params={"name": "phone", "category_id": electronics["id"]})
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()["items"]] == ["Smartphone Pro"]


def test_listing_pagination_params(client):
    for i in range(3):
        client.post(f"{API}/products", json={"name": f"Item {i}", "price": 1 + i, "sku": f"S-{i}"})
    page = client.get(f"{API}/products", params={"page": 0, "size": 2, "sort_by": "name", "sort_dir": "desc"}).json()
    assert [p["name"] for p in page["items"]] == ["Item 2", "Item 1"]
    assert page["total_pages"] == 2

    resp = client.get(f"{API}/products", params={"sort_by": "nope"})
    assert resp.status_code == 400
    assert resp.json()["details"]["sort_by"] == "nope"


def test_assign_category_via_query_param(client, electronics):
    product = client.post(f"{API}/products", json={"name": "Cable", "price": 5, "sku": "C-1"}).json()
    resp = client.put(f"{API}/products/{product['id']}/category", params={"category_id": electronics["id"]})
    assert resp.status_code == 200
    assert resp.json()["category_name"] == "Electronics"

    resp = client.put(f"{API}/products/{product['id']}/category", params={"category_id": 999})
    assert resp.status_code == 404


def test_supplier_endpoints(client):
    resp = client.post(
        f"{API}/suppliers",
        json={"name": "Acme", "contact_person": "Jane Doe", "email": "jane@acme.example", "city": "Lagos"},
    )
    assert resp.status_code == 201, resp.text
    acme = resp.json()
    assert acme["active"] is True
    assert acme["product_count"] == 0

    assert client.post(f"{API}/suppliers", json={"name": "ACME", "contact_person": "X"}).status_code == 409
    assert client.get(f"{API}/suppliers/exists", params={"name": "acme"}).json() is True

    product = client.post(
        f"{API}/products", json={"name": "Anvil", "price": 99, "sku": "ANV-1", "supplier_id": acme["id"]}
    ).json()
    assert product["supplier_name"] == "Acme"

    view = client.get(f"{API}/suppliers/{acme['id']}/with-products").json()
    assert view["product_count"] == 1
    assert view["products"][0]["sku"] == "ANV-1"
    assert client.get(f"{API}/suppliers/{acme['id']}/products").json()["total_elements"] == 1

    assert client.delete(f"{API}/suppliers/{acme['id']}").status_code == 409

    assert client.put(f"{API}/suppliers/{acme['id']}/deactivate").json()["active"] is False
    assert client.get(f"{API}/suppliers/dropdown").json() == []
    assert client.get(f"{API}/suppliers/active").json()["total_elements"] == 0
    found = client.get(f"{API}/suppliers/search", params={"city": "LAGOS", "active": False}).json()
    assert [s["name"] for s in found["items"]] == ["Acme"]
    assert client.put(f"{API}/suppliers/{acme['id']}/activate").json()["active"] is True

    listing = client.get(f"{API}/suppliers").json()
    assert listing["items"][0]["product_count"] == 1


def test_supplier_validation(client):
    resp = client.post(f"{API}/suppliers", json={"name": "Acme", "contact_person": "Jane", "email": "nope"})
    assert resp.status_code == 400
    assert resp.json()["details"] == {"email": "Email should be valid"}
