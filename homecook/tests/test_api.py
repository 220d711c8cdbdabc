# homecook/tests/test_api.py
"""HTTP surface: routing, identity headers and the JSON error shape."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from homecook.store.base import COOK_PROFILES, MEALS, ORDERS
from homecook.store.memory import InMemoryDocumentStore
from homecook.tests.factories import meal_input
from main import app

CUSTOMER = {"X-User-Id": "cust-1", "X-User-Role": "customer", "X-User-Name": "Carla"}
OTHER_CUSTOMER = {"X-User-Id": "cust-2", "X-User-Role": "customer"}
COOK = {"X-User-Id": "cook-1", "X-User-Role": "cook", "X-User-Name": "Chef Ana"}


@pytest.fixture
def mem_store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(mem_store):
    app.state.store = mem_store
    app.state.store_healthy = None
    with TestClient(app) as c:
        yield c
    app.state.store = None
    app.state.store_healthy = None


def _seed(store, minimum=None):
    store._collection(COOK_PROFILES)["cook-1"] = {
        "id": "cook-1",
        "uid": "cook-1",
        "display_name": "Chef Ana",
        "cuisine_types": ["Indian"],
        "delivery_available": True,
        "delivery_fee": "5.00",
        "minimum_order_amount": minimum,
        "average_rating": 0.0,
        "total_reviews": 0,
    }
    meal = meal_input().model_dump(mode="json")
    meal.update(
        {
            "id": "m-1",
            "cook_id": "cook-1",
            "created_at": "2025-03-01T12:00:00+00:00",
            "updated_at": "2025-03-01T12:00:00+00:00",
        }
    )
    store._collection(MEALS)["m-1"] = meal


def _order_body(**overrides):
    body = {
        "meal_id": "m-1",
        "quantity": 3,
        "delivery": {"method": "pickup"},
        "requested_time": (datetime.now(timezone.utc) + timedelta(days=1)).isoformat(),
    }
    body.update(overrides)
    return body


def test_health_and_ready(client):
    assert client.get("/").json()["status"] == "healthy"
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["store"] in ("memory", "supabase")
    assert client.get("/ready").json() == {"ready": True, "database": "connected"}
    assert "X-Request-Id" in r.headers


def test_identity_headers_required(client):
    r = client.post("/orders", json=_order_body())
    assert r.status_code == 401
    r = client.get("/orders", headers={"X-User-Id": "x", "X-User-Role": "admin"})
    assert r.status_code == 401


def test_order_flow_over_http(client, mem_store):
    _seed(mem_store)

    r = client.post(
        "/orders",
        json=_order_body(delivery={"method": "delivery", "address": {"street": "1 Main St"}}),
        headers=CUSTOMER,
    )
    assert r.status_code == 201, r.text
    order = r.json()
    assert order["total_amount"] == "35.00"
    assert order["status"] == "new"
    assert order["delivery"]["address"]["street"] == "1 Main St"
    order_id = order["id"]

    actions = client.get(f"/orders/{order_id}/actions", headers=CUSTOMER).json()
    assert actions["can_cancel"] is True and actions["can_review"] is False

    r = client.post(f"/orders/{order_id}/status", json={"status": "confirmed"}, headers=COOK)
    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"

    r = client.post(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=COOK)
    assert r.status_code == 409
    body = r.json()
    assert body["ok"] is False and body["error"] == "illegal_transition"

    r = client.post(f"/orders/{order_id}/cancel", headers=OTHER_CUSTOMER)
    assert r.status_code == 403
    assert r.json()["error"] == "forbidden"

    r = client.post(f"/orders/{order_id}/cancel", headers=CUSTOMER)
    assert r.status_code == 200
    assert mem_store.dump(ORDERS)[0]["status"] == "cancelled"

    listed = client.get("/orders?partition=history", headers=COOK).json()
    assert [o["id"] for o in listed] == [order_id]
    assert client.get("/orders?partition=active", headers=COOK).json() == []


def test_order_errors_map_to_status_codes(client, mem_store):
    _seed(mem_store, minimum="50.00")

    r = client.post("/orders", json=_order_body(), headers=CUSTOMER)
    assert r.status_code == 422
    assert r.json()["error"] == "below_minimum_order"

    r = client.post("/orders", json=_order_body(quantity=0), headers=CUSTOMER)
    assert r.status_code == 422

    r = client.post("/orders", json=_order_body(delivery={"method": "delivery"}), headers=CUSTOMER)
    assert r.status_code == 422

    r = client.post("/orders", json=_order_body(meal_id="nope"), headers=CUSTOMER)
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"

    r = client.get("/orders/nope", headers=CUSTOMER)
    assert r.status_code == 404


def test_meal_browsing_and_cook_crud(client, mem_store):
    r = client.post("/meals", json=meal_input().model_dump(mode="json"), headers=COOK)
    assert r.status_code == 201
    meal_id = r.json()["id"]

    r = client.post("/meals", json=meal_input().model_dump(mode="json"), headers=CUSTOMER)
    assert r.status_code == 403

    listings = client.get("/meals", params={"lat": 51.5, "lng": -0.12, "radius_km": 0}).json()
    assert [item["meal"]["id"] for item in listings] == [meal_id]
    assert listings[0]["distance_km"] is None

    r = client.patch(f"/meals/{meal_id}/availability", json={"available": False}, headers=COOK)
    assert r.json()["available"] is False
    assert client.get("/meals").json() == []

    assert client.delete(f"/meals/{meal_id}", headers=COOK).status_code == 204
    assert client.get(f"/meals/{meal_id}").status_code == 404


def test_review_requires_completed_order(client, mem_store):
    _seed(mem_store)
    order_id = client.post("/orders", json=_order_body(), headers=CUSTOMER).json()["id"]
    review = {"order_id": order_id, "rating": 5, "comment": "Delicious and generous portions"}

    r = client.post("/reviews", json=review, headers=CUSTOMER)
    assert r.status_code == 409
    assert r.json()["error"] == "order_not_completed"

    for status in ("confirmed", "preparing", "ready", "completed"):
        client.post(f"/orders/{order_id}/status", json={"status": status}, headers=COOK)

    r = client.post("/reviews", json=review, headers=CUSTOMER)
    assert r.status_code == 201
    r = client.post("/reviews", json=review, headers=CUSTOMER)
    assert r.status_code == 409
    assert r.json()["error"] == "already_reviewed"

    profile = client.get("/cooks/cook-1/profile").json()
    assert profile["total_reviews"] == 1 and profile["average_rating"] == 5.0
    assert len(client.get("/cooks/cook-1/reviews").json()) == 1

    draft = client.get(f"/orders/{order_id}/reorder", headers=CUSTOMER).json()
    assert draft["meal_id"] == "m-1" and draft["quantity"] == 3


def test_cook_order_list_defaults_to_active(client, mem_store):
    _seed(mem_store)
    open_id = client.post("/orders", json=_order_body(), headers=CUSTOMER).json()["id"]
    closed_id = client.post("/orders", json=_order_body(), headers=CUSTOMER).json()["id"]
    client.post(f"/orders/{closed_id}/cancel", headers=CUSTOMER)

    assert [o["id"] for o in client.get("/orders", headers=COOK).json()] == [open_id]
    assert len(client.get("/orders?partition=all", headers=COOK).json()) == 2
    assert len(client.get("/orders", headers=CUSTOMER).json()) == 2
