"""
tests/integration/test_categories.py — Per-user category endpoints.

Covers default seeding, case-insensitive duplicate detection, partial
updates, the last-category guard, and reassignment of expenses on delete.
"""

from __future__ import annotations

from .conftest import (
    category_id_by_name,
    list_categories,
    make_category,
    make_personal_expense,
    register,
)


def test_first_listing_seeds_eight_defaults(client):
    alice = register(client, "Alice")

    categories = list_categories(client, alice["id"])

    assert len(categories) == 8
    names = [c["name"] for c in categories]
    assert names == sorted(names, key=str.lower)
    assert "Other" in names
    food = next(c for c in categories if c["name"] == "Food & Dining")
    assert food["color"] == "#FF6B6B"
    assert food["icon"] == "utensils"

    # A second listing does not seed again.
    assert len(list_categories(client, alice["id"])) == 8


def test_categories_of_unknown_user_is_404(client):
    resp = client.get("/api/v1/users/user-missing/categories")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "USER_NOT_FOUND"


def test_create_category(client):
    alice = register(client, "Alice")

    resp = make_category(client, alice["id"], "Travel", color="#00AAFF")

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["name"] == "Travel"
    assert data["color"] == "#00AAFF"
    assert len(list_categories(client, alice["id"])) == 9


def test_create_duplicate_name_is_conflict_regardless_of_case(client):
    alice = register(client, "Alice")

    resp = make_category(client, alice["id"], "shopping")

    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "DUPLICATE_CATEGORY"


def test_create_rejects_bad_color(client):
    alice = register(client, "Alice")

    resp = make_category(client, alice["id"], "Travel", color="blue")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["field"] == "color"


def test_patch_updates_only_given_fields(client):
    alice = register(client, "Alice")
    housing_id = category_id_by_name(client, alice["id"], "Housing")

    resp = client.patch(
        f"/api/v1/users/{alice['id']}/categories/{housing_id}",
        json={"name": "Rent"},
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["name"] == "Rent"
    assert data["color"] == "#4E67EB"
    assert data["icon"] == "home"


def test_patch_to_existing_name_is_conflict(client):
    alice = register(client, "Alice")
    housing_id = category_id_by_name(client, alice["id"], "Housing")

    resp = client.patch(
        f"/api/v1/users/{alice['id']}/categories/{housing_id}",
        json={"name": "OTHER"},
    )

    assert resp.status_code == 409


def test_delete_reassigns_expenses_to_other(client):
    alice = register(client, "Alice")
    food_id = category_id_by_name(client, alice["id"], "Food & Dining")
    other_id = category_id_by_name(client, alice["id"], "Other")
    expense = make_personal_expense(client, alice["id"], food_id, "12.50").get_json()["data"]

    resp = client.delete(f"/api/v1/users/{alice['id']}/categories/{food_id}")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["reassigned_to"] == other_id
    moved = client.get(f"/api/v1/users/{alice['id']}/expenses/{expense['id']}").get_json()["data"]
    assert moved["category_id"] == other_id
    assert len(list_categories(client, alice["id"])) == 7


def test_delete_last_category_is_refused(client):
    alice = register(client, "Alice")
    categories = list_categories(client, alice["id"])
    for category in categories[:-1]:
        resp = client.delete(f"/api/v1/users/{alice['id']}/categories/{category['id']}")
        assert resp.status_code == 200

    last = categories[-1]
    resp = client.delete(f"/api/v1/users/{alice['id']}/categories/{last['id']}")

    assert resp.status_code == 422
    assert resp.get_json()["error"]["code"] == "LAST_CATEGORY"


def test_cannot_touch_another_users_category(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    alice_food = category_id_by_name(client, alice["id"], "Food & Dining")
    list_categories(client, bob["id"])

    resp = client.delete(f"/api/v1/users/{bob['id']}/categories/{alice_food}")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "CATEGORY_NOT_FOUND"
