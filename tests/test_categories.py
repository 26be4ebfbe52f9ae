"""Category listing, creation and the in-use deletion guard."""

from __future__ import annotations

import logging

import pytest

import crud
from conftest import add_expense, login, signup
from database import Category
from errors import CategoryInUse, NotFound


def test_list_is_sorted_by_name(client, user):
    client.post("/categories", json={"name": "Alpha"})
    response = client.get("/categories")

    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == sorted(names)
    assert names[0] == "Alpha"
    assert set(response.json()[0]) == {"id", "name"}


def test_create_category(client, user):
    response = client.post("/categories", json={"name": "Travel"})

    assert response.status_code == 201
    assert response.json()["name"] == "Travel"


def test_duplicate_name_is_rejected_case_sensitively(client, user):
    duplicate = client.post("/categories", json={"name": "Food"})
    different_case = client.post("/categories", json={"name": "food"})

    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "A category with this name already exists"}
    assert different_case.status_code == 201


def test_blank_name_is_rejected(client, user):
    assert client.post("/categories", json={"name": "   "}).status_code == 400


def test_categories_require_session(client):
    assert client.get("/categories").status_code == 401
    assert client.post("/categories", json={"name": "X"}).status_code == 401


def test_delete_unused_category(client, user, categories):
    response = client.delete(f"/categories/{categories['Shopping']}")

    assert response.status_code == 200
    assert "Shopping" not in [c["name"] for c in client.get("/categories").json()]


def test_delete_unknown_category(client, user):
    response = client.delete("/categories/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Category not found"}


def test_delete_category_in_use_reports_count(client, user, categories):
    food = categories["Food"]
    add_expense(client, food, 12.5, "2024-03-14")
    add_expense(client, food, 3, "2024-03-15")

    response = client.delete(f"/categories/{food}")

    assert response.status_code == 409
    assert response.json() == {"error": "Cannot delete category with expenses", "count": 2}
    assert food in [c["id"] for c in client.get("/categories").json()]


def test_other_users_category_is_not_found(client, make_client, user, categories):
    other = make_client()
    signup(other, email="bob@example.com", name="Bob")
    login(other, email="bob@example.com")

    response = other.delete(f"/categories/{categories['Bills']}")

    assert response.status_code == 404
    assert categories["Bills"] in [c["id"] for c in client.get("/categories").json()]


def test_delete_guard_directly(db, client, user, categories, caplog):
    add_expense(client, categories["Food"], 1, "2024-03-15")

    with caplog.at_level(logging.INFO, logger="expense_tracker"):
        with pytest.raises(CategoryInUse) as excinfo:
            crud.delete_category(db, user["id"], categories["Food"])
    assert excinfo.value.count == 1
    assert "Refused to delete category in use" in caplog.text

    with pytest.raises(NotFound):
        crud.delete_category(db, "someone-else", categories["Bills"])

    crud.delete_category(db, user["id"], categories["Bills"])
    assert db.get(Category, categories["Bills"]) is None


def test_duplicate_lost_to_a_concurrent_insert_is_still_a_conflict(client, user, monkeypatch):
    # the existence check misses; the unique constraint catches the duplicate
    monkeypatch.setattr(crud, "_category_named", lambda session, user_id, name: None)

    response = client.post("/categories", json={"name": "Food"})

    assert response.status_code == 400
    assert response.json() == {"error": "A category with this name already exists"}
    assert [c["name"] for c in client.get("/categories").json()].count("Food") == 1
