import pytest
from sqlmodel import Session, select

from shopfront.database import engine
from shopfront.models import Category
from shopfront.seed import seed_categories


@pytest.fixture
def seeded_categories():
    with Session(engine) as db:
        seed_categories(db, count=100, seed=11)
        rows = db.exec(select(Category)).all()
        return sorted(({"id": c.id, "name": c.name} for c in rows), key=lambda c: c["name"])


@pytest.fixture
def logged_in(client, test_user_data):
    client.post("/api/rpc/auth.signup", json=test_user_data)
    response = client.post("/api/rpc/auth.login", json={
        "email": test_user_data["email"],
        "password": test_user_data["password"],
    })
    assert response.status_code == 200
    return response.json()["result"]["user"]


def save(client, ids):
    return client.post("/api/rpc/categories.saveUserInterests", json={"categoryIds": ids})


def interest_ids(client):
    response = client.get("/api/rpc/categories.getUserInterests")
    assert response.status_code == 200
    return {item["id"] for item in response.json()["result"]["interests"]}


# LIST TESTS
def test_list_first_page(client, seeded_categories):
    response = client.post("/api/rpc/categories.list", json={"page": 1, "limit": 6})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["categories"] == seeded_categories[:6]
    assert result["pagination"] == {
        "page": 1,
        "limit": 6,
        "total": 100,
        "totalPages": 17,
        "hasNextPage": True,
        "hasPreviousPage": False,
    }


def test_list_last_page_via_query_string(client, seeded_categories):
    response = client.get("/api/rpc/categories.list?page=17&limit=6")

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["categories"] == seeded_categories[96:]
    assert result["pagination"]["hasNextPage"] is False
    assert result["pagination"]["hasPreviousPage"] is True


def test_list_defaults(client, seeded_categories):
    response = client.post("/api/rpc/categories.list")
    assert response.status_code == 200
    assert len(response.json()["result"]["categories"]) == 6


def test_list_is_public(client, seeded_categories):
    response = client.get("/api/rpc/categories.list")
    assert response.status_code == 200


@pytest.mark.parametrize("payload", [{"page": 0}, {"limit": 101}, {"limit": 0}, {"page": "first"}])
def test_list_invalid_input(client, payload):
    response = client.post("/api/rpc/categories.list", json=payload)
    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "ValidationError"


# INTEREST TESTS
def test_interests_require_login(client, seeded_categories):
    response = client.get("/api/rpc/categories.getUserInterests")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"

    response = save(client, [seeded_categories[0]["id"]])
    assert response.status_code == 401


def test_interests_with_bad_token(client, seeded_categories):
    client.cookies.set("session_token", "forged")
    response = client.get("/api/rpc/categories.getUserInterests")
    assert response.status_code == 401


def test_interests_start_empty(client, logged_in):
    assert interest_ids(client) == set()


def test_save_replaces_interests(client, logged_in, seeded_categories):
    a, b, c = (item["id"] for item in seeded_categories[:3])

    response = save(client, [a, b])
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["success"] is True
    assert result["message"] == "Interests updated successfully"
    assert {item["id"] for item in result["interests"]} == {a, b}

    response = save(client, [b, c])
    assert response.status_code == 200
    assert interest_ids(client) == {b, c}


def test_save_same_set_twice(client, logged_in, seeded_categories):
    ids = [item["id"] for item in seeded_categories[:2]]
    assert save(client, ids).status_code == 200
    assert save(client, ids).status_code == 200
    assert interest_ids(client) == set(ids)


def test_save_with_invalid_id_changes_nothing(client, logged_in, seeded_categories):
    a, b = (item["id"] for item in seeded_categories[:2])
    save(client, [a])

    response = save(client, [b, "does-not-exist"])

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["kind"] == "ValidationError"
    assert error["message"] == "Invalid category IDs: does-not-exist"
    assert error["details"]["invalid_ids"] == ["does-not-exist"]
    assert interest_ids(client) == {a}


def test_save_requires_category_ids(client, logged_in):
    response = client.post("/api/rpc/categories.saveUserInterests", json={})
    assert response.status_code == 400


def test_bearer_token_works_for_rpc(client, test_user_data, seeded_categories):
    client.post("/api/rpc/auth.signup", json=test_user_data)
    response = client.post("/api/token", data={
        "username": test_user_data["email"],
        "password": test_user_data["password"],
    })
    token = response.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = client.post(
        "/api/rpc/categories.saveUserInterests",
        json={"categoryIds": [seeded_categories[0]["id"]]},
        headers=headers,
    )
    assert response.status_code == 200

    response = client.get("/api/rpc/categories.getUserInterests", headers=headers)
    assert response.json()["result"]["interests"] == [seeded_categories[0]]
