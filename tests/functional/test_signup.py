def test_read_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to Shopfront"}


# PLAIN SIGNUP ENDPOINT TESTS
def test_signup_success(client, test_user_data):
    response = client.post("/api/signup", json=test_user_data)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["email"] == test_user_data["email"]
    assert body["user"]["name"] == test_user_data["name"]
    assert set(body["user"]) == {"id", "name", "email"}


def test_signup_duplicate_email(client, test_user_data):
    response = client.post("/api/signup", json=test_user_data)
    assert response.status_code == 201

    response = client.post("/api/signup", json={**test_user_data, "name": "Other", "password": "another-pass"})
    assert response.status_code == 400
    assert response.json() == {"error": "User already exists with this email"}


def test_signup_missing_fields(client):
    response = client.post("/api/signup", json={"email": "someone@example.com"})
    assert response.status_code == 400
    assert "error" in response.json()


def test_signup_invalid_data(client):
    invalid_data = {
        "name": "",
        "email": "not_an_email",
        "password": "short",
    }
    response = client.post("/api/signup", json=invalid_data)
    assert response.status_code == 400
    assert "Invalid email format" in response.json()["error"]


def test_signup_wrong_types(client):
    response = client.post("/api/signup", json={"name": ["x"], "email": 5, "password": None})
    assert response.status_code == 400
    assert "error" in response.json()


def test_signup_then_rpc_login(client, test_user_data):
    client.post("/api/signup", json=test_user_data)

    response = client.post("/api/rpc/auth.login", json={
        "email": test_user_data["email"],
        "password": test_user_data["password"],
    })
    assert response.status_code == 200
    assert response.json()["result"]["user"]["email"] == test_user_data["email"]


def test_signup_long_password(client, test_user_data):
    test_user_data["password"] = "p" * 80
    response = client.post("/api/signup", json=test_user_data)
    assert response.status_code == 201

    response = client.post("/api/rpc/auth.login", json={
        "email": test_user_data["email"],
        "password": test_user_data["password"],
    })
    assert response.status_code == 200


def test_signup_array_body(client):
    response = client.post("/api/signup", json=["a", "b"])
    assert response.status_code == 400
    assert response.json() == {"error": "Input must be a JSON object"}


def test_signup_malformed_json(client):
    response = client.post(
        "/api/signup",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_signup_store_failure(client, test_user_data, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from shopfront.services import auth

    def db_down(db, email):
        raise OperationalError("SELECT", {}, Exception("db down"))

    monkeypatch.setattr(auth, "get_user_by_email", db_down)
    response = client.post("/api/signup", json=test_user_data)

    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong"}


def test_signup_unexpected_failure(client, test_user_data, monkeypatch):
    from shopfront.routes import signup

    def explode(*args, **kwargs):
        raise RuntimeError("hash backend missing")

    monkeypatch.setattr(signup, "signup_user", explode)
    response = client.post("/api/signup", json=test_user_data)

    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong"}
