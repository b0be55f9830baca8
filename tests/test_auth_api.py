from fastapi.testclient import TestClient

from app.main import create_app
from tests.conftest import DEFAULT_PASSWORD, make_settings


def test_signup_returns_token_and_public_user(client):
    response = client.post("/signup", json={"email": "a@b.com", "password": "secret1"})

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["email"] == "a@b.com"
    assert body["user"]["id"]
    assert body["user"]["created_at"]
    assert "password" not in body["user"]


def test_second_signup_with_same_email_conflicts(client):
    payload = {"email": "a@b.com", "password": "secret1"}
    assert client.post("/signup", json=payload).status_code == 201

    response = client.post("/signup", json=payload)

    assert response.status_code == 409
    assert response.json() == {"error": "User with this email already exists"}


def test_signup_validation(client):
    cases = [
        {"email": "not-an-email", "password": "secret1"},
        {"email": "a@b.com", "password": "short"},
        {"email": "a@b.com"},
        {"password": "secret1"},
        {"email": "a@b.com", "password": "x" * 73},
    ]
    for payload in cases:
        response = client.post("/signup", json=payload)
        assert response.status_code == 400, payload
        assert response.json()["error"].startswith("Invalid request")


def test_signup_without_body(client):
    response = client.post("/signup")

    assert response.status_code == 400
    assert "error" in response.json()


def test_login_with_correct_credentials(client, signup):
    created = signup("saver@mail.com")

    response = client.post("/login", json={"email": "saver@mail.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["user"] == created["user"]


def test_login_failures_are_indistinguishable(client, signup):
    signup("saver@mail.com")

    wrong_password = client.post("/login", json={"email": "saver@mail.com", "password": "wrong-one"})
    unknown_email = client.post("/login", json={"email": "nobody@mail.com", "password": DEFAULT_PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_login_validation(client):
    assert client.post("/login", json={"email": "bad", "password": "secret1"}).status_code == 400
    assert client.post("/login", json={"email": "a@b.com", "password": ""}).status_code == 400


def test_password_hash_is_never_returned(client, signup):
    created = signup("saver@mail.com")
    user_id = created["user"]["id"]
    headers = {"Authorization": f"Bearer {created['token']}"}

    responses = [
        client.post("/login", json={"email": "saver@mail.com", "password": DEFAULT_PASSWORD}),
        client.get("/users"),
        client.get("/users/search", params={"email": "saver@mail.com"}),
        client.get(f"/users/{user_id}"),
        client.get("/me", headers=headers),
    ]
    for response in responses:
        assert response.status_code == 200
        assert "$2b$" not in response.text
        assert "password" not in response.text


def test_logout_returns_user_id(client, signup):
    created = signup("saver@mail.com")

    response = client.post("/logout", headers={"Authorization": f"Bearer {created['token']}"})

    assert response.status_code == 200
    assert response.json() == {"message": "Successfully logged out", "user_id": created["user"]["id"]}


def test_logout_requires_a_well_formed_bearer_header(client, signup):
    token = signup("saver@mail.com")["token"]

    missing = client.post("/logout")
    assert missing.status_code == 401
    assert missing.json() == {"error": "No authorization header provided"}

    for header in [f"Token {token}", "Bearer", f"bearer {token}", f"Bearer {token} extra"]:
        response = client.post("/logout", headers={"Authorization": header})
        assert response.status_code == 401, header
        assert response.headers["WWW-Authenticate"] == "Bearer"


def test_logout_with_invalid_token(client):
    response = client.post("/logout", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert "error" in response.json()


def test_token_still_works_after_logout_by_default(client, signup):
    headers = {"Authorization": f"Bearer {signup('saver@mail.com')['token']}"}

    assert client.post("/logout", headers=headers).status_code == 200

    assert client.get("/goals", headers=headers).status_code == 200
    assert client.post("/logout", headers=headers).status_code == 200


def test_logout_revokes_token_when_enabled():
    app = create_app(settings=make_settings(REVOKE_TOKENS_ON_LOGOUT=True))
    with TestClient(app) as client:
        token = client.post("/signup", json={"email": "a@b.com", "password": "secret1"}).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert client.post("/logout", headers=headers).status_code == 200

        response = client.get("/goals", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Token has been revoked"}
        assert client.post("/logout", headers=headers).status_code == 401


def test_me_returns_current_user(client, signup):
    created = signup("saver@mail.com")

    response = client.get("/me", headers={"Authorization": f"Bearer {created['token']}"})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == created["user"]["id"]
    assert user["email"] == "saver@mail.com"
    assert "updated_at" in user


def test_me_requires_token(client):
    assert client.get("/me").status_code == 401


def test_me_for_deleted_account(client, store, signup):
    created = signup("saver@mail.com")
    store.delete_user("saver@mail.com")

    response = client.get("/me", headers={"Authorization": f"Bearer {created['token']}"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
