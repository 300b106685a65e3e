import pytest
from jose import jwt

from core.errors import AuthError
from infrastructure.auth.jwt_service import JoseTokenService


def test_root_reports_api_is_up(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "API Working fine"


def test_register_then_login(client, user_data):
    """A freshly registered user can log in with the same credentials."""
    resp = client.post("/api/user/register", json=user_data)
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["user"] == {"name": "Test User"}
    assert body["token"]

    resp = client.post("/api/user/login", json={"email": user_data["email"], "password": user_data["password"]})
    body = resp.json()
    assert body["success"] is True
    assert body["user"] == {"name": "Test User"}


def test_login_email_is_case_insensitive(client, user_data):
    client.post("/api/user/register", json=user_data)
    resp = client.post("/api/user/login", json={"email": "  TEST@Example.com ", "password": user_data["password"]})
    assert resp.json()["success"] is True


@pytest.mark.parametrize("missing", ["name", "email", "password"])
def test_register_requires_all_fields(client, user_data, missing):
    payload = dict(user_data)
    payload[missing] = ""
    resp = client.post("/api/user/register", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "Please fill all the fields"}


def test_register_duplicate_email(client, user_data):
    client.post("/api/user/register", json=user_data)
    resp = client.post("/api/user/register", json={**user_data, "name": "Someone Else"})
    assert resp.json() == {"success": False, "message": "User with this email already exists"}


def test_login_wrong_password(client, user_data):
    client.post("/api/user/register", json=user_data)
    resp = client.post("/api/user/login", json={"email": user_data["email"], "password": "nope"})
    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "Invalid credentials"}


def test_login_unknown_email(client):
    resp = client.post("/api/user/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert resp.json() == {"success": False, "message": "User not found"}


def test_fresh_user_has_zero_credits(client, auth_headers):
    resp = client.get("/api/user/credits", headers=auth_headers)
    assert resp.json() == {"success": True, "credits": 0, "user": {"name": "Test User"}}


def test_initial_credits_setting_seeds_balance(test_settings, gateway, image_provider, user_data):
    from fastapi.testclient import TestClient
    from infrastructure.web.app import create_app

    test_settings.INITIAL_CREDITS = 5
    client = TestClient(create_app(test_settings, payment_provider=gateway, image_provider=image_provider))
    token = client.post("/api/user/register", json=user_data).json()["token"]
    assert client.get("/api/user/credits", headers={"token": token}).json()["credits"] == 5


def test_credits_without_token(client):
    resp = client.get("/api/user/credits")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "No token provided"}


def test_credits_with_bearer_header_is_not_accepted(client, auth_headers):
    resp = client.get("/api/user/credits", headers={"Authorization": f"Bearer {auth_headers['token']}"})
    assert resp.status_code == 401


def test_credits_with_tampered_token(client, auth_headers):
    resp = client.get("/api/user/credits", headers={"token": auth_headers["token"] + "x"})
    assert resp.status_code == 401
    assert resp.json()["message"].startswith("Token verification failed")


def test_credits_with_token_without_id(client, tokens):
    token = jwt.encode({"sub": "1"}, tokens.secret_key, algorithm="HS256")
    resp = client.get("/api/user/credits", headers={"token": token})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Invalid token structure"}


def test_credits_for_deleted_user(client, tokens):
    resp = client.get("/api/user/credits", headers={"token": tokens.issue(999)})
    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "User not found"}


def test_token_round_trip(tokens):
    assert tokens.verify(tokens.issue(42)) == 42
    assert "exp" not in jwt.get_unverified_claims(tokens.issue(42))


def test_token_errors_carry_kind(tokens):
    with pytest.raises(AuthError) as exc:
        tokens.verify(None)
    assert exc.value.kind == AuthError.MISSING

    other = JoseTokenService("another-secret")
    with pytest.raises(AuthError) as exc:
        tokens.verify(other.issue(1))
    assert exc.value.kind == AuthError.INVALID

    with pytest.raises(AuthError) as exc:
        tokens.verify(jwt.encode({"id": "abc"}, tokens.secret_key, algorithm="HS256"))
    assert exc.value.kind == AuthError.MALFORMED


def test_expired_token_is_rejected(tokens):
    token = jwt.encode({"id": 1, "exp": 0}, tokens.secret_key, algorithm="HS256")
    with pytest.raises(AuthError) as exc:
        tokens.verify(token)
    assert exc.value.kind == AuthError.INVALID


def test_expiry_claim_when_configured(tokens):
    service = JoseTokenService(tokens.secret_key, expire_minutes=30)
    claims = jwt.get_unverified_claims(service.issue(7))
    assert claims["id"] == 7
    assert "exp" in claims
