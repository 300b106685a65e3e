import sqlite3

import httpx
import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from infrastructure.auth.jwt_service import JoseTokenService
from infrastructure.db.sqlite import SQLiteUserRepository, init_db
from infrastructure.images.clipdrop_provider import ClipdropImageProvider
from infrastructure.payments.stub_provider import StubPaymentProvider
from infrastructure.web.app import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
TEST_SECRET = "test-secret"


class ClipdropStub:
    """MockTransport handler standing in for the ClipDrop text-to-image endpoint."""

    def __init__(self):
        self.calls = []
        self.response = httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})
        self.exc = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        DB_PATH=str(tmp_path / "app.db"),
        SECRET_KEY=TEST_SECRET,
        ALGORITHM="HS256",
        ACCESS_TOKEN_EXPIRE_MINUTES=0,
        INITIAL_CREDITS=0,
        CLIPDROP_API_KEY="test-clipdrop-key",
        RAZORPAY_KEY_ID="",
        RAZORPAY_KEY_SECRET="",
        PAYMENT_PROVIDER="razorpay",
        PAYMENT_STUB_AUTO_CAPTURE=False,
        CURRENCY="INR",
    )


@pytest.fixture
def clipdrop():
    return ClipdropStub()


@pytest.fixture
def image_provider(clipdrop):
    return ClipdropImageProvider("test-clipdrop-key", transport=httpx.MockTransport(clipdrop))


@pytest.fixture
def gateway():
    return StubPaymentProvider(auto_capture=False)


@pytest.fixture
def tokens():
    return JoseTokenService(TEST_SECRET)


@pytest.fixture
def app(test_settings, gateway, image_provider):
    return create_app(test_settings, payment_provider=gateway, image_provider=image_provider)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def repo(test_settings):
    init_db(test_settings.DB_PATH)
    conn = sqlite3.connect(test_settings.DB_PATH, check_same_thread=False)
    try:
        yield SQLiteUserRepository(conn)
    finally:
        conn.close()


@pytest.fixture
def user_data():
    return {"name": "Test User", "email": "test@example.com", "password": "TestPassword123!"}


@pytest.fixture
def auth_headers(client, user_data):
    resp = client.post("/api/user/register", json=user_data)
    assert resp.json()["success"] is True
    return {"token": resp.json()["token"]}


@pytest.fixture
def user_id(auth_headers, tokens):
    return tokens.verify(auth_headers["token"])
