"""Test configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.security import hash_password, issue_token
from core.settings import Settings
from core.vault import CredentialVault
from db.models import Base, PayPalCredential, User
from main import app

TEST_JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"
TEST_ENCRYPTION_KEY = "test-encryption-key-0123456789abcdef"


class MockResponse:
    """Stand-in for requests.Response with an explicit status code."""

    def __init__(self, status_code, json_data=None, text="", reason=None):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self.reason = reason or {
            200: "OK",
            201: "Created",
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            500: "Internal Server Error",
        }.get(status_code, "")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


SANDBOX = "https://api-m.sandbox.paypal.com"

BALANCES = {
    "balances": [
        {
            "currency": "EUR",
            "primary": True,
            "total_balance": {"currency_code": "EUR", "value": "120.50"},
        }
    ]
}

TRANSACTIONS = {
    "transaction_details": [
        {
            "transaction_info": {
                "transaction_id": "9XY12345AB678901C",
                "transaction_event_code": "T0006",
                "transaction_status": "S",
                "transaction_amount": {"currency_code": "EUR", "value": "-10.00"},
                "fee_amount": {"currency_code": "EUR", "value": "-0.35"},
                "transaction_updated_date": "2025-09-10T08:00:00+0000",
            }
        }
    ]
}


def token_response():
    return MockResponse(200, {"access_token": "A21AAtest", "token_type": "Bearer"})


def reporting_get(balances=None, transactions=None):
    """requests.get side effect serving the two reporting endpoints."""

    def _get(url, **kwargs):
        if url.endswith("/v1/reporting/balances"):
            return balances or MockResponse(200, BALANCES)
        if url.endswith("/v1/reporting/transactions"):
            return transactions or MockResponse(200, TRANSACTIONS)
        raise AssertionError(f"unexpected GET {url}")

    return _get


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "DATABASE_URL": "sqlite:///:memory:",
            "JWT_SECRET": TEST_JWT_SECRET,
            "ENCRYPTION_KEY": TEST_ENCRYPTION_KEY,
            "APP_NAME": "Test Dashboard",
            "ENVIRONMENT": "development",
            "DISABLE_TRACING": "true",
            "DEBUG": "true",
        }
    )

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings():
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        JWT_SECRET=TEST_JWT_SECRET,
        ENCRYPTION_KEY=TEST_ENCRYPTION_KEY,
        APP_NAME="Test Dashboard",
        DEBUG=True,
        ENVIRONMENT="development",
    )


@pytest.fixture
def vault():
    return CredentialVault(TEST_ENCRYPTION_KEY)


@pytest.fixture
def test_db_engine():
    """Create a test database engine and setup tables."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def test_db_session(test_db_engine):
    """Create test database session using the shared engine."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(mock_settings, test_db_engine):
    """Test client with proper database setup."""
    from db.session import get_db, reset_engines

    reset_engines()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with patch("core.dependencies._settings", mock_settings):
        with TestClient(app) as test_client:
            yield test_client

    app.dependency_overrides.clear()
    reset_engines()


@pytest.fixture
def test_user(test_db_session):
    user = User(
        email="owner@example.com",
        password_hash=hash_password("correct-horse"),
        first_name="Olive",
        last_name="Owner",
    )
    test_db_session.add(user)
    test_db_session.commit()
    test_db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    token = issue_token(test_user.id, test_user.email, TEST_JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sandbox_credential(test_db_session, test_user, vault):
    """One sandbox credential, created a minute ago."""
    cred = PayPalCredential(
        user_id=test_user.id,
        environment="sandbox",
        client_id_encrypted=vault.encrypt("sandbox-client-id"),
        client_secret_encrypted=vault.encrypt("sandbox-client-secret"),
        remark="main",
        created_at=datetime.now(UTC) - timedelta(minutes=1),
    )
    test_db_session.add(cred)
    test_db_session.commit()
    test_db_session.refresh(cred)
    return cred


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (SQLite)")
    config.addinivalue_line("markers", "slow: marks tests as slow running")
