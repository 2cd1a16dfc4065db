"""
Transaction history and profile tests.
"""

from datetime import UTC, datetime, timedelta

import pytest

from core.audit import list_transactions, record_transaction
from core.security import hash_password
from db.models import TransactionType, User


@pytest.fixture
def history(test_db_session, test_user):
    """Five sandbox balance checks and two live payments, oldest first."""
    rows = []
    for i in range(5):
        rows.append(
            record_transaction(
                test_db_session,
                user_id=test_user.id,
                transaction_id=f"balance_{i}",
                type=TransactionType.balance_check,
                status="completed",
                environment="sandbox",
            )
        )
    for i in range(2):
        rows.append(
            record_transaction(
                test_db_session,
                user_id=test_user.id,
                transaction_id=f"PAYID-{i}",
                type=TransactionType.payment,
                status="created",
                environment="live",
                amount=12.5,
                currency="EUR",
            )
        )
    # spread timestamps so ordering does not depend on clock resolution
    base = datetime.now(UTC) - timedelta(hours=1)
    for offset, row in enumerate(rows):
        row.created_at = base + timedelta(minutes=offset)
    test_db_session.commit()
    return rows


def test_history_newest_first(client, auth_headers, history):
    response = client.get("/transaction/history", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 7
    assert data["hasMore"] is False
    ids = [t["transactionId"] for t in data["transactions"]]
    assert ids == [
        "PAYID-1", "PAYID-0", "balance_4", "balance_3", "balance_2", "balance_1", "balance_0",
    ]
    payment = data["transactions"][0]
    assert payment["type"] == "payment"
    assert payment["amount"] == 12.5
    assert payment["currency"] == "EUR"
    assert data["transactions"][-1]["amount"] is None


def test_history_pagination(client, auth_headers, history):
    response = client.get(
        "/transaction/history", params={"limit": 3, "offset": 2}, headers=auth_headers
    )
    data = response.json()

    assert [t["transactionId"] for t in data["transactions"]] == [
        "balance_4", "balance_3", "balance_2",
    ]
    assert data["total"] == 7
    assert data["hasMore"] is True


def test_history_environment_filter(client, auth_headers, history):
    response = client.get(
        "/transaction/history", params={"environment": "live"}, headers=auth_headers
    )
    data = response.json()

    assert data["total"] == 2
    assert {t["environment"] for t in data["transactions"]} == {"live"}


def test_history_ignores_unknown_environment_filter(client, auth_headers, history):
    response = client.get(
        "/transaction/history", params={"environment": "all"}, headers=auth_headers
    )
    assert response.json()["total"] == 7


def test_history_is_per_user(test_db_session, history):
    other = User(email="other@example.com", password_hash=hash_password("x" * 8))
    test_db_session.add(other)
    test_db_session.commit()

    rows, total = list_transactions(test_db_session, other.id)
    assert rows == []
    assert total == 0


def test_history_rejects_bad_limit(client, auth_headers):
    response = client.get(
        "/transaction/history", params={"limit": 0}, headers=auth_headers
    )
    assert response.status_code == 422


def test_profile(client, auth_headers, test_user):
    response = client.get("/user/profile", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(test_user.id)
    assert data["email"] == "owner@example.com"
    assert data["firstName"] == "Olive"
    assert data["lastName"] == "Owner"
    assert "createdAt" in data
    assert "passwordHash" not in data


def test_profile_for_deleted_user(client, auth_headers, test_user, test_db_session):
    test_db_session.delete(test_user)
    test_db_session.commit()

    response = client.get("/user/profile", headers=auth_headers)
    assert response.status_code == 404
