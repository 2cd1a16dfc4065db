"""
Balance endpoint tests.
"""

from unittest.mock import patch

from conftest import BALANCES, MockResponse, reporting_get, token_response
from db.models import Transaction


@patch("payments.paypal_client.requests.get")
@patch("payments.paypal_client.requests.post")
def test_balance_from_paypal(mock_post, mock_get, client, auth_headers, sandbox_credential):
    mock_post.return_value = token_response()
    mock_get.side_effect = reporting_get()

    response = client.post(
        "/paypal/balance",
        json={"environment": "sandbox", "lookbackDays": 14},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["balances"] == [{"currency": "EUR", "value": "120.50"}]
    assert data["lookbackDays"] == 14
    assert data["transactionCount"] == 1
    tx = data["recentTransactions"][0]
    assert tx["transactionId"] == "9XY12345AB678901C"
    assert tx["type"] == "debit"
    assert tx["eventCode"] == "T0006"


@patch("payments.paypal_client.requests.get")
@patch("payments.paypal_client.requests.post")
def test_balance_defaults_to_30_days(mock_post, mock_get, client, auth_headers, sandbox_credential):
    mock_post.return_value = token_response()
    mock_get.side_effect = reporting_get()

    response = client.post(
        "/paypal/balance", json={"environment": "sandbox"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["lookbackDays"] == 30


@patch("payments.paypal_client.requests.get")
@patch("payments.paypal_client.requests.post")
def test_balance_falls_back_to_demo_data(
    mock_post, mock_get, client, auth_headers, sandbox_credential, test_db_session
):
    mock_post.return_value = token_response()
    mock_get.side_effect = reporting_get(
        balances=MockResponse(500, text="INTERNAL_SERVICE_ERROR"),
        transactions=MockResponse(403, text="NOT_AUTHORIZED"),
    )

    response = client.post(
        "/paypal/balance", json={"environment": "sandbox"}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["balances"] == [{"currency": "USD", "value": "3564.89"}]
    assert data["transactionCount"] == 3
    assert [t["transactionId"] for t in data["recentTransactions"]] == [
        "T1503202509171045",
        "T1105202509171045",
        "T1503202509171243",
    ]

    row = test_db_session.query(Transaction).one()
    assert row.type == "balance_check"
    assert row.status == "completed"
    assert row.transaction_id.startswith("balance_")
    assert row.response_data["account_id"] == "demo_account"


@patch("payments.paypal_client.requests.get")
@patch("payments.paypal_client.requests.post")
def test_balance_records_audit_row(
    mock_post, mock_get, client, auth_headers, sandbox_credential, test_db_session, test_user
):
    mock_post.return_value = token_response()
    mock_get.side_effect = reporting_get()

    client.post("/paypal/balance", json={"environment": "sandbox"}, headers=auth_headers)

    row = test_db_session.query(Transaction).one()
    assert row.user_id == test_user.id
    assert row.environment == "sandbox"
    assert row.amount is None
    assert row.response_data == BALANCES


@patch("payments.paypal_client.requests.get")
@patch("payments.paypal_client.requests.post")
def test_balance_explicit_range_is_clamped(
    mock_post, mock_get, client, auth_headers, sandbox_credential
):
    mock_post.return_value = token_response()
    mock_get.side_effect = reporting_get()

    response = client.post(
        "/paypal/balance",
        json={
            "environment": "sandbox",
            "startDate": "2025-01-01T00:00:00Z",
            "endDate": "2025-03-01T00:00:00Z",
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    params = next(
        c.kwargs["params"]
        for c in mock_get.call_args_list
        if c.args[0].endswith("/v1/reporting/transactions")
    )
    assert params["start_date"] == "2025-01-29T00:00:00.000Z"
    assert params["end_date"] == "2025-03-01T00:00:00.000Z"


def test_balance_rejects_inverted_range(client, auth_headers, sandbox_credential):
    response = client.post(
        "/paypal/balance",
        json={
            "environment": "sandbox",
            "startDate": "2025-03-01T00:00:00Z",
            "endDate": "2025-01-01T00:00:00Z",
        },
        headers=auth_headers,
    )
    assert response.status_code == 400


@patch("payments.paypal_client.requests.post")
def test_balance_token_failure(mock_post, client, auth_headers, sandbox_credential, test_db_session):
    mock_post.return_value = MockResponse(401, reason="Unauthorized")

    response = client.post(
        "/paypal/balance", json={"environment": "sandbox"}, headers=auth_headers
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "PayPal authentication failed: Unauthorized"
    assert test_db_session.query(Transaction).count() == 0


def test_balance_unknown_credential_id(client, auth_headers, sandbox_credential):
    response = client.post(
        "/paypal/balance",
        json={"environment": "sandbox", "credentialId": "4242"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Specified PayPal credentials not found"


def test_balance_malformed_credential_id(client, auth_headers, sandbox_credential):
    response = client.post(
        "/paypal/balance",
        json={"environment": "sandbox", "credentialId": "abc"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_balance_without_credentials(client, auth_headers):
    response = client.post(
        "/paypal/balance", json={"environment": "live"}, headers=auth_headers
    )
    assert response.status_code == 404


def test_balance_requires_auth(client):
    response = client.post("/paypal/balance", json={"environment": "sandbox"})
    assert response.status_code == 401
