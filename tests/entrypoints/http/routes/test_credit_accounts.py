"""
Test suite for the /v1/credit-accounts routes.

Routes are exercised in isolation with mocked use cases:
- Payloads are validated by Pydantic before reaching the use case
- The mapper output is what the use case receives
- Domain errors surface with the status of their error family
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from credit_ledger.domain.credit_account import (
    AccountAlreadyExists,
    AccountNotFound,
    CreditAccount,
    CreditLimitExceeded,
)
from credit_ledger.domain.statement import AccountStatement, AccountSummary
from credit_ledger.domain.transaction import (
    PaymentMethod,
    PaymentStatus,
    Transaction,
    TransactionType,
)
from credit_ledger.entrypoints.http.dependencies import (
    get_accrue_interest_use_case,
    get_account_statement_use_case,
    get_account_summary_use_case,
    get_apply_late_fee_use_case,
    get_credit_account_use_case,
    get_next_due_date_use_case,
    get_open_credit_account_use_case,
    get_post_payment_use_case,
    get_post_purchase_use_case,
    get_update_credit_account_terms_use_case,
)
from credit_ledger.entrypoints.http.exception_handlers import register_exception_handlers
from credit_ledger.entrypoints.http.routes.credit_accounts import router
from credit_ledger.use_cases.accrue_interest import AccrueInterestResponse
from credit_ledger.use_cases.post_payment import PostPaymentResponse
from credit_ledger.use_cases.post_purchase import PostPurchaseResponse

AT = datetime(2026, 1, 10, 12, tzinfo=timezone.utc)


@pytest.fixture
def app() -> FastAPI:
    """Create a test FastAPI app with the credit accounts router and exception handlers."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_use_case() -> Mock:
    """Mock use case for testing routes in isolation."""
    return Mock()


@pytest.fixture
def account(make_account: Callable[..., CreditAccount]) -> CreditAccount:
    return make_account(id=42)


def _purchase(amount: str) -> Transaction:
    return Transaction(
        id=7,
        account_id=42,
        transaction_type=TransactionType.PURCHASE,
        amount=Decimal(amount),
        description="Purchase",
        occurred_at=AT,
    )


OPEN_PAYLOAD = {
    "client_id": 1001,
    "establishment_id": 1,
    "credit_limit": "1000.00",
    "monthly_due_day": 15,
    "annual_interest_rate": "36.5",
    "interest_type": "NOMINAL",
    "credit_type": "SHORT_TERM",
}


# ==============================================================================
# Account management
# ==============================================================================


def test_open_credit_account_returns_201(
    app: FastAPI, client: TestClient, mock_use_case: Mock, account: CreditAccount
) -> None:
    mock_use_case.execute.return_value = account
    app.dependency_overrides[get_open_credit_account_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts", json=OPEN_PAYLOAD)

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 42
    assert data["credit_limit"] == "1000.00"
    assert data["available_credit"] == "1000.00"

    request = mock_use_case.execute.call_args.args[0]
    assert request.client_id == 1001
    assert request.credit_limit == Decimal("1000.00")


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("credit_limit", "-5"),
        ("credit_limit", "10.001"),
        ("monthly_due_day", 0),
        ("monthly_due_day", 32),
        ("annual_interest_rate", "abc"),
    ],
)
def test_open_credit_account_rejects_malformed_payload(
    app: FastAPI, client: TestClient, mock_use_case: Mock, field: str, value: object
) -> None:
    app.dependency_overrides[get_open_credit_account_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts", json={**OPEN_PAYLOAD, field: value})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
    mock_use_case.execute.assert_not_called()


def test_open_duplicate_account_returns_409(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    mock_use_case.execute.side_effect = AccountAlreadyExists(
        "Client already has a credit account at this establishment",
        client_id=1001,
        establishment_id=1,
    )
    app.dependency_overrides[get_open_credit_account_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts", json=OPEN_PAYLOAD)

    assert response.status_code == 409
    assert response.json()["code"] == "ACCOUNT_ALREADY_EXISTS"


def test_get_credit_account(
    app: FastAPI, client: TestClient, mock_use_case: Mock, account: CreditAccount
) -> None:
    mock_use_case.execute.return_value = account
    app.dependency_overrides[get_credit_account_use_case] = lambda: mock_use_case

    response = client.get("/v1/credit-accounts/42")

    assert response.status_code == 200
    assert response.json()["client_id"] == account.client_id
    mock_use_case.execute.assert_called_once_with(42)


def test_get_missing_account_returns_404(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    mock_use_case.execute.side_effect = AccountNotFound(99)
    app.dependency_overrides[get_credit_account_use_case] = lambda: mock_use_case

    response = client.get("/v1/credit-accounts/99")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_update_terms_sends_only_given_fields(
    app: FastAPI, client: TestClient, mock_use_case: Mock, account: CreditAccount
) -> None:
    mock_use_case.execute.return_value = account
    app.dependency_overrides[get_update_credit_account_terms_use_case] = lambda: mock_use_case

    response = client.patch("/v1/credit-accounts/42", json={"is_blocked": False})

    assert response.status_code == 200
    request = mock_use_case.execute.call_args.args[0]
    assert request.account_id == 42
    assert request.is_blocked is False
    assert request.credit_limit is None


# ==============================================================================
# Postings
# ==============================================================================


def test_post_purchase_returns_201(
    app: FastAPI, client: TestClient, mock_use_case: Mock, account: CreditAccount
) -> None:
    mock_use_case.execute.return_value = PostPurchaseResponse(
        account=account, transaction=_purchase("250.00"), installments=[]
    )
    app.dependency_overrides[get_post_purchase_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts/42/purchases", json={"amount": "250.00"})

    assert response.status_code == 201
    data = response.json()
    assert data["transaction"]["amount"] == "250.00"
    assert data["transaction"]["transaction_type"] == "PURCHASE"
    assert data["installments"] == []
    assert mock_use_case.execute.call_args.args[0].amount == Decimal("250.00")


def test_post_purchase_over_limit_returns_409_with_context(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    mock_use_case.execute.side_effect = CreditLimitExceeded(
        "Purchase amount exceeds credit limit", account_id=42, amount="2000.00"
    )
    app.dependency_overrides[get_post_purchase_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts/42/purchases", json={"amount": "2000.00"})

    assert response.status_code == 409
    assert response.json()["code"] == "CREDIT_LIMIT_EXCEEDED"
    assert response.json()["context"]["account_id"] == 42


def test_post_purchase_rejects_negative_amount(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    app.dependency_overrides[get_post_purchase_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts/42/purchases", json={"amount": "-1"})

    assert response.status_code == 422
    mock_use_case.execute.assert_not_called()


def test_post_pending_payment_exposes_code(
    app: FastAPI, client: TestClient, mock_use_case: Mock, account: CreditAccount
) -> None:
    payment = Transaction(
        id=8,
        account_id=42,
        transaction_type=TransactionType.PAYMENT,
        amount=Decimal("100.00"),
        description="Payment",
        occurred_at=AT,
        payment_method=PaymentMethod.YAPE,
        payment_status=PaymentStatus.PENDING,
        payment_code="482913",
    )
    mock_use_case.execute.return_value = PostPaymentResponse(
        account=account, transaction=payment, installments=[]
    )
    app.dependency_overrides[get_post_payment_use_case] = lambda: mock_use_case

    response = client.post(
        "/v1/credit-accounts/42/payments",
        json={"amount": "100.00", "payment_method": "YAPE"},
    )

    assert response.status_code == 201
    assert response.json()["transaction"]["payment_status"] == "PENDING"
    assert response.json()["transaction"]["payment_code"] == "482913"
    assert mock_use_case.execute.call_args.args[0].payment_method is PaymentMethod.YAPE


def test_post_payment_unknown_method_returns_422(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    app.dependency_overrides[get_post_payment_use_case] = lambda: mock_use_case

    response = client.post(
        "/v1/credit-accounts/42/payments",
        json={"amount": "100.00", "payment_method": "CARD"},
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "payment_method"
    mock_use_case.execute.assert_not_called()


def test_accrue_interest(
    app: FastAPI, client: TestClient, mock_use_case: Mock, account: CreditAccount
) -> None:
    mock_use_case.execute.return_value = AccrueInterestResponse(
        account=account, interest_amount=Decimal("0")
    )
    app.dependency_overrides[get_accrue_interest_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts/42/interest-accruals")

    assert response.status_code == 200
    assert response.json()["interest_amount"] == "0"
    assert response.json()["transaction"] is None


def test_apply_late_fee_missing_account(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    mock_use_case.execute.side_effect = AccountNotFound(42)
    app.dependency_overrides[get_apply_late_fee_use_case] = lambda: mock_use_case

    response = client.post("/v1/credit-accounts/42/late-fees")

    assert response.status_code == 404


# ==============================================================================
# Reports
# ==============================================================================


def test_due_date(app: FastAPI, client: TestClient, mock_use_case: Mock) -> None:
    mock_use_case.execute.return_value = date(2026, 1, 15)
    app.dependency_overrides[get_next_due_date_use_case] = lambda: mock_use_case

    response = client.get("/v1/credit-accounts/42/due-date")

    assert response.json() == {"account_id": 42, "due_date": "2026-01-15"}


def test_summary(app: FastAPI, client: TestClient, mock_use_case: Mock) -> None:
    mock_use_case.execute.return_value = AccountSummary(
        account_id=42,
        balance=Decimal("250.00"),
        credit_limit=Decimal("1000.00"),
        available_credit=Decimal("750.00"),
        due_date=date(2026, 1, 15),
        projected_interest=Decimal("1.25"),
        transactions=[_purchase("250.00")],
    )
    app.dependency_overrides[get_account_summary_use_case] = lambda: mock_use_case

    response = client.get("/v1/credit-accounts/42/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["projected_interest"] == "1.25"
    assert data["due_date"] == "2026-01-15"
    assert len(data["transactions"]) == 1


def test_statement_passes_parsed_range(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    mock_use_case.execute.return_value = AccountStatement(
        account_id=42,
        start=datetime(2026, 1, 1, tzinfo=timezone.utc),
        end=None,
        starting_balance=Decimal("0"),
        ending_balance=Decimal("250.00"),
        transactions=[_purchase("250.00")],
    )
    app.dependency_overrides[get_account_statement_use_case] = lambda: mock_use_case

    response = client.get(
        "/v1/credit-accounts/42/statement", params={"start": "2026-01-01T00:00:00+00:00"}
    )

    assert response.status_code == 200
    assert response.json()["ending_balance"] == "250.00"
    request = mock_use_case.execute.call_args.args[0]
    assert request.start == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert request.end is None


def test_statement_bad_datetime_returns_422(
    app: FastAPI, client: TestClient, mock_use_case: Mock
) -> None:
    app.dependency_overrides[get_account_statement_use_case] = lambda: mock_use_case

    response = client.get("/v1/credit-accounts/42/statement", params={"end": "last week"})

    assert response.status_code == 422
    assert response.json()["errors"][0]["code"] == "INVALID_DATETIME"
    mock_use_case.execute.assert_not_called()
