"""Test suite for ReverseTransaction use case."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable

import pytest

from credit_ledger.adapters.in_memory_ledger_store import InMemoryLedgerStore
from credit_ledger.adapters.random_payment_code_generator import RandomPaymentCodeGenerator
from credit_ledger.adapters.system_clock import FixedClock
from credit_ledger.domain.credit_account import CreditAccount, CreditType
from credit_ledger.domain.installment import InstallmentStatus
from credit_ledger.domain.transaction import (
    PaymentMethod,
    ReversalNotAllowed,
    TransactionNotFound,
    TransactionType,
)
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.confirm_payment import ConfirmPayment, ConfirmPaymentRequest
from credit_ledger.use_cases.post_payment import PostPayment, PostPaymentRequest, PostPaymentResponse
from credit_ledger.use_cases.post_purchase import PostPurchase, PostPurchaseRequest, PostPurchaseResponse
from credit_ledger.use_cases.reverse_transaction import (
    ReverseTransaction,
    ReverseTransactionRequest,
)


@pytest.fixture()
def reverse(unit_of_work: UnitOfWorkFactory, clock: FixedClock) -> ReverseTransaction:
    return ReverseTransaction(unit_of_work, clock)


@pytest.fixture()
def purchase(unit_of_work: UnitOfWorkFactory, clock: FixedClock) -> Callable[..., PostPurchaseResponse]:
    use_case = PostPurchase(unit_of_work, clock)
    return lambda account_id, amount: use_case.execute(
        PostPurchaseRequest(account_id=account_id, amount=Decimal(amount))
    )


@pytest.fixture()
def pay(
    unit_of_work: UnitOfWorkFactory,
    clock: FixedClock,
    payment_codes: RandomPaymentCodeGenerator,
) -> Callable[..., PostPaymentResponse]:
    use_case = PostPayment(unit_of_work, clock, payment_codes)
    return lambda account_id, amount, method=PaymentMethod.CASH: use_case.execute(
        PostPaymentRequest(account_id=account_id, amount=Decimal(amount), payment_method=method)
    )


# ==============================================================================
# Short term
# ==============================================================================


def test_reverse_purchase(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    open_account: Callable[..., CreditAccount],
    store: InMemoryLedgerStore,
) -> None:
    account = open_account()
    posted = purchase(account.id, "120.00").transaction

    result = reverse.execute(ReverseTransactionRequest(transaction_id=posted.id))

    assert result.reversed == posted
    assert result.account.current_balance == Decimal("0.00")
    assert posted.id not in store.transactions


def test_reverse_payment_restores_balance(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    open_account: Callable[..., CreditAccount],
) -> None:
    account = open_account()
    purchase(account.id, "120.00")
    payment = pay(account.id, "20.00").transaction

    result = reverse.execute(ReverseTransactionRequest(transaction_id=payment.id))

    assert result.account.current_balance == Decimal("120.00")


def test_reverse_failed_payment_leaves_balance(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    open_account: Callable[..., CreditAccount],
    unit_of_work: UnitOfWorkFactory,
    clock: FixedClock,
) -> None:
    account = open_account()
    purchase(account.id, "120.00")
    payment = pay(account.id, "20.00", PaymentMethod.YAPE).transaction
    ConfirmPayment(unit_of_work, clock).execute(
        ConfirmPaymentRequest(transaction_id=payment.id, confirmation_code="wrong")
    )

    result = reverse.execute(ReverseTransactionRequest(transaction_id=payment.id))

    assert result.account.current_balance == Decimal("120.00")


def test_reversal_that_would_go_negative_is_rejected(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    open_account: Callable[..., CreditAccount],
    store: InMemoryLedgerStore,
) -> None:
    """Removing a purchase already paid off would leave a credit balance."""
    account = open_account()
    posted = purchase(account.id, "100.00").transaction
    pay(account.id, "60.00")

    with pytest.raises(ReversalNotAllowed):
        reverse.execute(ReverseTransactionRequest(transaction_id=posted.id))

    assert posted.id in store.transactions
    assert store.accounts[account.id].current_balance == Decimal("40.00")


def test_reversing_payment_past_credit_limit_is_rejected(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    open_account: Callable[..., CreditAccount],
    store: InMemoryLedgerStore,
) -> None:
    """The freed credit was spent again, so the payment cannot come back."""
    account = open_account(credit_limit=Decimal("100.00"))
    purchase(account.id, "100.00")
    payment = pay(account.id, "100.00").transaction
    purchase(account.id, "100.00")

    with pytest.raises(ReversalNotAllowed) as exc_info:
        reverse.execute(ReverseTransactionRequest(transaction_id=payment.id))

    assert exc_info.value.context["credit_limit"] == "100.00"
    assert payment.id in store.transactions
    assert store.accounts[account.id].current_balance == Decimal("100.00")


def test_reversing_payment_within_credit_limit(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    open_account: Callable[..., CreditAccount],
) -> None:
    account = open_account(credit_limit=Decimal("100.00"))
    purchase(account.id, "100.00")
    payment = pay(account.id, "100.00").transaction
    purchase(account.id, "40.00")

    with pytest.raises(ReversalNotAllowed):
        reverse.execute(ReverseTransactionRequest(transaction_id=payment.id))

    later = pay(account.id, "40.00").transaction
    result = reverse.execute(ReverseTransactionRequest(transaction_id=later.id))

    assert result.account.current_balance == Decimal("40.00")


def test_missing_transaction(reverse: ReverseTransaction) -> None:
    with pytest.raises(TransactionNotFound):
        reverse.execute(ReverseTransactionRequest(transaction_id=404))


# ==============================================================================
# Long term
# ==============================================================================


@pytest.fixture()
def long_term(open_account: Callable[..., CreditAccount]) -> CreditAccount:
    return open_account(
        credit_type=CreditType.LONG_TERM,
        annual_interest_rate=Decimal("12"),
        credit_limit=Decimal("5000.00"),
    )


def test_reverse_long_term_purchase_removes_schedule(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    long_term: CreditAccount,
    store: InMemoryLedgerStore,
) -> None:
    kept = purchase(long_term.id, "600.00")
    removed = purchase(long_term.id, "1200.00")

    reverse.execute(ReverseTransactionRequest(transaction_id=removed.transaction.id))

    remaining = {i.purchase_transaction_id for i in store.installments.values()}
    assert remaining == {kept.transaction.id}
    assert len(store.installments) == 12


def test_reverse_long_term_purchase_with_paid_installment_rejected(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    long_term: CreditAccount,
) -> None:
    posted = purchase(long_term.id, "1200.00").transaction
    purchase(long_term.id, "1200.00")
    pay(long_term.id, "50.00")

    with pytest.raises(ReversalNotAllowed):
        reverse.execute(ReverseTransactionRequest(transaction_id=posted.id))


def test_reverse_long_term_payment_deallocates(
    reverse: ReverseTransaction,
    purchase: Callable[..., PostPurchaseResponse],
    pay: Callable[..., PostPaymentResponse],
    long_term: CreditAccount,
    store: InMemoryLedgerStore,
) -> None:
    purchase(long_term.id, "1200.00")
    payment = pay(long_term.id, "150.00").transaction

    result = reverse.execute(ReverseTransactionRequest(transaction_id=payment.id))

    assert result.reversed.transaction_type is TransactionType.PAYMENT
    assert result.account.current_balance == Decimal("1200.00")
    assert all(i.paid_amount == 0 for i in store.installments.values())
    assert all(i.status is InstallmentStatus.PENDING for i in store.installments.values())
