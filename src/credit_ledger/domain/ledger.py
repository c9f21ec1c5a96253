"""Balance mutation and overdue rules shared by every posting path."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from credit_ledger.domain.credit_account import (
    CreditAccount,
    CreditType,
    InvalidAmount,
    InvalidCreditType,
)
from credit_ledger.domain.dates import previous_due_date
from credit_ledger.domain.errors import InternalError
from credit_ledger.domain.installment import Installment, overdue_installment_balance
from credit_ledger.domain.money import ZERO
from credit_ledger.domain.transaction import Transaction, TransactionType


def require_positive_amount(amount: Decimal, field: str = "amount") -> None:
    if amount <= 0:
        raise InvalidAmount(
            errors=[{"field": field, "message": "Must be greater than zero", "code": "INVALID_AMOUNT"}]
        )


def apply_ledger_delta(
    account: CreditAccount, delta: Decimal, clears_block: bool = True
) -> CreditAccount:
    """
    Apply a signed ledger amount to an account balance.

    This is the only place balances change. A settled credit (negative delta)
    that brings the balance to zero or below clears the blocked flag; pass
    ``clears_block=False`` for credits that may still fail.

    Raises:
        InternalError: If the delta would drive the balance below zero
    """
    balance = account.current_balance + delta
    if balance < 0:
        raise InternalError(
            "Ledger delta would make the balance negative",
            account_id=account.id,
            delta=str(delta),
        )
    unblock = clears_block and delta < 0 and balance <= 0
    return replace(account, current_balance=balance, is_blocked=account.is_blocked and not unblock)


def overdue_balance(
    account: CreditAccount,
    transactions: Iterable[Transaction],
    installments: Iterable[Installment],
    today: date,
) -> Decimal:
    """
    Amount of the account that is past due as of ``today``.

    LONG_TERM: unpaid remainder of installments due before today.
    SHORT_TERM: what was owed on the most recent due date (entries posted
    before it) minus payments made since, capped at the current balance.

    Raises:
        InvalidCreditType: If the account credit type is unknown
    """
    if account.current_balance <= 0:
        return ZERO

    if account.credit_type is CreditType.LONG_TERM:
        return min(account.current_balance, overdue_installment_balance(installments, today))

    if account.credit_type is CreditType.SHORT_TERM:
        last_due = previous_due_date(today, account.monthly_due_day)
        owed = ZERO
        paid_since = ZERO
        for t in transactions:
            posted_on = t.occurred_at.date()
            if posted_on < last_due:
                owed += t.signed_amount
            elif t.transaction_type is TransactionType.PAYMENT:
                paid_since -= t.signed_amount
        return min(account.current_balance, max(ZERO, owed - paid_since))

    raise InvalidCreditType(f"Invalid credit type: {account.credit_type}")


def release_block_if_settled(account: CreditAccount) -> CreditAccount:
    """Clear the blocked flag once nothing is owed, for credits settled after posting."""
    if account.is_blocked and account.current_balance <= 0:
        return replace(account, is_blocked=False)
    return account
