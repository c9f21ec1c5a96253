"""Interest formulas for revolving balances and installments.

Rates are annual percentages. Time is counted in days on a 365-day year:

- NOMINAL:   ``principal * r * d / 365``
- EFFECTIVE: ``principal * ((1 + r) ** (d / 365) - 1)``

Every public helper returns full-precision ``Decimal`` except the
``*_to_cents`` helpers, which round once at the end.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from dateutil.relativedelta import relativedelta

from credit_ledger.domain.credit_account import (
    CreditAccount,
    CreditType,
    InterestType,
    InvalidCreditType,
    InvalidInterestType,
)
from credit_ledger.domain.dates import days_between
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.money import ZERO, percent_to_fraction, to_cents
from credit_ledger.domain.transaction import Transaction, TransactionType

DAYS_IN_YEAR = Decimal("365")
MONTHS_IN_YEAR = Decimal("12")
ACCRUAL_PERIOD = relativedelta(months=1)

_ONE = Decimal("1")


def interest_for_days(
    principal: Decimal, annual_rate: Decimal, interest_type: InterestType, days: int
) -> Decimal:
    if principal <= 0 or days <= 0 or annual_rate == 0:
        return ZERO

    r = percent_to_fraction(annual_rate)
    if interest_type is InterestType.NOMINAL:
        return principal * r * Decimal(days) / DAYS_IN_YEAR
    if interest_type is InterestType.EFFECTIVE:
        return principal * ((_ONE + r) ** (Decimal(days) / DAYS_IN_YEAR) - _ONE)
    raise InvalidInterestType(f"Unsupported interest type: {interest_type}")


def periodic_monthly_rate(annual_rate: Decimal, interest_type: InterestType) -> Decimal:
    """Monthly rate used to amortize installment purchases."""
    r = percent_to_fraction(annual_rate)
    if interest_type is InterestType.NOMINAL:
        return r / MONTHS_IN_YEAR
    if interest_type is InterestType.EFFECTIVE:
        return (_ONE + r) ** (_ONE / MONTHS_IN_YEAR) - _ONE
    raise InvalidInterestType(f"Unsupported interest type: {interest_type}")


def is_accrual_due(last_accrual_at: datetime, now: datetime) -> bool:
    """True once a full month has elapsed since the last accrual."""
    return now >= last_accrual_at + ACCRUAL_PERIOD


def installment_interest(
    installments: Iterable[Installment],
    annual_rate: Decimal,
    interest_type: InterestType,
    today: date,
    until: date | None = None,
) -> Decimal:
    """
    Interest carried by unpaid installments that are not yet due.

    Each installment accrues on its outstanding amount from ``today`` to its
    due date. When ``until`` is given, installments due after it are ignored.
    """
    total = ZERO
    for installment in installments:
        if installment.is_paid or installment.due_date <= today:
            continue
        if until is not None and installment.due_date > until:
            continue
        total += interest_for_days(
            installment.outstanding,
            annual_rate,
            interest_type,
            days_between(today, installment.due_date),
        )
    return total


def accrued_interest_to_cents(
    account: CreditAccount,
    installments: Iterable[Installment],
    now: datetime,
) -> Decimal:
    """
    Interest to capitalize on an account for the period ending at ``now``.

    Callers are expected to check ``is_accrual_due`` first.

    Raises:
        InvalidCreditType: If the account credit type is unknown
    """
    if account.credit_type is CreditType.SHORT_TERM:
        elapsed = (now - account.last_interest_accrual_at).days
        interest = interest_for_days(
            account.current_balance, account.annual_interest_rate, account.interest_type, elapsed
        )
    elif account.credit_type is CreditType.LONG_TERM:
        interest = installment_interest(
            installments, account.annual_interest_rate, account.interest_type, now.date()
        )
    else:
        raise InvalidCreditType(f"Invalid credit type: {account.credit_type}")
    return to_cents(interest)


def projected_interest_to_cents(
    account: CreditAccount,
    transactions: Iterable[Transaction],
    installments: Iterable[Installment],
    today: date,
    due_date: date,
) -> Decimal:
    """
    Interest expected to accrue up to ``due_date``.

    SHORT_TERM: every purchase posted since the last accrual accrues from its
    posting date to the due date. LONG_TERM: unpaid installments due on or
    before ``due_date`` accrue from today to their own due date.
    """
    if account.credit_type is CreditType.SHORT_TERM:
        since = account.last_interest_accrual_at
        total = ZERO
        for transaction in transactions:
            if transaction.transaction_type is not TransactionType.PURCHASE:
                continue
            if transaction.occurred_at < since:
                continue
            total += interest_for_days(
                transaction.amount,
                account.annual_interest_rate,
                account.interest_type,
                days_between(transaction.occurred_at.date(), due_date),
            )
        return to_cents(total)
    if account.credit_type is CreditType.LONG_TERM:
        return to_cents(
            installment_interest(
                installments,
                account.annual_interest_rate,
                account.interest_type,
                today,
                until=due_date,
            )
        )
    raise InvalidCreditType(f"Invalid credit type: {account.credit_type}")
