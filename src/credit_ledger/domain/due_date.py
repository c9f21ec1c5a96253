from __future__ import annotations

from datetime import date
from typing import Iterable

from credit_ledger.domain.credit_account import CreditAccount, CreditType, InvalidCreditType
from credit_ledger.domain.dates import next_due_date_after
from credit_ledger.domain.installment import Installment, InstallmentStatus


def resolve_next_due_date(
    account: CreditAccount, installments: Iterable[Installment], today: date
) -> date:
    """
    Next obligation date of an account.

    SHORT_TERM accounts owe on the next monthly due day strictly after today.
    LONG_TERM accounts owe on the earliest PENDING installment due after today,
    falling back to the monthly due day when no such installment exists. Once
    the balance is paid off, leftover installments no longer set the date.

    Raises:
        InvalidCreditType: If the account credit type is unknown
    """
    if account.credit_type is CreditType.SHORT_TERM:
        return next_due_date_after(today, account.monthly_due_day)
    if account.credit_type is CreditType.LONG_TERM:
        if account.current_balance > 0:
            upcoming = [
                i.due_date
                for i in installments
                if i.status is InstallmentStatus.PENDING and i.due_date > today
            ]
            if upcoming:
                return min(upcoming)
        return next_due_date_after(today, account.monthly_due_day)
    raise InvalidCreditType(f"Invalid credit type: {account.credit_type}")
