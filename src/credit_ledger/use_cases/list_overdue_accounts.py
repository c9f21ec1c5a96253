from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from credit_ledger.domain.credit_account import CreditAccount, CreditType
from credit_ledger.domain.dates import days_between, previous_due_date
from credit_ledger.domain.ledger import overdue_balance
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class OverdueAccount:
    account: CreditAccount
    overdue_amount: Decimal
    days_overdue: int


class ListOverdueAccounts:
    """
    Accounts of an establishment carrying an overdue balance today.

    ``days_overdue`` counts from the oldest unpaid installment (LONG_TERM) or
    from the most recent missed due date (SHORT_TERM). Read-only.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, establishment_id: int) -> list[OverdueAccount]:
        today = self._clock.now().date()
        overdue: list[OverdueAccount] = []

        with self._unit_of_work() as uow:
            for account in uow.accounts.list_by_establishment(establishment_id):
                installments = (
                    uow.installments.list_by_account(account.id)
                    if account.credit_type is CreditType.LONG_TERM
                    else []
                )
                amount = overdue_balance(
                    account, uow.transactions.list_by_account(account.id), installments, today
                )
                if amount <= 0:
                    continue

                if account.credit_type is CreditType.LONG_TERM:
                    since = min(
                        i.due_date for i in installments if not i.is_paid and i.due_date < today
                    )
                else:
                    since = previous_due_date(today, account.monthly_due_day)

                overdue.append(
                    OverdueAccount(
                        account=account,
                        overdue_amount=amount,
                        days_overdue=days_between(since, today),
                    )
                )

        return overdue
