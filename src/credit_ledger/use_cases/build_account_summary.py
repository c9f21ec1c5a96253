from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timezone

from credit_ledger.domain.credit_account import AccountNotFound
from credit_ledger.domain.due_date import resolve_next_due_date
from credit_ledger.domain.interest import projected_interest_to_cents
from credit_ledger.domain.statement import AccountSummary
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class BuildAccountSummaryRequest:
    account_id: int


class BuildAccountSummary:
    """
    Read-only snapshot of an account up to its next due date.

    Includes every entry from the start of history to the end of the due date
    and the interest projected to accrue by then. Never posts entries.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: BuildAccountSummaryRequest) -> AccountSummary:
        """
        Raises:
            AccountNotFound: If the account does not exist
        """
        today = self._clock.now().date()

        with self._unit_of_work() as uow:
            account = uow.accounts.get_by_id(request.account_id)
            if account is None:
                raise AccountNotFound(request.account_id)

            installments = uow.installments.list_by_account(request.account_id)
            due_date = resolve_next_due_date(account, installments, today)
            transactions = uow.transactions.list_by_account(
                request.account_id,
                end=datetime.combine(due_date, time.max, tzinfo=timezone.utc),
            )

        return AccountSummary(
            account_id=request.account_id,
            balance=account.current_balance,
            credit_limit=account.credit_limit,
            available_credit=account.available_credit,
            due_date=due_date,
            projected_interest=projected_interest_to_cents(
                account, transactions, installments, today, due_date
            ),
            transactions=transactions,
        )
