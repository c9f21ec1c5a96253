from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from credit_ledger.domain.credit_account import AccountNotFound, CreditType
from credit_ledger.domain.due_date import resolve_next_due_date
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class GetNextDueDateRequest:
    account_id: int


class GetNextDueDate:
    """Read-only: next obligation date of an account."""

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: GetNextDueDateRequest) -> date:
        """
        Raises:
            AccountNotFound: If the account does not exist
            InvalidCreditType: If the account credit type is unknown
        """
        today = self._clock.now().date()

        with self._unit_of_work() as uow:
            account = uow.accounts.get_by_id(request.account_id)
            if account is None:
                raise AccountNotFound(request.account_id)

            installments = (
                uow.installments.list_by_account(request.account_id)
                if account.credit_type is CreditType.LONG_TERM
                else []
            )

        return resolve_next_due_date(account, installments, today)
