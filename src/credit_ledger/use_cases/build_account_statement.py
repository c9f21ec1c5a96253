from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from credit_ledger.domain.credit_account import AccountNotFound
from credit_ledger.domain.errors import ValidationError
from credit_ledger.domain.money import ZERO
from credit_ledger.domain.statement import AccountStatement
from credit_ledger.domain.transaction import reconcile
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class BuildAccountStatementRequest:
    """``start``/``end`` of None mean from the beginning of history / up to now."""

    account_id: int
    start: datetime | None = None
    end: datetime | None = None

    def validate(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValidationError(
                errors=[
                    {
                        "field": "start",
                        "message": "Must be earlier than or equal to end",
                        "code": "INVALID_RANGE",
                    }
                ]
            )


class BuildAccountStatement:
    """
    Read-only statement for a date range.

    The starting balance is rebuilt from every entry posted before ``start``
    (payments negative, purchases, interest and fees positive).
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory) -> None:
        self._unit_of_work = unit_of_work

    def execute(self, request: BuildAccountStatementRequest) -> AccountStatement:
        """
        Raises:
            ValidationError: If start is after end
            AccountNotFound: If the account does not exist
        """
        request.validate()

        with self._unit_of_work() as uow:
            if uow.accounts.get_by_id(request.account_id) is None:
                raise AccountNotFound(request.account_id)

            starting_balance = ZERO
            if request.start is not None:
                starting_balance = reconcile(
                    uow.transactions.list_before(request.account_id, request.start)
                )
            transactions = uow.transactions.list_by_account(
                request.account_id, start=request.start, end=request.end
            )

        return AccountStatement(
            account_id=request.account_id,
            start=request.start,
            end=request.end,
            starting_balance=starting_balance,
            ending_balance=starting_balance + reconcile(transactions),
            transactions=transactions,
        )
