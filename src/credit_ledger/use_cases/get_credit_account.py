from __future__ import annotations

from credit_ledger.domain.credit_account import AccountNotFound, CreditAccount
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory


class GetCreditAccount:
    def __init__(self, unit_of_work: UnitOfWorkFactory) -> None:
        self._unit_of_work = unit_of_work

    def execute(self, account_id: int) -> CreditAccount:
        """
        Raises:
            AccountNotFound: If the account does not exist
        """
        with self._unit_of_work() as uow:
            account = uow.accounts.get_by_id(account_id)

        if account is None:
            raise AccountNotFound(account_id)
        return account
