from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Callable

from credit_ledger.ports.credit_account_repository import CreditAccountRepository
from credit_ledger.ports.installment_repository import InstallmentRepository
from credit_ledger.ports.late_fee_rule_repository import LateFeeRuleRepository
from credit_ledger.ports.transaction_repository import TransactionRepository


class UnitOfWork(ABC):
    """
    Atomic unit spanning every ledger repository.

    Usage:
        with unit_of_work() as uow:
            account = uow.accounts.get_for_update(account_id)
            ...
            uow.commit()

    Leaving the block without ``commit()`` (or with an exception) discards
    every write and releases the account locks taken inside it.
    """

    accounts: CreditAccountRepository
    transactions: TransactionRepository
    installments: InstallmentRepository
    late_fee_rules: LateFeeRuleRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
