from __future__ import annotations

from types import TracebackType

from sqlalchemy.orm import Session, sessionmaker

from credit_ledger.adapters.postgres_credit_account_repository import PostgresCreditAccountRepository
from credit_ledger.adapters.postgres_installment_repository import PostgresInstallmentRepository
from credit_ledger.adapters.postgres_late_fee_rule_repository import PostgresLateFeeRuleRepository
from credit_ledger.adapters.postgres_transaction_repository import PostgresTransactionRepository
from credit_ledger.ports.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    One SQLAlchemy session (and database transaction) per unit of work.

    Row locks taken with ``SELECT ... FOR UPDATE`` are released when the
    session commits or rolls back.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.accounts = PostgresCreditAccountRepository(self._session)
        self.transactions = PostgresTransactionRepository(self._session)
        self.installments = PostgresInstallmentRepository(self._session)
        self.late_fee_rules = PostgresLateFeeRuleRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.rollback()
        finally:
            if self._session is not None:
                self._session.close()
                self._session = None

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("Unit of work is not active")
        self._session.commit()

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
