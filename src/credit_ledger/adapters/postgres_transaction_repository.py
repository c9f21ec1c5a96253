"""PostgreSQL implementation of TransactionRepository."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from credit_ledger.adapters.postgres_credit_account_repository import as_utc
from credit_ledger.domain.transaction import (
    PaymentMethod,
    PaymentStatus,
    Transaction,
    TransactionType,
)
from credit_ledger.infra.db.models.transaction import TransactionRow
from credit_ledger.ports.transaction_repository import TransactionRepository


class PostgresTransactionRepository(TransactionRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, transaction: Transaction) -> Transaction:
        row = TransactionRow(
            account_id=transaction.account_id,
            transaction_type=transaction.transaction_type.value,
            amount=transaction.amount,
            description=transaction.description,
            occurred_at=transaction.occurred_at,
            payment_method=transaction.payment_method.value,
            payment_status=transaction.payment_status.value,
            payment_code=transaction.payment_code,
            confirmation_code=transaction.confirmation_code,
        )
        self._session.add(row)
        self._session.flush()
        return replace(transaction, id=row.id)

    def get_by_id(self, transaction_id: int) -> Transaction | None:
        row = self._session.get(TransactionRow, transaction_id, populate_existing=True)
        return self._to_domain(row) if row else None

    def save(self, transaction: Transaction) -> None:
        if transaction.id is None:
            raise ValueError("Cannot save a transaction without id")
        row = self._session.get(TransactionRow, transaction.id)
        if row is None:
            raise ValueError(f"Transaction {transaction.id} does not exist")
        # Only the confirmation workflow fields ever change after posting
        row.payment_status = transaction.payment_status.value
        row.confirmation_code = transaction.confirmation_code
        self._session.flush()

    def delete(self, transaction_id: int) -> None:
        self._session.execute(delete(TransactionRow).where(TransactionRow.id == transaction_id))

    def list_by_account(
        self,
        account_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        query = select(TransactionRow).where(TransactionRow.account_id == account_id)
        if start is not None:
            query = query.where(TransactionRow.occurred_at >= start)
        if end is not None:
            query = query.where(TransactionRow.occurred_at <= end)
        query = query.order_by(TransactionRow.occurred_at, TransactionRow.id)
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    def list_before(self, account_id: int, before: datetime) -> list[Transaction]:
        query = (
            select(TransactionRow)
            .where(TransactionRow.account_id == account_id, TransactionRow.occurred_at < before)
            .order_by(TransactionRow.occurred_at, TransactionRow.id)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    @staticmethod
    def _to_domain(row: TransactionRow) -> Transaction:
        return Transaction(
            id=row.id,
            account_id=row.account_id,
            transaction_type=TransactionType(row.transaction_type),
            amount=row.amount,
            description=row.description,
            occurred_at=as_utc(row.occurred_at),
            payment_method=PaymentMethod(row.payment_method),
            payment_status=PaymentStatus(row.payment_status),
            payment_code=row.payment_code,
            confirmation_code=row.confirmation_code,
        )
