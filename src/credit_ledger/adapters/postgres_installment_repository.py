"""PostgreSQL implementation of InstallmentRepository."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from credit_ledger.domain.installment import Installment, InstallmentStatus
from credit_ledger.infra.db.models.installment import InstallmentRow
from credit_ledger.ports.installment_repository import InstallmentRepository


class PostgresInstallmentRepository(InstallmentRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add_many(self, installments: list[Installment]) -> list[Installment]:
        rows = [
            InstallmentRow(
                account_id=i.account_id,
                purchase_transaction_id=i.purchase_transaction_id,
                sequence=i.sequence,
                due_date=i.due_date,
                amount=i.amount,
                paid_amount=i.paid_amount,
                status=i.status.value,
            )
            for i in installments
        ]
        self._session.add_all(rows)
        self._session.flush()
        return [replace(i, id=row.id) for i, row in zip(installments, rows)]

    def list_by_account(self, account_id: int) -> list[Installment]:
        query = (
            select(InstallmentRow)
            .where(InstallmentRow.account_id == account_id)
            .order_by(InstallmentRow.due_date, InstallmentRow.sequence, InstallmentRow.id)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    def list_by_purchase(self, purchase_transaction_id: int) -> list[Installment]:
        query = (
            select(InstallmentRow)
            .where(InstallmentRow.purchase_transaction_id == purchase_transaction_id)
            .order_by(InstallmentRow.due_date, InstallmentRow.sequence)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    def save_many(self, installments: list[Installment]) -> None:
        for installment in installments:
            if installment.id is None:
                raise ValueError("Cannot save an installment without id")
            row = self._session.get(InstallmentRow, installment.id)
            if row is None:
                raise ValueError(f"Installment {installment.id} does not exist")
            row.paid_amount = installment.paid_amount
            row.status = installment.status.value
        self._session.flush()

    def delete_many(self, installment_ids: list[int]) -> None:
        if not installment_ids:
            return
        self._session.execute(delete(InstallmentRow).where(InstallmentRow.id.in_(installment_ids)))

    @staticmethod
    def _to_domain(row: InstallmentRow) -> Installment:
        return Installment(
            id=row.id,
            account_id=row.account_id,
            purchase_transaction_id=row.purchase_transaction_id,
            sequence=row.sequence,
            due_date=row.due_date,
            amount=row.amount,
            paid_amount=row.paid_amount,
            status=InstallmentStatus(row.status),
        )
