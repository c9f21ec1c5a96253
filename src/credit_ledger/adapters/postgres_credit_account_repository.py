"""PostgreSQL implementation of CreditAccountRepository."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from credit_ledger.domain.credit_account import (
    AccountAlreadyExists,
    CreditAccount,
    CreditType,
    InterestType,
)
from credit_ledger.infra.db.models.credit_account import CreditAccountRow
from credit_ledger.ports.credit_account_repository import CreditAccountRepository


def as_utc(value: datetime) -> datetime:
    """Drivers without timezone support hand back naive UTC datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostgresCreditAccountRepository(CreditAccountRepository):
    """
    PostgreSQL implementation of CreditAccountRepository.

    - ``get_for_update`` issues ``SELECT ... FOR UPDATE``; the row lock lives
      until the session transaction ends
    - Converts CreditAccountRow (infrastructure) to CreditAccount (domain)
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, account_id: int) -> CreditAccount | None:
        row = self._session.get(CreditAccountRow, account_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, account_id: int) -> CreditAccount | None:
        query = (
            select(CreditAccountRow)
            .where(CreditAccountRow.id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def get_by_client_and_establishment(
        self, client_id: int, establishment_id: int
    ) -> CreditAccount | None:
        query = select(CreditAccountRow).where(
            CreditAccountRow.client_id == client_id,
            CreditAccountRow.establishment_id == establishment_id,
        )
        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def list_by_client(self, client_id: int) -> list[CreditAccount]:
        query = (
            select(CreditAccountRow)
            .where(CreditAccountRow.client_id == client_id)
            .order_by(CreditAccountRow.id)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    def list_by_establishment(self, establishment_id: int) -> list[CreditAccount]:
        query = (
            select(CreditAccountRow)
            .where(CreditAccountRow.establishment_id == establishment_id)
            .order_by(CreditAccountRow.id)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    def add(self, account: CreditAccount) -> CreditAccount:
        """
        Raises:
            AccountAlreadyExists: If a concurrent unit of work opened the same
                client and establishment first

        The session is unusable after the failed flush; the unit of work rolls
        it back on exit.
        """
        row = CreditAccountRow()
        self._apply(row, account)
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError:
            raise AccountAlreadyExists(
                "Client already has a credit account at this establishment",
                client_id=account.client_id,
                establishment_id=account.establishment_id,
            ) from None
        return replace(account, id=row.id)

    def save(self, account: CreditAccount) -> None:
        if account.id is None:
            raise ValueError("Cannot save an account without id")
        row = self._session.get(CreditAccountRow, account.id)
        if row is None:
            raise ValueError(f"CreditAccount {account.id} does not exist")
        self._apply(row, account)
        self._session.flush()

    @staticmethod
    def _apply(row: CreditAccountRow, account: CreditAccount) -> None:
        row.client_id = account.client_id
        row.establishment_id = account.establishment_id
        row.credit_limit = account.credit_limit
        row.current_balance = account.current_balance
        row.monthly_due_day = account.monthly_due_day
        row.annual_interest_rate = account.annual_interest_rate
        row.interest_type = account.interest_type.value
        row.credit_type = account.credit_type.value
        row.grace_period_months = account.grace_period_months
        row.late_fee_percentage = account.late_fee_percentage
        row.is_blocked = account.is_blocked
        row.last_interest_accrual_at = account.last_interest_accrual_at

    @staticmethod
    def _to_domain(row: CreditAccountRow) -> CreditAccount:
        return CreditAccount(
            id=row.id,
            client_id=row.client_id,
            establishment_id=row.establishment_id,
            credit_limit=row.credit_limit,  # Already Decimal from NUMERIC column
            current_balance=row.current_balance,
            monthly_due_day=row.monthly_due_day,
            annual_interest_rate=row.annual_interest_rate,
            interest_type=InterestType(row.interest_type),
            credit_type=CreditType(row.credit_type),
            grace_period_months=row.grace_period_months,
            late_fee_percentage=row.late_fee_percentage,
            is_blocked=row.is_blocked,
            last_interest_accrual_at=as_utc(row.last_interest_accrual_at),
        )
