from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from credit_ledger.infra.db.models.base import Base


class TransactionRow(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_account_occurred_at", "account_id", "occurred_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("credit_accounts.id"), nullable=False
    )
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    payment_method: Mapped[str] = mapped_column(String(10), nullable=False, default="CASH")
    payment_status: Mapped[str] = mapped_column(String(10), nullable=False, default="SUCCESS")
    payment_code: Mapped[str | None] = mapped_column(String(12), nullable=True)
    confirmation_code: Mapped[str | None] = mapped_column(String(12), nullable=True)
