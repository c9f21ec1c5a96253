from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from credit_ledger.infra.db.models.base import Base


class CreditAccountRow(Base):
    __tablename__ = "credit_accounts"
    __table_args__ = (
        UniqueConstraint("client_id", "establishment_id", name="uq_credit_accounts_client_establishment"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    establishment_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    credit_limit: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, default=Decimal("0")
    )

    monthly_due_day: Mapped[int] = mapped_column(Integer, nullable=False)
    # Percentages, e.g. 12.5000 for 12.5% a year
    annual_interest_rate: Mapped[Decimal] = mapped_column(Numeric(precision=9, scale=4), nullable=False)
    interest_type: Mapped[str] = mapped_column(String(20), nullable=False)
    credit_type: Mapped[str] = mapped_column(String(20), nullable=False)
    grace_period_months: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    late_fee_percentage: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=9, scale=4), nullable=True
    )
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    last_interest_accrual_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
