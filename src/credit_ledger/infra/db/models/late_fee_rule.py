from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from credit_ledger.infra.db.models.base import Base


class LateFeeRuleRow(Base):
    __tablename__ = "late_fee_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    establishment_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    min_days_overdue: Mapped[int] = mapped_column(Integer, nullable=False)
    max_days_overdue: Mapped[int | None] = mapped_column(Integer, nullable=True)  # open-ended
    fee_type: Mapped[str] = mapped_column(String(10), nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=4), nullable=False)
