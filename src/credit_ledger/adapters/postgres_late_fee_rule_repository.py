"""PostgreSQL implementation of LateFeeRuleRepository."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.orm import Session

from credit_ledger.domain.late_fee import FeeType, LateFeeRule
from credit_ledger.infra.db.models.late_fee_rule import LateFeeRuleRow
from credit_ledger.ports.late_fee_rule_repository import LateFeeRuleRepository


class PostgresLateFeeRuleRepository(LateFeeRuleRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_by_establishment(self, establishment_id: int) -> list[LateFeeRule]:
        query = (
            select(LateFeeRuleRow)
            .where(LateFeeRuleRow.establishment_id == establishment_id)
            .order_by(LateFeeRuleRow.min_days_overdue, LateFeeRuleRow.id)
        )
        return [self._to_domain(row) for row in self._session.execute(query).scalars()]

    def add(self, rule: LateFeeRule) -> LateFeeRule:
        row = LateFeeRuleRow(
            establishment_id=rule.establishment_id,
            min_days_overdue=rule.min_days_overdue,
            max_days_overdue=rule.max_days_overdue,
            fee_type=rule.fee_type.value,
            value=rule.value,
        )
        self._session.add(row)
        self._session.flush()
        return replace(rule, id=row.id)

    @staticmethod
    def _to_domain(row: LateFeeRuleRow) -> LateFeeRule:
        return LateFeeRule(
            id=row.id,
            establishment_id=row.establishment_id,
            min_days_overdue=row.min_days_overdue,
            max_days_overdue=row.max_days_overdue,
            fee_type=FeeType(row.fee_type),
            value=row.value,
        )
