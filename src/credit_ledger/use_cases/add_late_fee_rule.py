from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from credit_ledger.domain.late_fee import FeeType, LateFeeRule
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AddLateFeeRuleRequest:
    establishment_id: int
    min_days_overdue: int
    fee_type: FeeType
    value: Decimal
    max_days_overdue: int | None = None


class AddLateFeeRule:
    """Register a late fee tier for an establishment."""

    def __init__(self, unit_of_work: UnitOfWorkFactory) -> None:
        self._unit_of_work = unit_of_work

    def execute(self, request: AddLateFeeRuleRequest) -> LateFeeRule:
        """
        Raises:
            ValidationError: If the tier bounds or value are out of range
        """
        rule = LateFeeRule(
            establishment_id=request.establishment_id,
            min_days_overdue=request.min_days_overdue,
            max_days_overdue=request.max_days_overdue,
            fee_type=request.fee_type,
            value=request.value,
        )
        rule.validate()

        with self._unit_of_work() as uow:
            rule = uow.late_fee_rules.add(rule)
            uow.commit()

        logger.info(
            "Late fee rule added",
            extra={
                "establishment_id": rule.establishment_id,
                "rule_id": rule.id,
                "min_days_overdue": rule.min_days_overdue,
                "max_days_overdue": rule.max_days_overdue,
            },
        )
        return rule
