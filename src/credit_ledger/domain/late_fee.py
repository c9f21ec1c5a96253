from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable

from credit_ledger.domain.errors import ConflictError, ValidationError
from credit_ledger.domain.money import percent_to_fraction, to_cents


class NoApplicableLateFeeRule(ConflictError):
    error_code = "NO_APPLICABLE_LATE_FEE_RULE"


class FeeType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


@dataclass(frozen=True, slots=True)
class LateFeeRule:
    """
    Establishment-scoped late fee tier covering ``[min_days_overdue, max_days_overdue)``.

    ``max_days_overdue=None`` leaves the tier open-ended. PERCENTAGE values are
    percentages of the current balance; FIXED values are amounts.
    """

    establishment_id: int
    min_days_overdue: int
    fee_type: FeeType
    value: Decimal
    max_days_overdue: int | None = None
    id: int | None = None

    def validate(self) -> None:
        if self.min_days_overdue < 0:
            raise ValidationError("min_days_overdue must be >= 0")
        if self.max_days_overdue is not None and self.max_days_overdue <= self.min_days_overdue:
            raise ValidationError("max_days_overdue must be greater than min_days_overdue")
        if self.value < 0:
            raise ValidationError("value must be >= 0")

    def covers(self, days_overdue: int) -> bool:
        if days_overdue < self.min_days_overdue:
            return False
        return self.max_days_overdue is None or days_overdue < self.max_days_overdue

    def fee_for(self, balance: Decimal) -> Decimal:
        if self.fee_type is FeeType.PERCENTAGE:
            return to_cents(balance * percent_to_fraction(self.value))
        return to_cents(self.value)


def flat_percentage_rule(establishment_id: int, percentage: Decimal) -> LateFeeRule:
    """Single open-ended tier equivalent to an account's flat late fee percentage."""
    return LateFeeRule(
        establishment_id=establishment_id,
        min_days_overdue=1,
        fee_type=FeeType.PERCENTAGE,
        value=percentage,
    )


def select_rule(rules: Iterable[LateFeeRule], days_overdue: int) -> LateFeeRule:
    """
    Pick the first tier (lowest ``min_days_overdue``) covering ``days_overdue``.

    Raises:
        NoApplicableLateFeeRule: If no tier covers the overdue days
    """
    for rule in sorted(rules, key=lambda r: r.min_days_overdue):
        if rule.covers(days_overdue):
            return rule
    raise NoApplicableLateFeeRule(
        f"No late fee rule covers {days_overdue} days overdue",
        days_overdue=days_overdue,
    )
