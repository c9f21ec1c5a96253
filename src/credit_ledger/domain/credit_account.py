from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from credit_ledger.domain.errors import ConflictError, NotFoundError, ValidationError
from credit_ledger.domain.money import ZERO


# ==============================================================================
# Domain Exceptions
# ==============================================================================


class InvalidAmount(ValidationError):
    """Raised when a posted amount is not strictly positive."""

    pass


class InvalidCreditType(ValidationError):
    """Raised when a credit type is outside SHORT_TERM / LONG_TERM."""

    pass


class InvalidInterestType(ValidationError):
    """Raised when an interest type is outside NOMINAL / EFFECTIVE."""

    pass


class AccountNotFound(NotFoundError):
    def __init__(self, account_id: int | str) -> None:
        super().__init__(resource="CreditAccount", identifier=str(account_id))


class AccountAlreadyExists(ConflictError):
    error_code = "ACCOUNT_ALREADY_EXISTS"


class AccountBlocked(ConflictError):
    error_code = "ACCOUNT_BLOCKED"


class CreditLimitExceeded(ConflictError):
    error_code = "CREDIT_LIMIT_EXCEEDED"


class PaymentExceedsBalance(ConflictError):
    error_code = "PAYMENT_EXCEEDS_BALANCE"


class OverdueBalanceBlocksPurchase(ConflictError):
    error_code = "OVERDUE_BALANCE_BLOCKS_PURCHASE"


# ==============================================================================
# Credit Account
# ==============================================================================


class InterestType(str, Enum):
    NOMINAL = "NOMINAL"
    EFFECTIVE = "EFFECTIVE"


class CreditType(str, Enum):
    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"


def parse_interest_type(value: str | InterestType) -> InterestType:
    try:
        return InterestType(value)
    except ValueError:
        raise InvalidInterestType(
            f"interest_type must be one of {[t.value for t in InterestType]}",
            interest_type=str(value),
        ) from None


def parse_credit_type(value: str | CreditType) -> CreditType:
    try:
        return CreditType(value)
    except ValueError:
        raise InvalidCreditType(
            f"credit_type must be one of {[t.value for t in CreditType]}",
            credit_type=str(value),
        ) from None


@dataclass(frozen=True, slots=True)
class CreditAccount:
    """
    Revolving or installment credit line of one client at one establishment.

    Rates are percentages: ``annual_interest_rate=Decimal("12")`` means 12% a year.
    ``late_fee_percentage`` is the flat fee used when the establishment has no
    tiered late fee rules.
    """

    client_id: int
    establishment_id: int
    credit_limit: Decimal
    monthly_due_day: int
    annual_interest_rate: Decimal
    interest_type: InterestType
    credit_type: CreditType
    last_interest_accrual_at: datetime
    current_balance: Decimal = ZERO
    grace_period_months: int = 0
    is_blocked: bool = False
    late_fee_percentage: Decimal | None = None
    id: int | None = None

    @property
    def available_credit(self) -> Decimal:
        return max(ZERO, self.credit_limit - self.current_balance)

    def validate(self) -> None:
        """
        Validate account terms.

        Raises:
            ValidationError: If any term is out of range
            InvalidCreditType: If credit_type is not a CreditType
            InvalidInterestType: If interest_type is not an InterestType
        """
        if not isinstance(self.credit_type, CreditType):
            raise InvalidCreditType(f"credit_type must be one of {[t.value for t in CreditType]}")
        if not isinstance(self.interest_type, InterestType):
            raise InvalidInterestType(
                f"interest_type must be one of {[t.value for t in InterestType]}"
            )
        if self.credit_limit <= 0:
            raise ValidationError("credit_limit must be > 0")
        if not 1 <= self.monthly_due_day <= 31:
            raise ValidationError("monthly_due_day must be between 1 and 31")
        if self.annual_interest_rate < 0:
            raise ValidationError("annual_interest_rate must be >= 0")
        if self.grace_period_months < 0:
            raise ValidationError("grace_period_months must be >= 0")
        if self.late_fee_percentage is not None and self.late_fee_percentage < 0:
            raise ValidationError("late_fee_percentage must be >= 0")
        if self.current_balance < 0:
            raise ValidationError("current_balance must be >= 0")
