from __future__ import annotations

from decimal import Decimal, InvalidOperation

from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.errors import ValidationError
from credit_ledger.entrypoints.http.dtos.credit_account import (
    CreditAccountCreateDTO,
    CreditAccountResponseDTO,
    CreditAccountUpdateDTO,
)
from credit_ledger.use_cases.open_credit_account import OpenCreditAccountRequest
from credit_ledger.use_cases.update_credit_account_terms import UpdateCreditAccountTermsRequest


def parse_decimal(value: str | None, field: str, errors: list[dict[str, str]]) -> Decimal | None:
    """
    Convert a decimal string at the HTTP boundary.

    Failures are appended to ``errors`` so every bad field is reported at once.
    """
    if value is None:
        return None
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError):
        errors.append(
            {
                "field": field,
                "message": f"Must be a valid decimal: {value}",
                "code": "INVALID_DECIMAL",
            }
        )
        return Decimal("0")  # Placeholder to continue validation


class CreditAccountMapper:
    """Maps between REST DTOs and domain models for credit accounts."""

    @staticmethod
    def to_open_request(dto: CreditAccountCreateDTO) -> OpenCreditAccountRequest:
        """
        Raises:
            ValidationError: If monetary strings cannot be converted to Decimals
        """
        errors: list[dict[str, str]] = []
        credit_limit = parse_decimal(dto.credit_limit, "credit_limit", errors)
        annual_rate = parse_decimal(dto.annual_interest_rate, "annual_interest_rate", errors)
        late_fee = parse_decimal(dto.late_fee_percentage, "late_fee_percentage", errors)

        if errors:
            raise ValidationError(errors=errors)

        return OpenCreditAccountRequest(
            client_id=dto.client_id,
            establishment_id=dto.establishment_id,
            credit_limit=credit_limit,  # type: ignore[arg-type]
            monthly_due_day=dto.monthly_due_day,
            annual_interest_rate=annual_rate,  # type: ignore[arg-type]
            interest_type=dto.interest_type,
            credit_type=dto.credit_type,
            grace_period_months=dto.grace_period_months,
            late_fee_percentage=late_fee,
        )

    @staticmethod
    def to_update_request(account_id: int, dto: CreditAccountUpdateDTO) -> UpdateCreditAccountTermsRequest:
        errors: list[dict[str, str]] = []
        credit_limit = parse_decimal(dto.credit_limit, "credit_limit", errors)
        annual_rate = parse_decimal(dto.annual_interest_rate, "annual_interest_rate", errors)
        late_fee = parse_decimal(dto.late_fee_percentage, "late_fee_percentage", errors)

        if errors:
            raise ValidationError(errors=errors)

        return UpdateCreditAccountTermsRequest(
            account_id=account_id,
            credit_limit=credit_limit,
            monthly_due_day=dto.monthly_due_day,
            annual_interest_rate=annual_rate,
            interest_type=dto.interest_type,
            grace_period_months=dto.grace_period_months,
            late_fee_percentage=late_fee,
            is_blocked=dto.is_blocked,
        )

    @staticmethod
    def to_response(account: CreditAccount) -> CreditAccountResponseDTO:
        """Decimal → string conversion at the boundary."""
        return CreditAccountResponseDTO(
            id=account.id,  # type: ignore[arg-type]
            client_id=account.client_id,
            establishment_id=account.establishment_id,
            credit_limit=str(account.credit_limit),
            current_balance=str(account.current_balance),
            available_credit=str(account.available_credit),
            monthly_due_day=account.monthly_due_day,
            annual_interest_rate=str(account.annual_interest_rate),
            interest_type=account.interest_type.value,
            credit_type=account.credit_type.value,
            grace_period_months=account.grace_period_months,
            late_fee_percentage=(
                str(account.late_fee_percentage) if account.late_fee_percentage is not None else None
            ),
            is_blocked=account.is_blocked,
            last_interest_accrual_at=account.last_interest_accrual_at.isoformat(),
        )
