from __future__ import annotations

from credit_ledger.domain.errors import ValidationError
from credit_ledger.domain.late_fee import FeeType, LateFeeRule
from credit_ledger.entrypoints.http.dtos.establishment import (
    LateFeeRuleCreateDTO,
    LateFeeRuleResponseDTO,
    OverdueAccountResponseDTO,
)
from credit_ledger.entrypoints.http.mappers.credit_account_mapper import (
    CreditAccountMapper,
    parse_decimal,
)
from credit_ledger.use_cases.add_late_fee_rule import AddLateFeeRuleRequest
from credit_ledger.use_cases.list_overdue_accounts import OverdueAccount


class EstablishmentMapper:
    """Maps late fee tiers and overdue listings of an establishment."""

    @staticmethod
    def to_late_fee_rule_request(
        establishment_id: int, dto: LateFeeRuleCreateDTO
    ) -> AddLateFeeRuleRequest:
        errors: list[dict[str, str]] = []
        value = parse_decimal(dto.value, "value", errors)
        try:
            fee_type = FeeType(dto.fee_type)
        except ValueError:
            errors.append(
                {
                    "field": "fee_type",
                    "message": f"Must be one of {[t.value for t in FeeType]}",
                    "code": "INVALID_VALUE",
                }
            )
        if errors:
            raise ValidationError(errors=errors)

        return AddLateFeeRuleRequest(
            establishment_id=establishment_id,
            min_days_overdue=dto.min_days_overdue,
            max_days_overdue=dto.max_days_overdue,
            fee_type=fee_type,
            value=value,  # type: ignore[arg-type]
        )

    @staticmethod
    def to_late_fee_rule_response(rule: LateFeeRule) -> LateFeeRuleResponseDTO:
        return LateFeeRuleResponseDTO(
            id=rule.id,  # type: ignore[arg-type]
            establishment_id=rule.establishment_id,
            min_days_overdue=rule.min_days_overdue,
            max_days_overdue=rule.max_days_overdue,
            fee_type=rule.fee_type.value,
            value=str(rule.value),
        )

    @staticmethod
    def to_overdue_response(overdue: OverdueAccount) -> OverdueAccountResponseDTO:
        return OverdueAccountResponseDTO(
            account=CreditAccountMapper.to_response(overdue.account),
            overdue_amount=str(overdue.overdue_amount),
            days_overdue=overdue.days_overdue,
        )
