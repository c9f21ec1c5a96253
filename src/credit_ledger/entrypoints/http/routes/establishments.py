from fastapi import APIRouter, Depends, status

from credit_ledger.entrypoints.http.dependencies import (
    get_add_late_fee_rule_use_case,
    get_list_overdue_accounts_use_case,
)
from credit_ledger.entrypoints.http.dtos.establishment import (
    LateFeeRuleCreateDTO,
    LateFeeRuleResponseDTO,
    OverdueAccountResponseDTO,
)
from credit_ledger.entrypoints.http.error_responses import VALIDATION_RESPONSE
from credit_ledger.entrypoints.http.mappers.establishment_mapper import EstablishmentMapper
from credit_ledger.use_cases.add_late_fee_rule import AddLateFeeRule
from credit_ledger.use_cases.list_overdue_accounts import ListOverdueAccounts


router = APIRouter(prefix="/establishments", tags=["Establishments"])


@router.post(
    "/{establishment_id}/late-fee-rules",
    response_model=LateFeeRuleResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Add a late fee tier",
    description="""
    Register a late fee tier covering `[min_days_overdue, max_days_overdue)`.

    - PERCENTAGE values are a percentage of the balance; FIXED values are amounts
    - The tier with the lowest `min_days_overdue` covering the overdue days wins
    - Establishments without tiers use each account's flat `late_fee_percentage`
    """,
    responses=VALIDATION_RESPONSE,
)
def add_late_fee_rule(
    establishment_id: int,
    payload: LateFeeRuleCreateDTO,
    use_case: AddLateFeeRule = Depends(get_add_late_fee_rule_use_case),
) -> LateFeeRuleResponseDTO:
    request = EstablishmentMapper.to_late_fee_rule_request(establishment_id, payload)
    return EstablishmentMapper.to_late_fee_rule_response(use_case.execute(request))


@router.get(
    "/{establishment_id}/overdue-accounts",
    response_model=list[OverdueAccountResponseDTO],
    summary="List overdue accounts",
)
def list_overdue_accounts(
    establishment_id: int,
    use_case: ListOverdueAccounts = Depends(get_list_overdue_accounts_use_case),
) -> list[OverdueAccountResponseDTO]:
    return [EstablishmentMapper.to_overdue_response(o) for o in use_case.execute(establishment_id)]
