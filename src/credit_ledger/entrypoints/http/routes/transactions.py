from fastapi import APIRouter, Depends

from credit_ledger.entrypoints.http.dependencies import (
    get_confirm_payment_use_case,
    get_reverse_transaction_use_case,
)
from credit_ledger.entrypoints.http.dtos.ledger import (
    ConfirmPaymentRequestDTO,
    ConfirmPaymentResponseDTO,
    ReversalResponseDTO,
)
from credit_ledger.entrypoints.http.error_responses import CONFLICT_RESPONSE, NOT_FOUND_RESPONSE
from credit_ledger.entrypoints.http.mappers.ledger_mapper import LedgerMapper
from credit_ledger.use_cases.confirm_payment import ConfirmPayment
from credit_ledger.use_cases.reverse_transaction import (
    ReverseTransaction,
    ReverseTransactionRequest,
)


router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post(
    "/{transaction_id}/confirmation",
    response_model=ConfirmPaymentResponseDTO,
    summary="Confirm a pending payment",
    description="""
    Settle a pending YAPE/PLIN payment.

    A matching code marks the payment SUCCESS. Any other code marks it FAILED
    and debits the amount back to the account; the response has
    `confirmed: false` in that case.
    """,
    responses={**NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE},
)
def confirm_payment(
    transaction_id: int,
    payload: ConfirmPaymentRequestDTO,
    use_case: ConfirmPayment = Depends(get_confirm_payment_use_case),
) -> ConfirmPaymentResponseDTO:
    request = LedgerMapper.to_confirm_request(transaction_id, payload)
    return LedgerMapper.to_confirm_response(use_case.execute(request))


@router.delete(
    "/{transaction_id}",
    response_model=ReversalResponseDTO,
    summary="Reverse a ledger entry",
    description="Remove an entry and undo its effect on the balance (409 REVERSAL_NOT_ALLOWED when it cannot be undone).",
    responses={**NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE},
)
def reverse_transaction(
    transaction_id: int,
    use_case: ReverseTransaction = Depends(get_reverse_transaction_use_case),
) -> ReversalResponseDTO:
    result = use_case.execute(ReverseTransactionRequest(transaction_id=transaction_id))
    return LedgerMapper.to_reversal_response(result)
