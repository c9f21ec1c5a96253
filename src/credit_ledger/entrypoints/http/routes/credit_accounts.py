from fastapi import APIRouter, Depends, status

from credit_ledger.entrypoints.http.dependencies import (
    get_accrue_interest_use_case,
    get_account_statement_use_case,
    get_account_summary_use_case,
    get_apply_late_fee_use_case,
    get_credit_account_use_case,
    get_next_due_date_use_case,
    get_open_credit_account_use_case,
    get_post_payment_use_case,
    get_post_purchase_use_case,
    get_refresh_installment_statuses_use_case,
    get_update_credit_account_terms_use_case,
)
from credit_ledger.entrypoints.http.dtos.credit_account import (
    CreditAccountCreateDTO,
    CreditAccountResponseDTO,
    CreditAccountUpdateDTO,
)
from credit_ledger.entrypoints.http.dtos.ledger import (
    AccountStatementResponseDTO,
    AccountSummaryResponseDTO,
    DueDateResponseDTO,
    InstallmentResponseDTO,
    InterestAccrualResponseDTO,
    LateFeeResponseDTO,
    PaymentRequestDTO,
    PostingResponseDTO,
    PurchaseRequestDTO,
    StatementQueryDTO,
)
from credit_ledger.entrypoints.http.error_responses import (
    CONFLICT_RESPONSE,
    NOT_FOUND_RESPONSE,
    VALIDATION_RESPONSE,
)
from credit_ledger.entrypoints.http.mappers.credit_account_mapper import CreditAccountMapper
from credit_ledger.entrypoints.http.mappers.ledger_mapper import LedgerMapper
from credit_ledger.use_cases.accrue_interest import AccrueInterest, AccrueInterestRequest
from credit_ledger.use_cases.apply_late_fee import ApplyLateFee, ApplyLateFeeRequest
from credit_ledger.use_cases.build_account_statement import BuildAccountStatement
from credit_ledger.use_cases.build_account_summary import (
    BuildAccountSummary,
    BuildAccountSummaryRequest,
)
from credit_ledger.use_cases.get_credit_account import GetCreditAccount
from credit_ledger.use_cases.get_next_due_date import GetNextDueDate, GetNextDueDateRequest
from credit_ledger.use_cases.open_credit_account import OpenCreditAccount
from credit_ledger.use_cases.post_payment import PostPayment
from credit_ledger.use_cases.post_purchase import PostPurchase
from credit_ledger.use_cases.refresh_installment_statuses import (
    RefreshInstallmentStatuses,
    RefreshInstallmentStatusesRequest,
)
from credit_ledger.use_cases.update_credit_account_terms import UpdateCreditAccountTerms


router = APIRouter(prefix="/credit-accounts", tags=["Credit Accounts"])


@router.post(
    "",
    response_model=CreditAccountResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Open a credit account",
    description="""
    Open a credit account for a client at an establishment.

    ## Monetary Values
    - All monetary values are strings (e.g., "1500.00")
    - Rates are percentages as strings (e.g., "24.5" = 24.5% a year)

    ## Rules
    - One account per client and establishment (409 ACCOUNT_ALREADY_EXISTS)
    - credit_type: SHORT_TERM (revolving) or LONG_TERM (installments)
    - interest_type: NOMINAL or EFFECTIVE
    """,
    responses={**VALIDATION_RESPONSE, **CONFLICT_RESPONSE},
)
def open_credit_account(
    payload: CreditAccountCreateDTO,
    use_case: OpenCreditAccount = Depends(get_open_credit_account_use_case),
) -> CreditAccountResponseDTO:
    """
    Follows the parse → execute → map → return pattern:
    1. Parse: FastAPI + Pydantic handle request parsing
    2. Map: Convert DTO to domain request
    3. Execute: Call use case (which validates domain rules)
    4. Map: Convert domain result to response DTO
    """
    request = CreditAccountMapper.to_open_request(payload)
    account = use_case.execute(request)
    return CreditAccountMapper.to_response(account)


@router.get(
    "/{account_id}",
    response_model=CreditAccountResponseDTO,
    summary="Get a credit account",
    responses=NOT_FOUND_RESPONSE,
)
def get_credit_account(
    account_id: int,
    use_case: GetCreditAccount = Depends(get_credit_account_use_case),
) -> CreditAccountResponseDTO:
    return CreditAccountMapper.to_response(use_case.execute(account_id))


@router.patch(
    "/{account_id}",
    response_model=CreditAccountResponseDTO,
    summary="Update account terms",
    description="""
    Partially update the terms of an account. Omitted fields are unchanged.

    - `is_blocked` blocks or unblocks the account by hand
    - A credit limit below the current balance is rejected (422)
    """,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE},
)
def update_credit_account_terms(
    account_id: int,
    payload: CreditAccountUpdateDTO,
    use_case: UpdateCreditAccountTerms = Depends(get_update_credit_account_terms_use_case),
) -> CreditAccountResponseDTO:
    request = CreditAccountMapper.to_update_request(account_id, payload)
    return CreditAccountMapper.to_response(use_case.execute(request))


@router.post(
    "/{account_id}/purchases",
    response_model=PostingResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Post a purchase",
    description="""
    Charge a purchase to the account.

    Rejected with 409 when the account is blocked (ACCOUNT_BLOCKED), the
    purchase exceeds the available credit (CREDIT_LIMIT_EXCEEDED) or the client
    has an overdue balance on any account (OVERDUE_BALANCE_BLOCKS_PURCHASE).
    LONG_TERM purchases return their installment schedule.
    """,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE, **CONFLICT_RESPONSE},
)
def post_purchase(
    account_id: int,
    payload: PurchaseRequestDTO,
    use_case: PostPurchase = Depends(get_post_purchase_use_case),
) -> PostingResponseDTO:
    request = LedgerMapper.to_purchase_request(account_id, payload)
    return LedgerMapper.to_posting_response(use_case.execute(request))


@router.post(
    "/{account_id}/payments",
    response_model=PostingResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Post a payment",
    description="""
    Credit a payment to the account.

    - CASH payments settle immediately
    - YAPE/PLIN payments are PENDING and carry a `payment_code`; confirm them
      with `POST /v1/transactions/{id}/confirmation`
    - Payments larger than the balance are rejected (409 PAYMENT_EXCEEDS_BALANCE)
    """,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE, **CONFLICT_RESPONSE},
)
def post_payment(
    account_id: int,
    payload: PaymentRequestDTO,
    use_case: PostPayment = Depends(get_post_payment_use_case),
) -> PostingResponseDTO:
    request = LedgerMapper.to_payment_request(account_id, payload)
    return LedgerMapper.to_posting_response(use_case.execute(request))


@router.post(
    "/{account_id}/interest-accruals",
    response_model=InterestAccrualResponseDTO,
    summary="Accrue interest",
    description="Capitalize interest when a month has elapsed since the last accrual; otherwise returns 0.",
    responses=NOT_FOUND_RESPONSE,
)
def accrue_interest(
    account_id: int,
    use_case: AccrueInterest = Depends(get_accrue_interest_use_case),
) -> InterestAccrualResponseDTO:
    result = use_case.execute(AccrueInterestRequest(account_id=account_id))
    return LedgerMapper.to_accrual_response(result)


@router.post(
    "/{account_id}/late-fees",
    response_model=LateFeeResponseDTO,
    summary="Apply a late fee",
    description="Charge a late fee when this month's due date has passed and a balance is owed.",
    responses={**NOT_FOUND_RESPONSE, **CONFLICT_RESPONSE},
)
def apply_late_fee(
    account_id: int,
    use_case: ApplyLateFee = Depends(get_apply_late_fee_use_case),
) -> LateFeeResponseDTO:
    result = use_case.execute(ApplyLateFeeRequest(account_id=account_id))
    return LedgerMapper.to_late_fee_response(result)


@router.post(
    "/{account_id}/installments/refresh",
    response_model=list[InstallmentResponseDTO],
    summary="Refresh installment statuses",
    responses=NOT_FOUND_RESPONSE,
)
def refresh_installment_statuses(
    account_id: int,
    use_case: RefreshInstallmentStatuses = Depends(get_refresh_installment_statuses_use_case),
) -> list[InstallmentResponseDTO]:
    installments = use_case.execute(RefreshInstallmentStatusesRequest(account_id=account_id))
    return [LedgerMapper.to_installment_response(i) for i in installments]


@router.get(
    "/{account_id}/due-date",
    response_model=DueDateResponseDTO,
    summary="Next due date",
    responses=NOT_FOUND_RESPONSE,
)
def get_next_due_date(
    account_id: int,
    use_case: GetNextDueDate = Depends(get_next_due_date_use_case),
) -> DueDateResponseDTO:
    due_date = use_case.execute(GetNextDueDateRequest(account_id=account_id))
    return LedgerMapper.to_due_date_response(account_id, due_date)


@router.get(
    "/{account_id}/summary",
    response_model=AccountSummaryResponseDTO,
    summary="Account summary up to the next due date",
    responses=NOT_FOUND_RESPONSE,
)
def get_account_summary(
    account_id: int,
    use_case: BuildAccountSummary = Depends(get_account_summary_use_case),
) -> AccountSummaryResponseDTO:
    summary = use_case.execute(BuildAccountSummaryRequest(account_id=account_id))
    return LedgerMapper.to_summary_response(summary)


@router.get(
    "/{account_id}/statement",
    response_model=AccountStatementResponseDTO,
    summary="Account statement for a date range",
    description="""
    Entries between `start` and `end` (ISO-8601, both optional and inclusive)
    with the balance before and after the range.

    ## Example
    ```
    GET /v1/credit-accounts/42/statement?start=2026-01-01T00:00:00Z&end=2026-01-31T23:59:59Z
    ```
    """,
    responses={**NOT_FOUND_RESPONSE, **VALIDATION_RESPONSE},
)
def get_account_statement(
    account_id: int,
    query: StatementQueryDTO = Depends(),
    use_case: BuildAccountStatement = Depends(get_account_statement_use_case),
) -> AccountStatementResponseDTO:
    request = LedgerMapper.to_statement_request(account_id, query)
    return LedgerMapper.to_statement_response(use_case.execute(request))
