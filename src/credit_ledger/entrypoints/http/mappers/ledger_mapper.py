from __future__ import annotations

from datetime import date, datetime, timezone

from credit_ledger.domain.errors import ValidationError
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.statement import AccountStatement, AccountSummary
from credit_ledger.domain.transaction import PaymentMethod, Transaction
from credit_ledger.entrypoints.http.dtos.ledger import (
    AccountStatementResponseDTO,
    AccountSummaryResponseDTO,
    ConfirmPaymentRequestDTO,
    ConfirmPaymentResponseDTO,
    DueDateResponseDTO,
    InstallmentResponseDTO,
    InterestAccrualResponseDTO,
    LateFeeResponseDTO,
    PaymentRequestDTO,
    PostingResponseDTO,
    PurchaseRequestDTO,
    ReversalResponseDTO,
    StatementQueryDTO,
    TransactionResponseDTO,
)
from credit_ledger.entrypoints.http.mappers.credit_account_mapper import (
    CreditAccountMapper,
    parse_decimal,
)
from credit_ledger.use_cases.accrue_interest import AccrueInterestResponse
from credit_ledger.use_cases.apply_late_fee import ApplyLateFeeResponse
from credit_ledger.use_cases.build_account_statement import BuildAccountStatementRequest
from credit_ledger.use_cases.confirm_payment import ConfirmPaymentRequest, ConfirmPaymentResponse
from credit_ledger.use_cases.post_payment import PostPaymentRequest, PostPaymentResponse
from credit_ledger.use_cases.post_purchase import PostPurchaseRequest, PostPurchaseResponse
from credit_ledger.use_cases.reverse_transaction import ReverseTransactionResponse


def _parse_datetime(value: str | None, field: str, errors: list[dict[str, str]]) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        errors.append(
            {
                "field": field,
                "message": f"Must be an ISO-8601 datetime: {value}",
                "code": "INVALID_DATETIME",
            }
        )
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


class LedgerMapper:
    """Maps between REST DTOs and domain models for ledger operations."""

    @staticmethod
    def to_purchase_request(account_id: int, dto: PurchaseRequestDTO) -> PostPurchaseRequest:
        errors: list[dict[str, str]] = []
        amount = parse_decimal(dto.amount, "amount", errors)
        if errors:
            raise ValidationError(errors=errors)
        return PostPurchaseRequest(
            account_id=account_id,
            amount=amount,  # type: ignore[arg-type]
            description=dto.description,
        )

    @staticmethod
    def to_payment_request(account_id: int, dto: PaymentRequestDTO) -> PostPaymentRequest:
        errors: list[dict[str, str]] = []
        amount = parse_decimal(dto.amount, "amount", errors)
        try:
            method = PaymentMethod(dto.payment_method)
        except ValueError:
            errors.append(
                {
                    "field": "payment_method",
                    "message": f"Must be one of {[m.value for m in PaymentMethod]}",
                    "code": "INVALID_VALUE",
                }
            )
        if errors:
            raise ValidationError(errors=errors)
        return PostPaymentRequest(
            account_id=account_id,
            amount=amount,  # type: ignore[arg-type]
            description=dto.description,
            payment_method=method,
        )

    @staticmethod
    def to_confirm_request(transaction_id: int, dto: ConfirmPaymentRequestDTO) -> ConfirmPaymentRequest:
        return ConfirmPaymentRequest(
            transaction_id=transaction_id,
            confirmation_code=dto.confirmation_code,
        )

    @staticmethod
    def to_statement_request(account_id: int, dto: StatementQueryDTO) -> BuildAccountStatementRequest:
        errors: list[dict[str, str]] = []
        start = _parse_datetime(dto.start, "start", errors)
        end = _parse_datetime(dto.end, "end", errors)
        if errors:
            raise ValidationError(errors=errors)
        return BuildAccountStatementRequest(account_id=account_id, start=start, end=end)

    @staticmethod
    def to_transaction_response(transaction: Transaction) -> TransactionResponseDTO:
        return TransactionResponseDTO(
            id=transaction.id,  # type: ignore[arg-type]
            account_id=transaction.account_id,
            transaction_type=transaction.transaction_type.value,
            amount=str(transaction.amount),
            description=transaction.description,
            occurred_at=transaction.occurred_at.isoformat(),
            payment_method=transaction.payment_method.value,
            payment_status=transaction.payment_status.value,
            payment_code=transaction.payment_code,
        )

    @staticmethod
    def to_installment_response(installment: Installment) -> InstallmentResponseDTO:
        return InstallmentResponseDTO(
            id=installment.id,  # type: ignore[arg-type]
            sequence=installment.sequence,
            due_date=installment.due_date.isoformat(),
            amount=str(installment.amount),
            paid_amount=str(installment.paid_amount),
            status=installment.status.value,
            purchase_transaction_id=installment.purchase_transaction_id,
        )

    @classmethod
    def to_posting_response(
        cls, result: PostPurchaseResponse | PostPaymentResponse
    ) -> PostingResponseDTO:
        return PostingResponseDTO(
            account=CreditAccountMapper.to_response(result.account),
            transaction=cls.to_transaction_response(result.transaction),
            installments=[cls.to_installment_response(i) for i in result.installments],
        )

    @classmethod
    def to_accrual_response(cls, result: AccrueInterestResponse) -> InterestAccrualResponseDTO:
        return InterestAccrualResponseDTO(
            account=CreditAccountMapper.to_response(result.account),
            interest_amount=str(result.interest_amount),
            transaction=(
                cls.to_transaction_response(result.transaction) if result.transaction else None
            ),
        )

    @classmethod
    def to_late_fee_response(cls, result: ApplyLateFeeResponse) -> LateFeeResponseDTO:
        return LateFeeResponseDTO(
            account=CreditAccountMapper.to_response(result.account),
            days_overdue=result.days_overdue,
            applied=result.applied,
            fee_amount=str(result.fee_amount) if result.fee_amount is not None else None,
            transaction=(
                cls.to_transaction_response(result.transaction) if result.transaction else None
            ),
        )

    @classmethod
    def to_confirm_response(cls, result: ConfirmPaymentResponse) -> ConfirmPaymentResponseDTO:
        return ConfirmPaymentResponseDTO(
            account=CreditAccountMapper.to_response(result.account),
            transaction=cls.to_transaction_response(result.transaction),
            confirmed=result.confirmed,
        )

    @classmethod
    def to_reversal_response(cls, result: ReverseTransactionResponse) -> ReversalResponseDTO:
        return ReversalResponseDTO(
            account=CreditAccountMapper.to_response(result.account),
            reversed=cls.to_transaction_response(result.reversed),
        )

    @staticmethod
    def to_due_date_response(account_id: int, due_date: date) -> DueDateResponseDTO:
        return DueDateResponseDTO(account_id=account_id, due_date=due_date.isoformat())

    @classmethod
    def to_summary_response(cls, summary: AccountSummary) -> AccountSummaryResponseDTO:
        return AccountSummaryResponseDTO(
            account_id=summary.account_id,
            balance=str(summary.balance),
            credit_limit=str(summary.credit_limit),
            available_credit=str(summary.available_credit),
            due_date=summary.due_date.isoformat(),
            projected_interest=str(summary.projected_interest),
            transactions=[cls.to_transaction_response(t) for t in summary.transactions],
        )

    @classmethod
    def to_statement_response(cls, statement: AccountStatement) -> AccountStatementResponseDTO:
        return AccountStatementResponseDTO(
            account_id=statement.account_id,
            start=statement.start.isoformat() if statement.start else None,
            end=statement.end.isoformat() if statement.end else None,
            starting_balance=str(statement.starting_balance),
            ending_balance=str(statement.ending_balance),
            transactions=[cls.to_transaction_response(t) for t in statement.transactions],
        )
