from pydantic import BaseModel, ConfigDict, Field

from credit_ledger.entrypoints.http.dtos.credit_account import (
    AMOUNT_PATTERN,
    CreditAccountResponseDTO,
)


class PurchaseRequestDTO(BaseModel):
    amount: str = Field(
        description="Purchase amount as decimal string",
        examples=["250.00"],
        pattern=AMOUNT_PATTERN,
    )
    description: str = Field(default="Purchase", max_length=255)


class PaymentRequestDTO(BaseModel):
    amount: str = Field(
        description="Payment amount as decimal string",
        examples=["100.00"],
        pattern=AMOUNT_PATTERN,
    )
    description: str = Field(default="Payment", max_length=255)
    payment_method: str = Field(
        default="CASH",
        description="CASH settles immediately; YAPE and PLIN need confirmation",
        examples=["YAPE"],
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"amount": "100.00", "description": "Payment", "payment_method": "YAPE"}
        }
    )


class ConfirmPaymentRequestDTO(BaseModel):
    confirmation_code: str = Field(
        description="Code received by the payer",
        examples=["482913"],
        min_length=1,
        max_length=12,
    )


class TransactionResponseDTO(BaseModel):
    id: int
    account_id: int
    transaction_type: str
    amount: str
    description: str
    occurred_at: str
    payment_method: str
    payment_status: str
    payment_code: str | None = None


class InstallmentResponseDTO(BaseModel):
    id: int
    sequence: int
    due_date: str
    amount: str
    paid_amount: str
    status: str
    purchase_transaction_id: int | None = None


class PostingResponseDTO(BaseModel):
    """Result of a purchase or payment."""

    account: CreditAccountResponseDTO
    transaction: TransactionResponseDTO
    installments: list[InstallmentResponseDTO]


class InterestAccrualResponseDTO(BaseModel):
    account: CreditAccountResponseDTO
    interest_amount: str
    transaction: TransactionResponseDTO | None = None


class LateFeeResponseDTO(BaseModel):
    account: CreditAccountResponseDTO
    days_overdue: int
    applied: bool
    fee_amount: str | None = None
    transaction: TransactionResponseDTO | None = None


class ConfirmPaymentResponseDTO(BaseModel):
    account: CreditAccountResponseDTO
    transaction: TransactionResponseDTO
    confirmed: bool


class ReversalResponseDTO(BaseModel):
    account: CreditAccountResponseDTO
    reversed: TransactionResponseDTO


class DueDateResponseDTO(BaseModel):
    account_id: int
    due_date: str


class AccountSummaryResponseDTO(BaseModel):
    account_id: int
    balance: str
    credit_limit: str
    available_credit: str
    due_date: str
    projected_interest: str
    transactions: list[TransactionResponseDTO]


class StatementQueryDTO(BaseModel):
    """ISO-8601 datetimes; a missing bound leaves the range open on that side."""

    start: str | None = Field(default=None, examples=["2026-01-01T00:00:00+00:00"])
    end: str | None = Field(default=None, examples=["2026-01-31T23:59:59+00:00"])


class AccountStatementResponseDTO(BaseModel):
    account_id: int
    start: str | None
    end: str | None
    starting_balance: str
    ending_balance: str
    transactions: list[TransactionResponseDTO]
