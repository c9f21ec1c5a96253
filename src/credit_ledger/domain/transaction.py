from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable

from credit_ledger.domain.errors import ConflictError, NotFoundError
from credit_ledger.domain.money import ZERO


class TransactionNotFound(NotFoundError):
    def __init__(self, transaction_id: int | str) -> None:
        super().__init__(resource="Transaction", identifier=str(transaction_id))


class PaymentNotConfirmable(ConflictError):
    error_code = "PAYMENT_NOT_CONFIRMABLE"


class ReversalNotAllowed(ConflictError):
    error_code = "REVERSAL_NOT_ALLOWED"


class TransactionType(str, Enum):
    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"
    INTEREST_ACCRUAL = "INTEREST_ACCRUAL"
    LATE_FEE = "LATE_FEE"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    YAPE = "YAPE"
    PLIN = "PLIN"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    Immutable ledger entry.

    Only payments made with a non-cash method go through the
    PENDING -> SUCCESS | FAILED confirmation workflow; every other entry is
    created as SUCCESS.
    """

    account_id: int
    transaction_type: TransactionType
    amount: Decimal
    description: str
    occurred_at: datetime
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.SUCCESS
    payment_code: str | None = None
    confirmation_code: str | None = None
    id: int | None = None

    @property
    def is_debit(self) -> bool:
        return self.transaction_type is not TransactionType.PAYMENT

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this entry on the account balance."""
        if self.transaction_type is TransactionType.PAYMENT:
            if self.payment_status is PaymentStatus.FAILED:
                return ZERO
            return -self.amount
        return self.amount


def reconcile(transactions: Iterable[Transaction]) -> Decimal:
    """Balance implied by a set of ledger entries."""
    return sum((t.signed_amount for t in transactions), ZERO)


def pending_payment_total(transactions: Iterable[Transaction]) -> Decimal:
    """
    Sum of payments still awaiting confirmation.

    Their amount is already off the balance but comes back if the
    confirmation fails, so it still counts against the credit limit.
    """
    return sum(
        (
            t.amount
            for t in transactions
            if t.transaction_type is TransactionType.PAYMENT
            and t.payment_status is PaymentStatus.PENDING
        ),
        ZERO,
    )
