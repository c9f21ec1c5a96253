from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from credit_ledger.domain.credit_account import CreditAccount, CreditType, PaymentExceedsBalance
from credit_ledger.domain.installment import Installment, allocate_payment
from credit_ledger.domain.ledger import require_positive_amount
from credit_ledger.domain.money import to_cents
from credit_ledger.domain.transaction import (
    PaymentMethod,
    PaymentStatus,
    Transaction,
    TransactionType,
)
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.payment_code_generator import PaymentCodeGenerator
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import (
    lock_account,
    post_entry,
    refresh_overdue_installments,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PostPaymentRequest:
    account_id: int
    amount: Decimal
    description: str = "Payment"
    payment_method: PaymentMethod = PaymentMethod.CASH


@dataclass(frozen=True, slots=True)
class PostPaymentResponse:
    account: CreditAccount
    transaction: Transaction
    installments: list[Installment]


class PostPayment:
    """
    Credit a payment to an account.

    - Cash payments are settled immediately (SUCCESS)
    - YAPE/PLIN payments start PENDING with a payment code to confirm later
    - The balance drops at posting time. A blocked account whose balance
      reaches zero is unblocked only once no payment is left pending
    - LONG_TERM payments are allocated to installments, oldest due first
    """

    def __init__(
        self,
        unit_of_work: UnitOfWorkFactory,
        clock: Clock,
        payment_codes: PaymentCodeGenerator,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock
        self._payment_codes = payment_codes

    def execute(self, request: PostPaymentRequest) -> PostPaymentResponse:
        """
        Raises:
            InvalidAmount: If amount is not positive
            AccountNotFound: If the account does not exist
            PaymentExceedsBalance: If amount is greater than the current balance
        """
        amount = to_cents(request.amount)
        require_positive_amount(amount)
        now = self._clock.now()

        if request.payment_method is PaymentMethod.CASH:
            status, code = PaymentStatus.SUCCESS, None
        else:
            status, code = PaymentStatus.PENDING, self._payment_codes.generate()

        with self._unit_of_work() as uow:
            account = lock_account(uow, request.account_id)

            if amount > account.current_balance:
                raise PaymentExceedsBalance(
                    "Payment amount exceeds current balance",
                    account_id=account.id,
                    current_balance=str(account.current_balance),
                    amount=str(amount),
                )

            account, transaction = post_entry(
                uow,
                account,
                Transaction(
                    account_id=request.account_id,
                    transaction_type=TransactionType.PAYMENT,
                    amount=amount,
                    description=request.description,
                    occurred_at=now,
                    payment_method=request.payment_method,
                    payment_status=status,
                    payment_code=code,
                ),
            )

            allocated: list[Installment] = []
            if account.credit_type is CreditType.LONG_TERM:
                schedule = refresh_overdue_installments(uow, account, now.date())
                allocated = allocate_payment(schedule, amount)
                uow.installments.save_many(allocated)

            uow.commit()

        logger.info(
            "Payment posted",
            extra={
                "account_id": account.id,
                "transaction_id": transaction.id,
                "amount": str(amount),
                "payment_method": request.payment_method.value,
                "payment_status": status.value,
                "balance": str(account.current_balance),
                "is_blocked": account.is_blocked,
            },
        )
        return PostPaymentResponse(account=account, transaction=transaction, installments=allocated)
