from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, replace

from credit_ledger.domain.credit_account import CreditAccount, CreditType
from credit_ledger.domain.installment import deallocate_payment
from credit_ledger.domain.transaction import (
    PaymentMethod,
    PaymentNotConfirmable,
    PaymentStatus,
    Transaction,
    TransactionNotFound,
    TransactionType,
)
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import lock_account, rebalance, release_block

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConfirmPaymentRequest:
    transaction_id: int
    confirmation_code: str


@dataclass(frozen=True, slots=True)
class ConfirmPaymentResponse:
    account: CreditAccount
    transaction: Transaction

    @property
    def confirmed(self) -> bool:
        return self.transaction.payment_status is PaymentStatus.SUCCESS


class ConfirmPayment:
    """
    Settle a pending YAPE/PLIN payment with the code the payer received.

    A matching code marks the payment SUCCESS and, when it was the last
    pending payment of a fully paid account, lifts the block. Any other code
    marks it FAILED and debits the amount back, since the balance already
    dropped when the payment was posted; the block stays as it was. Installment allocations of a failed LONG_TERM payment
    are undone.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: ConfirmPaymentRequest) -> ConfirmPaymentResponse:
        """
        Raises:
            TransactionNotFound: If the transaction does not exist
            PaymentNotConfirmable: If the transaction is not a pending non-cash payment
        """
        today = self._clock.now().date()

        with self._unit_of_work() as uow:
            account, payment = self._lock_payment(uow, request.transaction_id)

            if (
                payment.transaction_type is not TransactionType.PAYMENT
                or payment.payment_method is PaymentMethod.CASH
                or payment.payment_status is not PaymentStatus.PENDING
            ):
                raise PaymentNotConfirmable(
                    "Only pending non-cash payments can be confirmed",
                    transaction_id=payment.id,
                    transaction_type=payment.transaction_type.value,
                    payment_method=payment.payment_method.value,
                    payment_status=payment.payment_status.value,
                )

            if hmac.compare_digest(payment.payment_code or "", request.confirmation_code):
                settled = replace(
                    payment,
                    payment_status=PaymentStatus.SUCCESS,
                    confirmation_code=request.confirmation_code,
                )
                account = release_block(uow, account, payment)
            else:
                settled = replace(payment, payment_status=PaymentStatus.FAILED)
                account = rebalance(uow, account, payment, settled)
                if account.credit_type is CreditType.LONG_TERM:
                    uow.installments.save_many(
                        deallocate_payment(
                            uow.installments.list_by_account(account.id), payment.amount, today
                        )
                    )

            uow.transactions.save(settled)
            uow.commit()

        logger.info(
            "Payment confirmation processed",
            extra={
                "account_id": account.id,
                "transaction_id": settled.id,
                "payment_status": settled.payment_status.value,
                "balance": str(account.current_balance),
            },
        )
        return ConfirmPaymentResponse(account=account, transaction=settled)

    @staticmethod
    def _lock_payment(uow: UnitOfWork, transaction_id: int) -> tuple[CreditAccount, Transaction]:
        found = uow.transactions.get_by_id(transaction_id)
        if found is None:
            raise TransactionNotFound(transaction_id)
        account = lock_account(uow, found.account_id)
        # Re-read under the account lock; a concurrent confirmation may have settled it.
        payment = uow.transactions.get_by_id(transaction_id)
        if payment is None:
            raise TransactionNotFound(transaction_id)
        return account, payment
