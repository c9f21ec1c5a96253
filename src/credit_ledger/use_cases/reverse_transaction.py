from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from credit_ledger.domain.credit_account import CreditAccount, CreditType
from credit_ledger.domain.installment import deallocate_payment
from credit_ledger.domain.transaction import (
    PaymentStatus,
    ReversalNotAllowed,
    Transaction,
    TransactionNotFound,
    TransactionType,
)
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import lock_account, pending_payments, rebalance

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReverseTransactionRequest:
    transaction_id: int


@dataclass(frozen=True, slots=True)
class ReverseTransactionResponse:
    account: CreditAccount
    reversed: Transaction


class ReverseTransaction:
    """
    Remove a ledger entry and undo its effect on the balance.

    - A LONG_TERM purchase takes its installments with it, unless any of them
      has already received a payment
    - A payment gives back whatever it covered on the installments
    - Rejected when undoing the entry would leave a negative balance, or would
      put a payment back onto a balance that no longer fits the credit limit
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: ReverseTransactionRequest) -> ReverseTransactionResponse:
        """
        Raises:
            TransactionNotFound: If the transaction does not exist
            ReversalNotAllowed: If installments were paid, or the balance would go
                negative or over the credit limit
        """
        today = self._clock.now().date()

        with self._unit_of_work() as uow:
            account, entry = self._lock_entry(uow, request.transaction_id)

            restored = account.current_balance - entry.signed_amount
            if restored < 0:
                raise ReversalNotAllowed(
                    "Reversal would make the balance negative",
                    transaction_id=entry.id,
                    account_id=account.id,
                    current_balance=str(account.current_balance),
                )

            if restored > account.current_balance:
                owed = restored + pending_payments(uow, account.id, excluding=entry.id)
                if owed > account.credit_limit:
                    raise ReversalNotAllowed(
                        "Reversal would exceed the credit limit",
                        transaction_id=entry.id,
                        account_id=account.id,
                        current_balance=str(account.current_balance),
                        credit_limit=str(account.credit_limit),
                    )

            if account.credit_type is CreditType.LONG_TERM:
                self._unwind_installments(uow, entry, today)

            uow.transactions.delete(entry.id)
            account = rebalance(uow, account, entry, None)
            uow.commit()

        logger.info(
            "Transaction reversed",
            extra={
                "account_id": account.id,
                "transaction_id": entry.id,
                "transaction_type": entry.transaction_type.value,
                "amount": str(entry.amount),
                "balance": str(account.current_balance),
            },
        )
        return ReverseTransactionResponse(account=account, reversed=entry)

    @staticmethod
    def _lock_entry(uow: UnitOfWork, transaction_id: int) -> tuple[CreditAccount, Transaction]:
        found = uow.transactions.get_by_id(transaction_id)
        if found is None:
            raise TransactionNotFound(transaction_id)
        account = lock_account(uow, found.account_id)
        entry = uow.transactions.get_by_id(transaction_id)
        if entry is None:
            raise TransactionNotFound(transaction_id)
        return account, entry

    @staticmethod
    def _unwind_installments(uow: UnitOfWork, entry: Transaction, today: date) -> None:
        if entry.transaction_type is TransactionType.PURCHASE:
            installments = uow.installments.list_by_purchase(entry.id)
            if any(i.paid_amount > 0 for i in installments):
                raise ReversalNotAllowed(
                    "Purchase installments have already received payments",
                    transaction_id=entry.id,
                )
            uow.installments.delete_many([i.id for i in installments])
        elif (
            entry.transaction_type is TransactionType.PAYMENT
            and entry.payment_status is not PaymentStatus.FAILED
        ):
            uow.installments.save_many(
                deallocate_payment(
                    uow.installments.list_by_account(entry.account_id), entry.amount, today
                )
            )
