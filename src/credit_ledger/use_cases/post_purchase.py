from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from credit_ledger.domain.credit_account import (
    AccountBlocked,
    CreditAccount,
    CreditLimitExceeded,
    CreditType,
    OverdueBalanceBlocksPurchase,
)
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.installment_schedule import build_schedule
from credit_ledger.domain.ledger import require_positive_amount
from credit_ledger.domain.money import to_cents
from credit_ledger.domain.transaction import Transaction, TransactionType
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import (
    client_overdue_balance,
    lock_account,
    pending_payments,
    post_entry,
    refresh_overdue_installments,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PostPurchaseRequest:
    account_id: int
    amount: Decimal
    description: str = "Purchase"


@dataclass(frozen=True, slots=True)
class PostPurchaseResponse:
    account: CreditAccount
    transaction: Transaction
    installments: list[Installment]


class PostPurchase:
    """
    Charge a purchase to a credit account.

    Checks, in order, under the account lock:
    1. Account is not blocked
    2. balance + pending payments + amount stays within the credit limit
    3. The client has no overdue balance on any of its accounts

    LONG_TERM purchases are amortized into installments in the same unit of work.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: PostPurchaseRequest) -> PostPurchaseResponse:
        """
        Raises:
            InvalidAmount: If amount is not positive
            AccountNotFound: If the account does not exist
            AccountBlocked: If the account is blocked
            CreditLimitExceeded: If the purchase does not fit the available credit
            OverdueBalanceBlocksPurchase: If the client owes an overdue balance
        """
        amount = to_cents(request.amount)
        require_positive_amount(amount)
        now = self._clock.now()
        today = now.date()

        with self._unit_of_work() as uow:
            account = lock_account(uow, request.account_id)

            if account.is_blocked:
                raise AccountBlocked("Credit account is blocked", account_id=account.id)

            # Pending payments may still fail and come back onto the balance.
            pending = pending_payments(uow, account.id)
            if account.current_balance + pending + amount > account.credit_limit:
                raise CreditLimitExceeded(
                    "Purchase amount exceeds credit limit",
                    account_id=account.id,
                    current_balance=str(account.current_balance),
                    pending_payments=str(pending),
                    credit_limit=str(account.credit_limit),
                    amount=str(amount),
                )

            if account.credit_type is CreditType.LONG_TERM:
                refresh_overdue_installments(uow, account, today)

            overdue = client_overdue_balance(uow, account.client_id, today)
            if overdue > 0:
                raise OverdueBalanceBlocksPurchase(
                    "Client has an overdue balance",
                    account_id=account.id,
                    client_id=account.client_id,
                    overdue_balance=str(overdue),
                )

            account, transaction = post_entry(
                uow,
                account,
                Transaction(
                    account_id=request.account_id,
                    transaction_type=TransactionType.PURCHASE,
                    amount=amount,
                    description=request.description,
                    occurred_at=now,
                ),
            )

            installments: list[Installment] = []
            if account.credit_type is CreditType.LONG_TERM:
                schedule = build_schedule(account, amount, today, transaction.id)
                installments = uow.installments.add_many(schedule.installments)

            uow.commit()

        logger.info(
            "Purchase posted",
            extra={
                "account_id": account.id,
                "transaction_id": transaction.id,
                "amount": str(amount),
                "balance": str(account.current_balance),
                "installments": len(installments),
            },
        )
        return PostPurchaseResponse(account=account, transaction=transaction, installments=installments)
