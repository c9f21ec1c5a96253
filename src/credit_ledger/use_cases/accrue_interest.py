from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal

from credit_ledger.domain.credit_account import CreditAccount, CreditType
from credit_ledger.domain.interest import accrued_interest_to_cents, is_accrual_due
from credit_ledger.domain.money import ZERO
from credit_ledger.domain.transaction import Transaction, TransactionType
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import lock_account, post_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AccrueInterestRequest:
    account_id: int


@dataclass(frozen=True, slots=True)
class AccrueInterestResponse:
    account: CreditAccount
    interest_amount: Decimal
    transaction: Transaction | None = None


class AccrueInterest:
    """
    Capitalize interest for the period since the last accrual.

    Idempotent within a period: until one month has elapsed since
    ``last_interest_accrual_at`` the call returns zero and changes nothing.
    Scheduling is the caller's job; failures are not retried here.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: AccrueInterestRequest) -> AccrueInterestResponse:
        now = self._clock.now()

        with self._unit_of_work() as uow:
            account = lock_account(uow, request.account_id)

            if not is_accrual_due(account.last_interest_accrual_at, now):
                logger.debug(
                    "Interest accrual skipped, period not elapsed",
                    extra={"account_id": account.id},
                )
                return AccrueInterestResponse(account=account, interest_amount=ZERO)

            installments = (
                uow.installments.list_by_account(request.account_id)
                if account.credit_type is CreditType.LONG_TERM
                else []
            )
            interest = accrued_interest_to_cents(account, installments, now)

            transaction = None
            if interest > 0:
                account, transaction = post_entry(
                    uow,
                    account,
                    Transaction(
                        account_id=request.account_id,
                        transaction_type=TransactionType.INTEREST_ACCRUAL,
                        amount=interest,
                        description="Interest accrual",
                        occurred_at=now,
                    ),
                )

            account = replace(account, last_interest_accrual_at=now)
            uow.accounts.save(account)
            uow.commit()

        logger.info(
            "Interest accrued",
            extra={
                "account_id": account.id,
                "interest": str(interest),
                "balance": str(account.current_balance),
            },
        )
        return AccrueInterestResponse(account=account, interest_amount=interest, transaction=transaction)
