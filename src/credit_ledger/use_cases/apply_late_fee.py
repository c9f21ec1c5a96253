from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.dates import days_overdue
from credit_ledger.domain.late_fee import LateFeeRule, flat_percentage_rule, select_rule
from credit_ledger.domain.transaction import Transaction, TransactionType
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import lock_account, post_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApplyLateFeeRequest:
    account_id: int


@dataclass(frozen=True, slots=True)
class ApplyLateFeeResponse:
    """``fee_amount`` is None when nothing was applied."""

    account: CreditAccount
    days_overdue: int
    fee_amount: Decimal | None = None
    rule: LateFeeRule | None = None
    transaction: Transaction | None = None

    @property
    def applied(self) -> bool:
        return self.transaction is not None


class ApplyLateFee:
    """
    Charge a late fee when this month's due date has passed.

    Fee tiers come from the establishment rules; an establishment without
    rules falls back to the account flat percentage as a single tier.
    One call posts at most one fee; cadence belongs to the caller.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: ApplyLateFeeRequest) -> ApplyLateFeeResponse:
        """
        Raises:
            AccountNotFound: If the account does not exist
            NoApplicableLateFeeRule: If no tier covers the overdue days
        """
        now = self._clock.now()

        with self._unit_of_work() as uow:
            account = lock_account(uow, request.account_id)
            overdue_days = days_overdue(now.date(), account.monthly_due_day)

            if overdue_days == 0 or account.current_balance <= 0:
                return ApplyLateFeeResponse(account=account, days_overdue=overdue_days)

            rules = uow.late_fee_rules.list_by_establishment(account.establishment_id)
            if not rules and account.late_fee_percentage is not None:
                rules = [flat_percentage_rule(account.establishment_id, account.late_fee_percentage)]

            rule = select_rule(rules, overdue_days)
            fee = rule.fee_for(account.current_balance)
            if fee <= 0:
                return ApplyLateFeeResponse(account=account, days_overdue=overdue_days, rule=rule)

            account, transaction = post_entry(
                uow,
                account,
                Transaction(
                    account_id=request.account_id,
                    transaction_type=TransactionType.LATE_FEE,
                    amount=fee,
                    description=f"Late fee ({overdue_days} days overdue)",
                    occurred_at=now,
                ),
            )
            uow.commit()

        logger.info(
            "Late fee applied",
            extra={
                "account_id": account.id,
                "days_overdue": overdue_days,
                "fee": str(fee),
                "fee_type": rule.fee_type.value,
                "balance": str(account.current_balance),
            },
        )
        return ApplyLateFeeResponse(
            account=account,
            days_overdue=overdue_days,
            fee_amount=fee,
            rule=rule,
            transaction=transaction,
        )
