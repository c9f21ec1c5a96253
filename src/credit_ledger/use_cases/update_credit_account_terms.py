from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from credit_ledger.domain.credit_account import (
    CreditAccount,
    InterestType,
    parse_interest_type,
)
from credit_ledger.domain.errors import ValidationError
from credit_ledger.domain.money import to_cents
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import lock_account

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateCreditAccountTermsRequest:
    """Fields left as None are not changed."""

    account_id: int
    credit_limit: Decimal | None = None
    monthly_due_day: int | None = None
    annual_interest_rate: Decimal | None = None
    interest_type: InterestType | str | None = None
    grace_period_months: int | None = None
    late_fee_percentage: Decimal | None = None
    is_blocked: bool | None = None


class UpdateCreditAccountTerms:
    """
    Partially update the terms of a credit account.

    Also used to block or unblock an account by hand. The credit type is
    fixed at opening and the balance only moves through ledger entries.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory) -> None:
        self._unit_of_work = unit_of_work

    def execute(self, request: UpdateCreditAccountTermsRequest) -> CreditAccount:
        """
        Raises:
            AccountNotFound: If the account does not exist
            ValidationError: If a term is out of range or the new limit is below the balance
            InvalidInterestType: If interest_type is unknown
        """
        changes: dict[str, Any] = {}
        if request.credit_limit is not None:
            changes["credit_limit"] = to_cents(request.credit_limit)
        if request.monthly_due_day is not None:
            changes["monthly_due_day"] = request.monthly_due_day
        if request.annual_interest_rate is not None:
            changes["annual_interest_rate"] = request.annual_interest_rate
        if request.interest_type is not None:
            changes["interest_type"] = parse_interest_type(request.interest_type)
        if request.grace_period_months is not None:
            changes["grace_period_months"] = request.grace_period_months
        if request.late_fee_percentage is not None:
            changes["late_fee_percentage"] = request.late_fee_percentage
        if request.is_blocked is not None:
            changes["is_blocked"] = request.is_blocked

        with self._unit_of_work() as uow:
            account = lock_account(uow, request.account_id)
            if not changes:
                return account

            updated = replace(account, **changes)
            updated.validate()
            if "credit_limit" in changes and updated.credit_limit < updated.current_balance:
                raise ValidationError(
                    errors=[
                        {
                            "field": "credit_limit",
                            "message": "Must not be lower than the current balance",
                            "code": "CREDIT_LIMIT_BELOW_BALANCE",
                        }
                    ],
                    account_id=account.id,
                    current_balance=str(account.current_balance),
                )

            uow.accounts.save(updated)
            uow.commit()

        logger.info(
            "Credit account terms updated",
            extra={"account_id": updated.id, "fields": sorted(changes)},
        )
        return updated
