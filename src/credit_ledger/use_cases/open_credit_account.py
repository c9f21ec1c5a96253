from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from credit_ledger.domain.credit_account import (
    AccountAlreadyExists,
    CreditAccount,
    CreditType,
    InterestType,
    parse_credit_type,
    parse_interest_type,
)
from credit_ledger.domain.money import to_cents
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OpenCreditAccountRequest:
    client_id: int
    establishment_id: int
    credit_limit: Decimal
    monthly_due_day: int
    annual_interest_rate: Decimal
    interest_type: InterestType | str
    credit_type: CreditType | str
    grace_period_months: int = 0
    late_fee_percentage: Decimal | None = None


class OpenCreditAccount:
    """
    Open a credit account for a client at an establishment.

    A client holds at most one account per establishment. Interest accrues
    from the opening instant.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: OpenCreditAccountRequest) -> CreditAccount:
        """
        Raises:
            ValidationError: If any account term is out of range
            InvalidCreditType: If credit_type is unknown
            InvalidInterestType: If interest_type is unknown
            AccountAlreadyExists: If the client already has an account at the establishment
        """
        account = CreditAccount(
            client_id=request.client_id,
            establishment_id=request.establishment_id,
            credit_limit=to_cents(request.credit_limit),
            monthly_due_day=request.monthly_due_day,
            annual_interest_rate=request.annual_interest_rate,
            interest_type=parse_interest_type(request.interest_type),
            credit_type=parse_credit_type(request.credit_type),
            last_interest_accrual_at=self._clock.now(),
            grace_period_months=request.grace_period_months,
            late_fee_percentage=request.late_fee_percentage,
        )
        account.validate()

        with self._unit_of_work() as uow:
            existing = uow.accounts.get_by_client_and_establishment(
                request.client_id, request.establishment_id
            )
            if existing is not None:
                raise AccountAlreadyExists(
                    "Client already has a credit account at this establishment",
                    client_id=request.client_id,
                    establishment_id=request.establishment_id,
                    account_id=existing.id,
                )
            account = uow.accounts.add(account)
            uow.commit()

        logger.info(
            "Credit account opened",
            extra={
                "account_id": account.id,
                "client_id": account.client_id,
                "establishment_id": account.establishment_id,
                "credit_type": account.credit_type.value,
                "credit_limit": str(account.credit_limit),
            },
        )
        return account
