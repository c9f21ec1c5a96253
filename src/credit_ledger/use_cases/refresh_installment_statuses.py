from __future__ import annotations

import logging
from dataclasses import dataclass

from credit_ledger.domain.credit_account import CreditType
from credit_ledger.domain.installment import Installment, InstallmentStatus
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.ledger_posting import lock_account, refresh_overdue_installments

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RefreshInstallmentStatusesRequest:
    account_id: int


class RefreshInstallmentStatuses:
    """Flip past-due PENDING installments of an account to OVERDUE."""

    def __init__(self, unit_of_work: UnitOfWorkFactory, clock: Clock) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def execute(self, request: RefreshInstallmentStatusesRequest) -> list[Installment]:
        """
        Returns:
            The full installment schedule after the refresh, empty for SHORT_TERM accounts

        Raises:
            AccountNotFound: If the account does not exist
        """
        today = self._clock.now().date()

        with self._unit_of_work() as uow:
            account = lock_account(uow, request.account_id)
            if account.credit_type is not CreditType.LONG_TERM:
                return []
            installments = refresh_overdue_installments(uow, account, today)
            uow.commit()

        logger.info(
            "Installment statuses refreshed",
            extra={
                "account_id": account.id,
                "overdue": sum(1 for i in installments if i.status is InstallmentStatus.OVERDUE),
            },
        )
        return installments
