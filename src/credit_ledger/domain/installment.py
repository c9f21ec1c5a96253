from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable

from credit_ledger.domain.money import ZERO


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


@dataclass(frozen=True, slots=True)
class Installment:
    account_id: int
    sequence: int
    due_date: date
    amount: Decimal
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_amount: Decimal = ZERO
    purchase_transaction_id: int | None = None
    id: int | None = None

    @property
    def outstanding(self) -> Decimal:
        return max(ZERO, self.amount - self.paid_amount)

    @property
    def is_paid(self) -> bool:
        return self.status is InstallmentStatus.PAID


def mark_overdue(installments: Iterable[Installment], today: date) -> list[Installment]:
    """Return the installments whose status flips PENDING -> OVERDUE as of ``today``."""
    return [
        replace(i, status=InstallmentStatus.OVERDUE)
        for i in installments
        if i.status is InstallmentStatus.PENDING and i.due_date < today
    ]


def allocate_payment(installments: Iterable[Installment], amount: Decimal) -> list[Installment]:
    """
    Spread a payment over unpaid installments, oldest due date first.

    Args:
        installments: Installments of one account (any order, any status)
        amount: Payment amount to allocate

    Returns:
        Only the installments that changed. Installments fully covered become PAID;
        any amount left after the last installment is simply not allocated.
    """
    remaining = amount
    changed: list[Installment] = []
    unpaid = sorted(
        (i for i in installments if not i.is_paid),
        key=lambda i: (i.due_date, i.sequence),
    )
    for installment in unpaid:
        if remaining <= 0:
            break
        applied = min(remaining, installment.outstanding)
        remaining -= applied
        paid_amount = installment.paid_amount + applied
        status = InstallmentStatus.PAID if paid_amount >= installment.amount else installment.status
        changed.append(replace(installment, paid_amount=paid_amount, status=status))
    return changed


def overdue_installment_balance(installments: Iterable[Installment], today: date) -> Decimal:
    return sum(
        (i.outstanding for i in installments if not i.is_paid and i.due_date < today),
        ZERO,
    )


def deallocate_payment(
    installments: Iterable[Installment], amount: Decimal, today: date
) -> list[Installment]:
    """
    Undo ``allocate_payment`` for ``amount``, newest due date first.

    Installments that lose coverage go back to PENDING, or OVERDUE when their
    due date has already passed. Returns only the installments that changed.
    """
    remaining = amount
    changed: list[Installment] = []
    covered = sorted(
        (i for i in installments if i.paid_amount > 0),
        key=lambda i: (i.due_date, i.sequence),
        reverse=True,
    )
    for installment in covered:
        if remaining <= 0:
            break
        removed = min(remaining, installment.paid_amount)
        remaining -= removed
        paid_amount = installment.paid_amount - removed
        status = installment.status
        if paid_amount < installment.amount:
            status = InstallmentStatus.OVERDUE if installment.due_date < today else InstallmentStatus.PENDING
        changed.append(replace(installment, paid_amount=paid_amount, status=status))
    return changed
