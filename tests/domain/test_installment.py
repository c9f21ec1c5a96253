"""Tests for installment status and payment allocation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from credit_ledger.domain.installment import (
    Installment,
    InstallmentStatus,
    allocate_payment,
    deallocate_payment,
    mark_overdue,
    overdue_installment_balance,
)


def _schedule() -> list[Installment]:
    return [
        Installment(account_id=1, sequence=2, due_date=date(2026, 2, 15), amount=Decimal("106.62"), id=12),
        Installment(account_id=1, sequence=1, due_date=date(2026, 1, 15), amount=Decimal("106.62"), id=11),
        Installment(account_id=1, sequence=3, due_date=date(2026, 3, 15), amount=Decimal("106.62"), id=13),
    ]


class TestAllocatePayment:
    def test_oldest_due_first(self) -> None:
        changed = allocate_payment(_schedule(), Decimal("150.00"))

        assert [i.id for i in changed] == [11, 12]
        assert changed[0].status is InstallmentStatus.PAID
        assert changed[0].paid_amount == Decimal("106.62")
        assert changed[1].status is InstallmentStatus.PENDING
        assert changed[1].paid_amount == Decimal("43.38")

    def test_exact_amount_pays_one(self) -> None:
        changed = allocate_payment(_schedule(), Decimal("106.62"))

        assert len(changed) == 1
        assert changed[0].is_paid

    def test_skips_paid_installments(self) -> None:
        schedule = allocate_payment(_schedule(), Decimal("106.62")) + _schedule()[::2]

        changed = allocate_payment(schedule, Decimal("10.00"))

        assert [i.id for i in changed] == [12]

    def test_overdue_installment_becomes_paid(self) -> None:
        overdue = [
            Installment(
                account_id=1,
                sequence=1,
                due_date=date(2026, 1, 15),
                amount=Decimal("50.00"),
                status=InstallmentStatus.OVERDUE,
            )
        ]

        changed = allocate_payment(overdue, Decimal("50.00"))

        assert changed[0].status is InstallmentStatus.PAID

    def test_excess_is_not_allocated(self) -> None:
        changed = allocate_payment(_schedule(), Decimal("1000.00"))

        assert all(i.is_paid for i in changed)
        assert sum(i.paid_amount for i in changed) == Decimal("319.86")


class TestDeallocatePayment:
    def test_newest_due_first(self) -> None:
        allocated = allocate_payment(_schedule(), Decimal("150.00"))
        schedule = allocated + [_schedule()[2]]

        changed = deallocate_payment(schedule, Decimal("50.00"), date(2026, 1, 10))

        assert [i.id for i in changed] == [12, 11]
        assert changed[0].paid_amount == Decimal("0.00")
        assert changed[1].paid_amount == Decimal("100.00")
        assert changed[1].status is InstallmentStatus.PENDING

    def test_past_due_installment_goes_back_to_overdue(self) -> None:
        allocated = allocate_payment(_schedule(), Decimal("106.62"))

        changed = deallocate_payment(allocated, Decimal("106.62"), date(2026, 1, 20))

        assert changed[0].status is InstallmentStatus.OVERDUE
        assert changed[0].paid_amount == Decimal("0.00")


def test_mark_overdue_only_flips_past_due_pending() -> None:
    schedule = _schedule()

    flipped = mark_overdue(schedule, date(2026, 2, 15))

    assert [i.id for i in flipped] == [11]
    assert flipped[0].status is InstallmentStatus.OVERDUE


def test_mark_overdue_due_today_is_not_overdue() -> None:
    assert mark_overdue(_schedule(), date(2026, 1, 15)) == []


def test_overdue_installment_balance_counts_outstanding() -> None:
    schedule = allocate_payment(_schedule(), Decimal("50.00")) + _schedule()[::2]

    assert overdue_installment_balance(schedule, date(2026, 2, 20)) == Decimal("163.24")
