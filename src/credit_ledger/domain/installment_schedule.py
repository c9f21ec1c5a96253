from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.dates import add_months
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.interest import periodic_monthly_rate
from credit_ledger.domain.money import to_cents

INSTALLMENT_HORIZON_MONTHS = 12


@dataclass(frozen=True, slots=True)
class InstallmentSchedule:
    principal: Decimal
    periodic_rate: Decimal
    installment_amount: Decimal
    total_paid: Decimal
    total_interest: Decimal
    installments: list[Installment]


def number_of_installments(grace_period_months: int) -> int:
    return max(1, INSTALLMENT_HORIZON_MONTHS - grace_period_months)


def first_due_date(today: date, grace_period_months: int, due_day: int) -> date:
    """
    Grace-shifted date snapped to the account due day.

    A snapped date that is not after ``today`` rolls to the following month.
    """
    candidate = add_months(today, grace_period_months, day=due_day)
    if candidate <= today:
        candidate = add_months(candidate, 1, day=due_day)
    return candidate


def annuity_payment(principal: Decimal, periodic_rate: Decimal, periods: int) -> Decimal:
    # payment = P * (i*(1+i)^n) / ((1+i)^n - 1)
    if periodic_rate == 0:
        return principal / Decimal(periods)
    one = Decimal("1")
    factor = (one + periodic_rate) ** periods
    return principal * (periodic_rate * factor) / (factor - one)


def build_schedule(
    account: CreditAccount,
    principal: Decimal,
    today: date,
    purchase_transaction_id: int | None = None,
) -> InstallmentSchedule:
    """
    Amortize a long-term purchase into equal monthly installments.

    Rounding policy:
    - The periodic payment is computed at full precision and rounded to cents
      (ROUND_HALF_UP)
    - Every installment carries the rounded payment
    - total_paid = installment_amount * n, total_interest = total_paid - principal

    Args:
        account: Account providing rate, interest type, grace period and due day
        principal: Purchase amount to amortize (> 0)
        today: Purchase date
        purchase_transaction_id: Ledger entry the schedule belongs to

    Returns:
        InstallmentSchedule with PENDING installments ordered by due date
    """
    if account.id is None:
        raise ValueError("account must be persisted before scheduling installments")

    periods = number_of_installments(account.grace_period_months)
    periodic_rate = periodic_monthly_rate(account.annual_interest_rate, account.interest_type)
    installment_amount = to_cents(annuity_payment(principal, periodic_rate, periods))

    if installment_amount <= 0:
        raise ValueError("Computed installment amount is invalid")

    anchor = first_due_date(today, account.grace_period_months, account.monthly_due_day)
    installments = [
        Installment(
            account_id=account.id,
            sequence=k + 1,
            due_date=add_months(anchor, k, day=account.monthly_due_day),
            amount=installment_amount,
            purchase_transaction_id=purchase_transaction_id,
        )
        for k in range(periods)
    ]

    total_paid = installment_amount * periods
    return InstallmentSchedule(
        principal=principal,
        periodic_rate=periodic_rate,
        installment_amount=installment_amount,
        total_paid=total_paid,
        total_interest=total_paid - principal,
        installments=installments,
    )
