#!/usr/bin/env python3
"""
Seed the ledger tables with deterministic random accounts.

Features:
- Deterministic: fixed seed → same dataset every run (explicit Random instance)
- Idempotent: safe to run multiple times (clears before seeding)
- Goes through the use cases, so balances always reconcile with the ledger

Usage:
    python scripts/seed_accounts.py
"""

from __future__ import annotations

import random
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import delete

from credit_ledger.adapters.random_payment_code_generator import RandomPaymentCodeGenerator
from credit_ledger.adapters.sqlalchemy_unit_of_work import SqlAlchemyUnitOfWork
from credit_ledger.adapters.system_clock import SystemClock
from credit_ledger.domain.credit_account import CreditAccount, CreditType, InterestType
from credit_ledger.domain.errors import DomainError
from credit_ledger.domain.late_fee import FeeType
from credit_ledger.domain.transaction import PaymentMethod
from credit_ledger.infra.db.models import (
    CreditAccountRow,
    InstallmentRow,
    LateFeeRuleRow,
    TransactionRow,
)
from credit_ledger.infra.db.session import get_session_local
from credit_ledger.use_cases.add_late_fee_rule import AddLateFeeRule, AddLateFeeRuleRequest
from credit_ledger.use_cases.open_credit_account import OpenCreditAccount, OpenCreditAccountRequest
from credit_ledger.use_cases.post_payment import PostPayment, PostPaymentRequest
from credit_ledger.use_cases.post_purchase import PostPurchase, PostPurchaseRequest


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_CLIENTS = 20
ESTABLISHMENTS = [1, 2, 3]
CREDIT_LIMITS = [Decimal("500.00"), Decimal("1000.00"), Decimal("2500.00"), Decimal("5000.00")]
ANNUAL_RATES = [Decimal("18"), Decimal("24"), Decimal("36"), Decimal("45")]

# Establishment 1 uses tiered late fees; the others fall back to the flat percentage
LATE_FEE_TIERS = [
    (1, 15, FeeType.FIXED, Decimal("10.00")),
    (15, 30, FeeType.PERCENTAGE, Decimal("3")),
    (30, None, FeeType.PERCENTAGE, Decimal("5")),
]


def clear_ledger() -> None:
    with get_session_local().begin() as session:
        for row in (InstallmentRow, TransactionRow, LateFeeRuleRow, CreditAccountRow):
            deleted = session.execute(delete(row)).rowcount
            print(f"   Deleted {deleted} rows from {row.__tablename__}")


def seed_accounts(num_clients: int = NUM_CLIENTS, seed: int = RANDOM_SEED) -> list[CreditAccount]:
    """
    Seed the database with random accounts, purchases and payments.

    Args:
        num_clients: Number of clients to generate accounts for
        seed: Random seed for deterministic results
    """
    rng = random.Random(seed)
    session_factory = get_session_local()
    unit_of_work = lambda: SqlAlchemyUnitOfWork(session_factory)  # noqa: E731
    clock = SystemClock()

    open_account = OpenCreditAccount(unit_of_work, clock)
    post_purchase = PostPurchase(unit_of_work, clock)
    post_payment = PostPayment(unit_of_work, clock, RandomPaymentCodeGenerator(rng))
    add_rule = AddLateFeeRule(unit_of_work)

    print(f"🌱 Seeding ledger with {num_clients} clients (seed={seed})...")

    print("🗑️  Clearing existing ledger...")
    clear_ledger()

    for min_days, max_days, fee_type, value in LATE_FEE_TIERS:
        add_rule.execute(
            AddLateFeeRuleRequest(
                establishment_id=ESTABLISHMENTS[0],
                min_days_overdue=min_days,
                max_days_overdue=max_days,
                fee_type=fee_type,
                value=value,
            )
        )

    accounts: list[CreditAccount] = []
    for client_id in range(1, num_clients + 1):
        for establishment_id in rng.sample(ESTABLISHMENTS, k=rng.randint(1, len(ESTABLISHMENTS))):
            account = open_account.execute(
                OpenCreditAccountRequest(
                    client_id=client_id,
                    establishment_id=establishment_id,
                    credit_limit=rng.choice(CREDIT_LIMITS),
                    monthly_due_day=rng.randint(1, 28),
                    annual_interest_rate=rng.choice(ANNUAL_RATES),
                    interest_type=rng.choice(list(InterestType)),
                    credit_type=rng.choice(list(CreditType)),
                    grace_period_months=rng.choice([0, 0, 1, 2]),
                    late_fee_percentage=Decimal("4"),
                )
            )

            for _ in range(rng.randint(0, 4)):
                amount = Decimal(rng.randint(1000, 30000)) / 100
                try:
                    account = post_purchase.execute(
                        PostPurchaseRequest(account_id=account.id, amount=amount)  # type: ignore[arg-type]
                    ).account
                except DomainError as e:
                    print(f"   Skipped purchase on account {account.id}: {e.message}")

            if account.current_balance > 0 and rng.random() < 0.6:
                amount = (account.current_balance * Decimal(rng.randint(10, 90)) / 100).quantize(
                    Decimal("0.01")
                )
                if amount > 0:
                    account = post_payment.execute(
                        PostPaymentRequest(
                            account_id=account.id,  # type: ignore[arg-type]
                            amount=amount,
                            payment_method=rng.choice(list(PaymentMethod)),
                        )
                    ).account

            accounts.append(account)

    print(f"✅ Successfully seeded {len(accounts)} accounts!")

    print("\n📊 Sample accounts:")
    for i, account in enumerate(accounts[:5], 1):
        print(
            f"   {i}. client {account.client_id} @ establishment {account.establishment_id} - "
            f"{account.credit_type.value}, balance {account.current_balance:,.2f} / "
            f"{account.credit_limit:,.2f}"
        )

    if len(accounts) > 5:
        print(f"   ... and {len(accounts) - 5} more")

    return accounts


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_accounts()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
