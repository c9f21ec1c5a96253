"""Shared fixtures: in-memory ledger, frozen clock and account factory."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable

import pytest

from credit_ledger.adapters.in_memory_ledger_store import InMemoryLedgerStore
from credit_ledger.adapters.in_memory_unit_of_work import InMemoryUnitOfWork
from credit_ledger.adapters.random_payment_code_generator import RandomPaymentCodeGenerator
from credit_ledger.adapters.system_clock import FixedClock
from credit_ledger.domain.credit_account import CreditAccount, CreditType, InterestType
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.open_credit_account import (
    OpenCreditAccount,
    OpenCreditAccountRequest,
)

# Saturday 2026-01-10, before the default due day (15th)
START = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def unit_of_work(store: InMemoryLedgerStore) -> UnitOfWorkFactory:
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def payment_codes() -> RandomPaymentCodeGenerator:
    return RandomPaymentCodeGenerator(random.Random(1234))


@pytest.fixture
def open_account(
    unit_of_work: UnitOfWorkFactory, clock: FixedClock
) -> Callable[..., CreditAccount]:
    """
    Open an account through the use case.

    Defaults: SHORT_TERM, NOMINAL 36.5% a year, limit 1000.00, due day 15.
    """
    counter = iter(range(1, 10_000))

    def _open(**overrides: Any) -> CreditAccount:
        fields: dict[str, Any] = {
            "client_id": next(counter),
            "establishment_id": 1,
            "credit_limit": Decimal("1000.00"),
            "monthly_due_day": 15,
            "annual_interest_rate": Decimal("36.5"),
            "interest_type": InterestType.NOMINAL,
            "credit_type": CreditType.SHORT_TERM,
        }
        fields.update(overrides)
        return OpenCreditAccount(unit_of_work, clock).execute(OpenCreditAccountRequest(**fields))

    return _open


@pytest.fixture
def make_account() -> Callable[..., CreditAccount]:
    """Build a persisted-looking CreditAccount without going through a unit of work."""

    def _make(**overrides: Any) -> CreditAccount:
        fields: dict[str, Any] = {
            "id": 1,
            "client_id": 100,
            "establishment_id": 1,
            "credit_limit": Decimal("1000.00"),
            "monthly_due_day": 15,
            "annual_interest_rate": Decimal("36.5"),
            "interest_type": InterestType.NOMINAL,
            "credit_type": CreditType.SHORT_TERM,
            "last_interest_accrual_at": START,
        }
        fields.update(overrides)
        return CreditAccount(**fields)

    return _make
