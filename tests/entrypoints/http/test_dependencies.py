"""
Unit tests for FastAPI dependency injection functions.

This test suite verifies the dependency wiring logic:
- get_unit_of_work_factory() opens a fresh SQLAlchemy unit of work per call
- Clock and payment-code generator are process-wide singletons (lru_cache)
- Use case factories wire the unit of work factory, clock and code generator
- Use cases are never cached

Tests use mocks to verify wiring without requiring a real database.
"""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from credit_ledger.adapters.random_payment_code_generator import RandomPaymentCodeGenerator
from credit_ledger.adapters.sqlalchemy_unit_of_work import SqlAlchemyUnitOfWork
from credit_ledger.adapters.system_clock import SystemClock
from credit_ledger.entrypoints.http.dependencies import (
    get_accrue_interest_use_case,
    get_account_statement_use_case,
    get_add_late_fee_rule_use_case,
    get_clock,
    get_confirm_payment_use_case,
    get_list_overdue_accounts_use_case,
    get_open_credit_account_use_case,
    get_payment_code_generator,
    get_post_payment_use_case,
    get_post_purchase_use_case,
    get_unit_of_work_factory,
)
from credit_ledger.use_cases.accrue_interest import AccrueInterest
from credit_ledger.use_cases.add_late_fee_rule import AddLateFeeRule
from credit_ledger.use_cases.build_account_statement import BuildAccountStatement
from credit_ledger.use_cases.confirm_payment import ConfirmPayment
from credit_ledger.use_cases.list_overdue_accounts import ListOverdueAccounts
from credit_ledger.use_cases.open_credit_account import OpenCreditAccount
from credit_ledger.use_cases.post_payment import PostPayment
from credit_ledger.use_cases.post_purchase import PostPurchase


@pytest.fixture(autouse=True)
def clear_singletons() -> None:
    get_clock.cache_clear()
    get_payment_code_generator.cache_clear()


# ==============================================================================
# get_unit_of_work_factory() - Unit of Work Provider
# ==============================================================================


def test_unit_of_work_factory_uses_shared_session_factory() -> None:
    """Each call to the returned factory builds a new unit of work over the same sessionmaker."""
    session_factory = Mock()

    with patch(
        "credit_ledger.entrypoints.http.dependencies.get_session_local",
        return_value=session_factory,
    ):
        factory = get_unit_of_work_factory()

    first, second = factory(), factory()

    assert isinstance(first, SqlAlchemyUnitOfWork)
    assert first is not second
    assert first._session_factory is session_factory
    assert second._session_factory is session_factory


def test_unit_of_work_factory_opens_session_on_enter() -> None:
    session = Mock()
    session_factory = Mock(return_value=session)

    with patch(
        "credit_ledger.entrypoints.http.dependencies.get_session_local",
        return_value=session_factory,
    ):
        factory = get_unit_of_work_factory()

    with factory() as uow:
        uow.commit()

    session_factory.assert_called_once_with()
    session.commit.assert_called_once()
    session.rollback.assert_called_once()
    session.close.assert_called_once()


def test_unit_of_work_factory_is_not_cached() -> None:
    assert not hasattr(get_unit_of_work_factory, "cache_info")


# ==============================================================================
# Singletons
# ==============================================================================


def test_clock_is_a_cached_system_clock() -> None:
    clock = get_clock()

    assert isinstance(clock, SystemClock)
    assert get_clock() is clock


def test_payment_code_generator_is_cached() -> None:
    generator = get_payment_code_generator()

    assert isinstance(generator, RandomPaymentCodeGenerator)
    assert get_payment_code_generator() is generator


def test_payment_code_generator_honours_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAYMENT_CODE_SEED", "42")
    first = [get_payment_code_generator().generate() for _ in range(3)]

    get_payment_code_generator.cache_clear()
    second = [get_payment_code_generator().generate() for _ in range(3)]

    assert first == second


def test_payment_code_generator_rejects_bad_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAYMENT_CODE_SEED", "not-a-number")

    with pytest.raises(RuntimeError):
        get_payment_code_generator()


# ==============================================================================
# Use case factories
# ==============================================================================


def test_post_payment_use_case_wiring() -> None:
    """Factory wires unit of work factory, clock and code generator into the use case."""
    unit_of_work = Mock()
    clock = Mock()
    payment_codes = Mock()

    use_case = get_post_payment_use_case(
        unit_of_work=unit_of_work, clock=clock, payment_codes=payment_codes
    )

    assert isinstance(use_case, PostPayment)
    assert use_case._unit_of_work is unit_of_work
    assert use_case._clock is clock
    assert use_case._payment_codes is payment_codes


@pytest.mark.parametrize(
    ("factory", "use_case_type"),
    [
        (get_open_credit_account_use_case, OpenCreditAccount),
        (get_post_purchase_use_case, PostPurchase),
        (get_confirm_payment_use_case, ConfirmPayment),
        (get_accrue_interest_use_case, AccrueInterest),
        (get_list_overdue_accounts_use_case, ListOverdueAccounts),
    ],
)
def test_clocked_use_case_factories(factory, use_case_type) -> None:
    unit_of_work = Mock()
    clock = Mock()

    use_case = factory(unit_of_work=unit_of_work, clock=clock)

    assert isinstance(use_case, use_case_type)
    assert use_case._unit_of_work is unit_of_work
    assert use_case._clock is clock


@pytest.mark.parametrize(
    ("factory", "use_case_type"),
    [
        (get_account_statement_use_case, BuildAccountStatement),
        (get_add_late_fee_rule_use_case, AddLateFeeRule),
    ],
)
def test_unclocked_use_case_factories(factory, use_case_type) -> None:
    unit_of_work = Mock()

    use_case = factory(unit_of_work=unit_of_work)

    assert isinstance(use_case, use_case_type)
    assert use_case._unit_of_work is unit_of_work


def test_use_case_factories_create_fresh_instances() -> None:
    unit_of_work = Mock()
    clock = Mock()

    first = get_post_purchase_use_case(unit_of_work=unit_of_work, clock=clock)
    second = get_post_purchase_use_case(unit_of_work=unit_of_work, clock=clock)

    assert first is not second
    assert not hasattr(get_post_purchase_use_case, "cache_info")
