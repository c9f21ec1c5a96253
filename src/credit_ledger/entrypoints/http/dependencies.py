"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-unit-of-work, not cached.
Only stateless singletons (clock, payment-code generator) use lru_cache.
"""

from __future__ import annotations

import random
from functools import lru_cache

from fastapi import Depends

from credit_ledger.adapters.random_payment_code_generator import RandomPaymentCodeGenerator
from credit_ledger.adapters.sqlalchemy_unit_of_work import SqlAlchemyUnitOfWork
from credit_ledger.adapters.system_clock import SystemClock
from credit_ledger.infra.config import payment_code_seed
from credit_ledger.infra.db.session import get_session_local
from credit_ledger.ports.clock import Clock
from credit_ledger.ports.payment_code_generator import PaymentCodeGenerator
from credit_ledger.ports.unit_of_work import UnitOfWorkFactory
from credit_ledger.use_cases.accrue_interest import AccrueInterest
from credit_ledger.use_cases.add_late_fee_rule import AddLateFeeRule
from credit_ledger.use_cases.apply_late_fee import ApplyLateFee
from credit_ledger.use_cases.build_account_statement import BuildAccountStatement
from credit_ledger.use_cases.build_account_summary import BuildAccountSummary
from credit_ledger.use_cases.confirm_payment import ConfirmPayment
from credit_ledger.use_cases.get_credit_account import GetCreditAccount
from credit_ledger.use_cases.get_next_due_date import GetNextDueDate
from credit_ledger.use_cases.list_overdue_accounts import ListOverdueAccounts
from credit_ledger.use_cases.open_credit_account import OpenCreditAccount
from credit_ledger.use_cases.post_payment import PostPayment
from credit_ledger.use_cases.post_purchase import PostPurchase
from credit_ledger.use_cases.refresh_installment_statuses import RefreshInstallmentStatuses
from credit_ledger.use_cases.reverse_transaction import ReverseTransaction
from credit_ledger.use_cases.update_credit_account_terms import UpdateCreditAccountTerms


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """
    Provides a factory that opens one SQLAlchemy session per unit of work.

    The session factory itself is shared; sessions are never reused across
    units of work.
    """
    session_factory = get_session_local()
    return lambda: SqlAlchemyUnitOfWork(session_factory)


@lru_cache
def get_clock() -> Clock:
    return SystemClock()


@lru_cache
def get_payment_code_generator() -> PaymentCodeGenerator:
    """Seeded from PAYMENT_CODE_SEED when set, system entropy otherwise."""
    return RandomPaymentCodeGenerator(random.Random(payment_code_seed()))


# ==============================================================================
# Use case factories (per request)
# ==============================================================================


def get_open_credit_account_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> OpenCreditAccount:
    return OpenCreditAccount(unit_of_work=unit_of_work, clock=clock)


def get_update_credit_account_terms_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> UpdateCreditAccountTerms:
    return UpdateCreditAccountTerms(unit_of_work=unit_of_work)


def get_credit_account_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> GetCreditAccount:
    return GetCreditAccount(unit_of_work=unit_of_work)


def get_post_purchase_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> PostPurchase:
    return PostPurchase(unit_of_work=unit_of_work, clock=clock)


def get_post_payment_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
    payment_codes: PaymentCodeGenerator = Depends(get_payment_code_generator),
) -> PostPayment:
    return PostPayment(unit_of_work=unit_of_work, clock=clock, payment_codes=payment_codes)


def get_confirm_payment_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> ConfirmPayment:
    return ConfirmPayment(unit_of_work=unit_of_work, clock=clock)


def get_reverse_transaction_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> ReverseTransaction:
    return ReverseTransaction(unit_of_work=unit_of_work, clock=clock)


def get_accrue_interest_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> AccrueInterest:
    return AccrueInterest(unit_of_work=unit_of_work, clock=clock)


def get_apply_late_fee_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> ApplyLateFee:
    return ApplyLateFee(unit_of_work=unit_of_work, clock=clock)


def get_refresh_installment_statuses_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> RefreshInstallmentStatuses:
    return RefreshInstallmentStatuses(unit_of_work=unit_of_work, clock=clock)


def get_next_due_date_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> GetNextDueDate:
    return GetNextDueDate(unit_of_work=unit_of_work, clock=clock)


def get_account_summary_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> BuildAccountSummary:
    return BuildAccountSummary(unit_of_work=unit_of_work, clock=clock)


def get_account_statement_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> BuildAccountStatement:
    return BuildAccountStatement(unit_of_work=unit_of_work)


def get_add_late_fee_rule_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> AddLateFeeRule:
    return AddLateFeeRule(unit_of_work=unit_of_work)


def get_list_overdue_accounts_use_case(
    unit_of_work: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    clock: Clock = Depends(get_clock),
) -> ListOverdueAccounts:
    return ListOverdueAccounts(unit_of_work=unit_of_work, clock=clock)
