"""Tests for the in-memory unit of work and repositories."""

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

import pytest

from credit_ledger.adapters.in_memory_ledger_store import InMemoryLedgerStore
from credit_ledger.adapters.in_memory_unit_of_work import InMemoryUnitOfWork
from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.late_fee import FeeType, LateFeeRule
from credit_ledger.domain.transaction import Transaction, TransactionType

T0 = datetime(2026, 1, 10, 12, tzinfo=timezone.utc)


def _purchase(account_id: int, amount: str, at: datetime) -> Transaction:
    return Transaction(
        account_id=account_id,
        transaction_type=TransactionType.PURCHASE,
        amount=Decimal(amount),
        description="Purchase",
        occurred_at=at,
    )


@pytest.fixture()
def stored_account(
    store: InMemoryLedgerStore, make_account: Callable[..., CreditAccount]
) -> CreditAccount:
    with InMemoryUnitOfWork(store) as uow:
        account = uow.accounts.add(make_account(id=None))
        uow.commit()
    return account


# ==============================================================================
# Staging
# ==============================================================================


class TestStaging:
    def test_commit_publishes_writes(
        self, store: InMemoryLedgerStore, make_account: Callable[..., CreditAccount]
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            account = uow.accounts.add(make_account(id=None))
            assert store.accounts == {}
            uow.commit()

        assert store.accounts == {account.id: account}

    def test_exit_without_commit_discards(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            uow.transactions.add(_purchase(stored_account.id, "10.00", T0))

        assert store.transactions == {}

    def test_exception_discards(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with pytest.raises(RuntimeError):
            with InMemoryUnitOfWork(store) as uow:
                uow.transactions.add(_purchase(stored_account.id, "10.00", T0))
                raise RuntimeError("boom")

        assert store.transactions == {}

    def test_reads_see_own_writes(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            added = uow.transactions.add(_purchase(stored_account.id, "10.00", T0))

            assert uow.transactions.get_by_id(added.id) == added
            assert uow.transactions.list_by_account(stored_account.id) == [added]

    def test_staged_delete_hides_row(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            added = uow.transactions.add(_purchase(stored_account.id, "10.00", T0))
            uow.commit()

        with InMemoryUnitOfWork(store) as uow:
            uow.transactions.delete(added.id)
            assert uow.transactions.get_by_id(added.id) is None
            assert added.id in store.transactions
            uow.commit()

        assert store.transactions == {}

    def test_ids_never_reused(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            discarded = uow.transactions.add(_purchase(stored_account.id, "10.00", T0))

        with InMemoryUnitOfWork(store) as uow:
            kept = uow.transactions.add(_purchase(stored_account.id, "10.00", T0))

        assert kept.id > discarded.id


# ==============================================================================
# Repositories
# ==============================================================================


class TestRepositories:
    def test_save_without_id_rejected(
        self, store: InMemoryLedgerStore, make_account: Callable[..., CreditAccount]
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            with pytest.raises(ValueError):
                uow.accounts.save(make_account(id=None))

    def test_lookup_by_client_and_establishment(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            found = uow.accounts.get_by_client_and_establishment(
                stored_account.client_id, stored_account.establishment_id
            )
            missing = uow.accounts.get_by_client_and_establishment(stored_account.client_id, 99)

        assert found == stored_account
        assert missing is None

    def test_transactions_listed_in_time_order_with_bounds(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            late = uow.transactions.add(_purchase(stored_account.id, "3.00", T0 + timedelta(days=2)))
            early = uow.transactions.add(_purchase(stored_account.id, "1.00", T0))
            middle = uow.transactions.add(_purchase(stored_account.id, "2.00", T0 + timedelta(days=1)))

            assert uow.transactions.list_by_account(stored_account.id) == [early, middle, late]
            assert uow.transactions.list_by_account(
                stored_account.id, start=T0 + timedelta(days=1), end=T0 + timedelta(days=1)
            ) == [middle]
            assert uow.transactions.list_before(stored_account.id, T0 + timedelta(days=1)) == [early]

    def test_installments_by_account_and_purchase(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        schedule = [
            Installment(stored_account.id, 2, date(2026, 2, 15), Decimal("10"), purchase_transaction_id=7),
            Installment(stored_account.id, 1, date(2026, 1, 15), Decimal("10"), purchase_transaction_id=7),
            Installment(stored_account.id, 1, date(2026, 1, 15), Decimal("5"), purchase_transaction_id=8),
        ]
        with InMemoryUnitOfWork(store) as uow:
            added = uow.installments.add_many(schedule)
            uow.commit()

        with InMemoryUnitOfWork(store) as uow:
            by_purchase = uow.installments.list_by_purchase(7)
            uow.installments.delete_many([i.id for i in by_purchase])
            remaining = uow.installments.list_by_account(stored_account.id)

        assert [i.sequence for i in by_purchase] == [1, 2]
        assert remaining == [added[2]]

    def test_late_fee_rules_ordered_by_minimum(self, store: InMemoryLedgerStore) -> None:
        with InMemoryUnitOfWork(store) as uow:
            uow.late_fee_rules.add(LateFeeRule(1, 30, FeeType.FIXED, Decimal("9")))
            uow.late_fee_rules.add(LateFeeRule(1, 1, FeeType.FIXED, Decimal("3")))
            uow.late_fee_rules.add(LateFeeRule(2, 1, FeeType.FIXED, Decimal("5")))
            rules = uow.late_fee_rules.list_by_establishment(1)

        assert [r.min_days_overdue for r in rules] == [1, 30]


# ==============================================================================
# Locks
# ==============================================================================


class TestAccountLock:
    def test_second_unit_waits_for_first(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        order: list[str] = []
        first_has_lock = threading.Event()

        def second() -> None:
            first_has_lock.wait()
            with InMemoryUnitOfWork(store) as uow:
                uow.accounts.get_for_update(stored_account.id)
                order.append("second")

        thread = threading.Thread(target=second)
        thread.start()
        with InMemoryUnitOfWork(store) as uow:
            uow.accounts.get_for_update(stored_account.id)
            first_has_lock.set()
            thread.join(timeout=0.2)
            order.append("first")
        thread.join()

        assert order == ["first", "second"]

    def test_lock_is_reentrant_within_a_unit(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with InMemoryUnitOfWork(store) as uow:
            uow.accounts.get_for_update(stored_account.id)
            assert uow.accounts.get_for_update(stored_account.id) == stored_account

    def test_lock_released_after_exception(
        self, store: InMemoryLedgerStore, stored_account: CreditAccount
    ) -> None:
        with pytest.raises(RuntimeError):
            with InMemoryUnitOfWork(store) as uow:
                uow.accounts.get_for_update(stored_account.id)
                raise RuntimeError("boom")

        assert store.account_lock(stored_account.id).acquire(blocking=False)
