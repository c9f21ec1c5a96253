from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Generic, Iterable, TypeVar

from credit_ledger.adapters.in_memory_ledger_store import InMemoryLedgerStore
from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.late_fee import LateFeeRule
from credit_ledger.domain.transaction import Transaction
from credit_ledger.ports.credit_account_repository import CreditAccountRepository
from credit_ledger.ports.installment_repository import InstallmentRepository
from credit_ledger.ports.late_fee_rule_repository import LateFeeRuleRepository
from credit_ledger.ports.transaction_repository import TransactionRepository

E = TypeVar("E")


class StagedTable(Generic[E]):
    """
    Uncommitted view over one committed table.

    Writes are buffered until ``flush``; ``None`` in the buffer marks a delete.
    """

    def __init__(self, committed: dict[int, E], commit_lock: threading.Lock) -> None:
        self._committed = committed
        self._commit_lock = commit_lock
        self._staged: dict[int, E | None] = {}

    def get(self, entity_id: int) -> E | None:
        if entity_id in self._staged:
            return self._staged[entity_id]
        with self._commit_lock:
            return self._committed.get(entity_id)

    def rows(self) -> list[E]:
        with self._commit_lock:
            merged: dict[int, E | None] = dict(self._committed)
        merged.update(self._staged)
        return [row for row in merged.values() if row is not None]

    def put(self, entity_id: int, entity: E) -> None:
        self._staged[entity_id] = entity

    def delete(self, entity_id: int) -> None:
        self._staged[entity_id] = None

    def flush(self) -> None:
        """Apply staged writes. Caller holds the store commit lock."""
        for entity_id, entity in self._staged.items():
            if entity is None:
                self._committed.pop(entity_id, None)
            else:
                self._committed[entity_id] = entity
        self._staged.clear()

    def discard(self) -> None:
        self._staged.clear()


class InMemoryCreditAccountRepository(CreditAccountRepository):
    """
    Canonical contract implementation for tests.

    ``get_for_update`` blocks until the account lock is free; the lock is
    released by the owning unit of work.
    """

    def __init__(
        self,
        store: InMemoryLedgerStore,
        table: StagedTable[CreditAccount],
        on_lock: Callable[[threading.Lock], None],
    ) -> None:
        self._store = store
        self._table = table
        self._on_lock = on_lock

    def get_by_id(self, account_id: int) -> CreditAccount | None:
        return self._table.get(account_id)

    def get_for_update(self, account_id: int) -> CreditAccount | None:
        self._on_lock(self._store.account_lock(account_id))
        return self._table.get(account_id)

    def get_by_client_and_establishment(
        self, client_id: int, establishment_id: int
    ) -> CreditAccount | None:
        for account in self._table.rows():
            if account.client_id == client_id and account.establishment_id == establishment_id:
                return account
        return None

    def list_by_client(self, client_id: int) -> list[CreditAccount]:
        return sorted(
            (a for a in self._table.rows() if a.client_id == client_id),
            key=lambda a: a.id or 0,
        )

    def list_by_establishment(self, establishment_id: int) -> list[CreditAccount]:
        return sorted(
            (a for a in self._table.rows() if a.establishment_id == establishment_id),
            key=lambda a: a.id or 0,
        )

    def add(self, account: CreditAccount) -> CreditAccount:
        stored = replace(account, id=self._store.next_id())
        self._table.put(stored.id, stored)  # type: ignore[arg-type]
        return stored

    def save(self, account: CreditAccount) -> None:
        if account.id is None:
            raise ValueError("Cannot save an account without id")
        self._table.put(account.id, account)


class InMemoryTransactionRepository(TransactionRepository):
    def __init__(self, store: InMemoryLedgerStore, table: StagedTable[Transaction]) -> None:
        self._store = store
        self._table = table

    def add(self, transaction: Transaction) -> Transaction:
        stored = replace(transaction, id=self._store.next_id())
        self._table.put(stored.id, stored)  # type: ignore[arg-type]
        return stored

    def get_by_id(self, transaction_id: int) -> Transaction | None:
        return self._table.get(transaction_id)

    def save(self, transaction: Transaction) -> None:
        if transaction.id is None:
            raise ValueError("Cannot save a transaction without id")
        self._table.put(transaction.id, transaction)

    def delete(self, transaction_id: int) -> None:
        self._table.delete(transaction_id)

    def list_by_account(
        self,
        account_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        return self._ordered(
            t
            for t in self._table.rows()
            if t.account_id == account_id
            and (start is None or t.occurred_at >= start)
            and (end is None or t.occurred_at <= end)
        )

    def list_before(self, account_id: int, before: datetime) -> list[Transaction]:
        return self._ordered(
            t for t in self._table.rows() if t.account_id == account_id and t.occurred_at < before
        )

    @staticmethod
    def _ordered(transactions: Iterable[Transaction]) -> list[Transaction]:
        return sorted(transactions, key=lambda t: (t.occurred_at, t.id or 0))


class InMemoryInstallmentRepository(InstallmentRepository):
    def __init__(self, store: InMemoryLedgerStore, table: StagedTable[Installment]) -> None:
        self._store = store
        self._table = table

    def add_many(self, installments: list[Installment]) -> list[Installment]:
        stored = [replace(i, id=self._store.next_id()) for i in installments]
        for installment in stored:
            self._table.put(installment.id, installment)  # type: ignore[arg-type]
        return stored

    def list_by_account(self, account_id: int) -> list[Installment]:
        return sorted(
            (i for i in self._table.rows() if i.account_id == account_id),
            key=lambda i: (i.due_date, i.sequence, i.id or 0),
        )

    def list_by_purchase(self, purchase_transaction_id: int) -> list[Installment]:
        return sorted(
            (i for i in self._table.rows() if i.purchase_transaction_id == purchase_transaction_id),
            key=lambda i: (i.due_date, i.sequence),
        )

    def save_many(self, installments: list[Installment]) -> None:
        for installment in installments:
            if installment.id is None:
                raise ValueError("Cannot save an installment without id")
            self._table.put(installment.id, installment)

    def delete_many(self, installment_ids: list[int]) -> None:
        for installment_id in installment_ids:
            self._table.delete(installment_id)


class InMemoryLateFeeRuleRepository(LateFeeRuleRepository):
    def __init__(self, store: InMemoryLedgerStore, table: StagedTable[LateFeeRule]) -> None:
        self._store = store
        self._table = table

    def list_by_establishment(self, establishment_id: int) -> list[LateFeeRule]:
        return sorted(
            (r for r in self._table.rows() if r.establishment_id == establishment_id),
            key=lambda r: (r.min_days_overdue, r.id or 0),
        )

    def add(self, rule: LateFeeRule) -> LateFeeRule:
        stored = replace(rule, id=self._store.next_id())
        self._table.put(stored.id, stored)  # type: ignore[arg-type]
        return stored
