from __future__ import annotations

import threading
from types import TracebackType

from credit_ledger.adapters.in_memory_ledger_store import InMemoryLedgerStore
from credit_ledger.adapters.in_memory_repositories import (
    InMemoryCreditAccountRepository,
    InMemoryInstallmentRepository,
    InMemoryLateFeeRuleRepository,
    InMemoryTransactionRepository,
    StagedTable,
)
from credit_ledger.ports.unit_of_work import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of work over an ``InMemoryLedgerStore``.

    - Writes are staged per table and published together on ``commit``
    - Account locks taken through ``accounts.get_for_update`` are held until
      the ``with`` block exits
    """

    def __init__(self, store: InMemoryLedgerStore) -> None:
        self._store = store
        self._held_locks: list[threading.Lock] = []
        self._tables: list[StagedTable] = []  # type: ignore[type-arg]

    def __enter__(self) -> InMemoryUnitOfWork:
        self._tables = []
        account_table = self._staged(self._store.accounts)
        transaction_table = self._staged(self._store.transactions)
        installment_table = self._staged(self._store.installments)
        rule_table = self._staged(self._store.late_fee_rules)

        self.accounts = InMemoryCreditAccountRepository(
            self._store, account_table, on_lock=self._acquire
        )
        self.transactions = InMemoryTransactionRepository(self._store, transaction_table)
        self.installments = InMemoryInstallmentRepository(self._store, installment_table)
        self.late_fee_rules = InMemoryLateFeeRuleRepository(self._store, rule_table)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.rollback()
        finally:
            self._release_all()

    def commit(self) -> None:
        with self._store.commit_lock:
            for table in self._tables:
                table.flush()

    def rollback(self) -> None:
        for table in self._tables:
            table.discard()

    def _staged(self, committed: dict) -> StagedTable:  # type: ignore[type-arg]
        table: StagedTable = StagedTable(committed, self._store.commit_lock)  # type: ignore[type-arg]
        self._tables.append(table)
        return table

    def _acquire(self, lock: threading.Lock) -> None:
        if lock in self._held_locks:
            return
        lock.acquire()
        self._held_locks.append(lock)

    def _release_all(self) -> None:
        while self._held_locks:
            self._held_locks.pop().release()
