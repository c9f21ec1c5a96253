from __future__ import annotations

import itertools
import threading

from credit_ledger.domain.credit_account import CreditAccount
from credit_ledger.domain.installment import Installment
from credit_ledger.domain.late_fee import LateFeeRule
from credit_ledger.domain.transaction import Transaction


class InMemoryLedgerStore:
    """
    Committed state shared by in-memory units of work.

    - One table per entity, keyed by id
    - Ids come from a single monotonic sequence (never reused, even after rollback)
    - ``account_lock`` hands out one lock per account id
    """

    def __init__(self) -> None:
        self.accounts: dict[int, CreditAccount] = {}
        self.transactions: dict[int, Transaction] = {}
        self.installments: dict[int, Installment] = {}
        self.late_fee_rules: dict[int, LateFeeRule] = {}

        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()
        self._account_locks: dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self.commit_lock = threading.Lock()

    def next_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def account_lock(self, account_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._account_locks.get(account_id)
            if lock is None:
                lock = self._account_locks[account_id] = threading.Lock()
            return lock
