from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from credit_ledger.domain.transaction import Transaction


class TransactionRepository(ABC):
    """
    Port for ledger entries.

    Listing methods return entries ordered by ``occurred_at`` then id.
    """

    @abstractmethod
    def add(self, transaction: Transaction) -> Transaction:
        """Persist a new entry and return it with its id assigned."""
        ...

    @abstractmethod
    def get_by_id(self, transaction_id: int) -> Transaction | None: ...

    @abstractmethod
    def save(self, transaction: Transaction) -> None:
        """Persist a confirmation status transition of an existing entry."""
        ...

    @abstractmethod
    def delete(self, transaction_id: int) -> None: ...

    @abstractmethod
    def list_by_account(
        self,
        account_id: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        """
        Entries of an account with ``start <= occurred_at <= end``.

        ``None`` bounds are open-ended.
        """
        ...

    @abstractmethod
    def list_before(self, account_id: int, before: datetime) -> list[Transaction]:
        """Entries of an account with ``occurred_at < before``."""
        ...
