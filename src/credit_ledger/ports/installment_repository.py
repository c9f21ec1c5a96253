from __future__ import annotations

from abc import ABC, abstractmethod

from credit_ledger.domain.installment import Installment


class InstallmentRepository(ABC):
    """Port for installment schedules. Listings are ordered by due date then sequence."""

    @abstractmethod
    def add_many(self, installments: list[Installment]) -> list[Installment]: ...

    @abstractmethod
    def list_by_account(self, account_id: int) -> list[Installment]: ...

    @abstractmethod
    def list_by_purchase(self, purchase_transaction_id: int) -> list[Installment]: ...

    @abstractmethod
    def save_many(self, installments: list[Installment]) -> None: ...

    @abstractmethod
    def delete_many(self, installment_ids: list[int]) -> None: ...
