from __future__ import annotations

from abc import ABC, abstractmethod

from credit_ledger.domain.credit_account import CreditAccount


class CreditAccountRepository(ABC):
    """
    Port for credit account persistence.

    Contract (Preconditions):
        - Accounts passed to ``add``/``save`` are validated by the caller (UseCase)
        - Writes become visible to other units of work only after commit
    """

    @abstractmethod
    def get_by_id(self, account_id: int) -> CreditAccount | None: ...

    @abstractmethod
    def get_for_update(self, account_id: int) -> CreditAccount | None:
        """
        Load an account and hold its lock until the current unit of work ends.

        Balance checks of mutating operations must read through this method so
        they are serialized per account.
        """
        ...

    @abstractmethod
    def get_by_client_and_establishment(
        self, client_id: int, establishment_id: int
    ) -> CreditAccount | None: ...

    @abstractmethod
    def list_by_client(self, client_id: int) -> list[CreditAccount]: ...

    @abstractmethod
    def list_by_establishment(self, establishment_id: int) -> list[CreditAccount]: ...

    @abstractmethod
    def add(self, account: CreditAccount) -> CreditAccount:
        """Persist a new account and return it with its id assigned."""
        ...

    @abstractmethod
    def save(self, account: CreditAccount) -> None: ...
