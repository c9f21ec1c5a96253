from __future__ import annotations

from abc import ABC, abstractmethod

from credit_ledger.domain.late_fee import LateFeeRule


class LateFeeRuleRepository(ABC):
    @abstractmethod
    def list_by_establishment(self, establishment_id: int) -> list[LateFeeRule]:
        """Rules of an establishment ordered by ``min_days_overdue``."""
        ...

    @abstractmethod
    def add(self, rule: LateFeeRule) -> LateFeeRule: ...
