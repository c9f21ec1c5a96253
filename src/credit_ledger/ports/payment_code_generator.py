from __future__ import annotations

from abc import ABC, abstractmethod


class PaymentCodeGenerator(ABC):
    @abstractmethod
    def generate(self) -> str:
        """Six-digit code the client quotes to confirm a non-cash payment."""
        ...
