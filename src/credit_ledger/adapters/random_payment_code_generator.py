from __future__ import annotations

import random

from credit_ledger.ports.payment_code_generator import PaymentCodeGenerator

PAYMENT_CODE_LENGTH = 6


class RandomPaymentCodeGenerator(PaymentCodeGenerator):
    """
    Payment codes drawn from an injected generator.

    Pass ``random.Random(seed)`` for reproducible codes or
    ``random.SystemRandom()`` in production. No module-level RNG state is used.
    """

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def generate(self) -> str:
        return "".join(str(self._rng.randrange(10)) for _ in range(PAYMENT_CODE_LENGTH))
