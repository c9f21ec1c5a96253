from __future__ import annotations

import os


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def payment_code_seed() -> int | None:
    """Seed for the payment-code generator; None means system entropy."""
    seed = os.getenv("PAYMENT_CODE_SEED")

    if not seed:
        return None

    try:
        return int(seed)
    except ValueError:
        raise RuntimeError("PAYMENT_CODE_SEED must be an integer") from None
