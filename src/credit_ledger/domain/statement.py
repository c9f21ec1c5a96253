from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from credit_ledger.domain.transaction import Transaction


@dataclass(frozen=True, slots=True)
class AccountSummary:
    account_id: int
    balance: Decimal
    credit_limit: Decimal
    available_credit: Decimal
    due_date: date
    projected_interest: Decimal
    transactions: list[Transaction]


@dataclass(frozen=True, slots=True)
class AccountStatement:
    account_id: int
    start: datetime | None
    end: datetime | None
    starting_balance: Decimal
    ending_balance: Decimal
    transactions: list[Transaction]
