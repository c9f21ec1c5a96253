"""Steps shared by the mutating use cases. Always called inside an open unit of work."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from credit_ledger.domain.credit_account import AccountNotFound, CreditAccount, CreditType
from credit_ledger.domain.installment import Installment, mark_overdue
from credit_ledger.domain.ledger import (
    apply_ledger_delta,
    overdue_balance,
    release_block_if_settled,
)
from credit_ledger.domain.money import ZERO
from credit_ledger.domain.transaction import Transaction, pending_payment_total
from credit_ledger.ports.unit_of_work import UnitOfWork


def lock_account(uow: UnitOfWork, account_id: int) -> CreditAccount:
    """
    Load an account under its per-account lock.

    Raises:
        AccountNotFound: If no account has this id
    """
    account = uow.accounts.get_for_update(account_id)
    if account is None:
        raise AccountNotFound(account_id)
    return account


def post_entry(
    uow: UnitOfWork, account: CreditAccount, entry: Transaction
) -> tuple[CreditAccount, Transaction]:
    """
    Insert a ledger entry and apply its signed amount to the account balance.

    The blocked flag is left alone while any payment of the account, this one
    included, is still awaiting confirmation.
    """
    transaction = uow.transactions.add(entry)
    updated = apply_ledger_delta(
        account,
        transaction.signed_amount,
        clears_block=pending_payments(uow, account.id) == 0,
    )
    uow.accounts.save(updated)
    return updated, transaction


def rebalance(
    uow: UnitOfWork, account: CreditAccount, before: Transaction, after: Transaction | None
) -> CreditAccount:
    """
    Replace the balance effect of an existing entry.

    ``after=None`` removes the entry from the ledger altogether.
    """
    new_effect = after.signed_amount if after is not None else ZERO
    updated = apply_ledger_delta(
        account,
        new_effect - before.signed_amount,
        clears_block=pending_payments(uow, account.id, excluding=before.id) == 0,
    )
    uow.accounts.save(updated)
    return updated


def pending_payments(uow: UnitOfWork, account_id: int, excluding: int | None = None) -> Decimal:
    """Amount of the account's payments still awaiting confirmation."""
    return pending_payment_total(
        t for t in uow.transactions.list_by_account(account_id) if t.id != excluding
    )


def release_block(uow: UnitOfWork, account: CreditAccount, settled: Transaction) -> CreditAccount:
    """Unblock a fully paid account once ``settled`` was the last pending payment."""
    if pending_payments(uow, account.id, excluding=settled.id) > 0:
        return account
    updated = release_block_if_settled(account)
    if updated is not account:
        uow.accounts.save(updated)
    return updated


def refresh_overdue_installments(
    uow: UnitOfWork, account: CreditAccount, today: date
) -> list[Installment]:
    """Flip past-due PENDING installments to OVERDUE and return the full schedule."""
    installments = uow.installments.list_by_account(account.id)
    flipped = mark_overdue(installments, today)
    if not flipped:
        return installments
    uow.installments.save_many(flipped)
    by_id = {i.id: i for i in flipped}
    return [by_id.get(i.id, i) for i in installments]


def client_overdue_balance(uow: UnitOfWork, client_id: int, today: date) -> Decimal:
    """Overdue amount summed over every account of a client."""
    total = ZERO
    for account in uow.accounts.list_by_client(client_id):
        installments = (
            uow.installments.list_by_account(account.id)
            if account.credit_type is CreditType.LONG_TERM
            else []
        )
        total += overdue_balance(
            account,
            uow.transactions.list_by_account(account.id),
            installments,
            today,
        )
    return total
