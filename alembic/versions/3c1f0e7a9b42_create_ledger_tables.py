"""Create ledger tables

Revision ID: 3c1f0e7a9b42
Revises:
Create Date: 2026-10-19 10:12:31.418207

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1f0e7a9b42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "credit_accounts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("establishment_id", sa.Integer(), nullable=False),
        sa.Column("credit_limit", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("current_balance", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("monthly_due_day", sa.Integer(), nullable=False),
        sa.Column("annual_interest_rate", sa.Numeric(precision=9, scale=4), nullable=False),
        sa.Column("interest_type", sa.String(length=20), nullable=False),
        sa.Column("credit_type", sa.String(length=20), nullable=False),
        sa.Column("grace_period_months", sa.Integer(), nullable=False),
        sa.Column("late_fee_percentage", sa.Numeric(precision=9, scale=4), nullable=True),
        sa.Column("is_blocked", sa.Boolean(), nullable=False),
        sa.Column("last_interest_accrual_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "client_id", "establishment_id", name="uq_credit_accounts_client_establishment"
        ),
    )
    op.create_index("ix_credit_accounts_client_id", "credit_accounts", ["client_id"])
    op.create_index("ix_credit_accounts_establishment_id", "credit_accounts", ["establishment_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("transaction_type", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payment_method", sa.String(length=10), nullable=False),
        sa.Column("payment_status", sa.String(length=10), nullable=False),
        sa.Column("payment_code", sa.String(length=12), nullable=True),
        sa.Column("confirmation_code", sa.String(length=12), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["credit_accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_transactions_account_occurred_at", "transactions", ["account_id", "occurred_at"]
    )

    op.create_table(
        "installments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("purchase_transaction_id", sa.Integer(), nullable=True),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("status", sa.String(length=10), nullable=False),
        sa.ForeignKeyConstraint(["account_id"], ["credit_accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_installments_account_id", "installments", ["account_id"])
    op.create_index(
        "ix_installments_purchase_transaction_id", "installments", ["purchase_transaction_id"]
    )

    op.create_table(
        "late_fee_rules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("establishment_id", sa.Integer(), nullable=False),
        sa.Column("min_days_overdue", sa.Integer(), nullable=False),
        sa.Column("max_days_overdue", sa.Integer(), nullable=True),
        sa.Column("fee_type", sa.String(length=10), nullable=False),
        sa.Column("value", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_late_fee_rules_establishment_id", "late_fee_rules", ["establishment_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_late_fee_rules_establishment_id", table_name="late_fee_rules")
    op.drop_table("late_fee_rules")
    op.drop_index("ix_installments_purchase_transaction_id", table_name="installments")
    op.drop_index("ix_installments_account_id", table_name="installments")
    op.drop_table("installments")
    op.drop_index("ix_transactions_account_occurred_at", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_credit_accounts_establishment_id", table_name="credit_accounts")
    op.drop_index("ix_credit_accounts_client_id", table_name="credit_accounts")
    op.drop_table("credit_accounts")
