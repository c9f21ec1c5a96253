from credit_ledger.infra.db.models.base import Base
from credit_ledger.infra.db.models.credit_account import CreditAccountRow
from credit_ledger.infra.db.models.installment import InstallmentRow
from credit_ledger.infra.db.models.late_fee_rule import LateFeeRuleRow
from credit_ledger.infra.db.models.transaction import TransactionRow

__all__ = ["Base", "CreditAccountRow", "InstallmentRow", "LateFeeRuleRow", "TransactionRow"]
