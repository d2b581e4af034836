"""
Ledger service — the only writer of ledger entries.

Rules it keeps:
1. Entries are append-only; there is no update or delete.
2. The amount is stored exactly as given. Callers apply the sign
   convention (payments positive; expenses, salaries and
   discounts negative). The entry type never changes the sign.
3. An account's balance is the sum of its entries. The stored
   total_balance on the account is refreshed in the same flush as
   every entry recorded against it.
4. Expense-type entries without an account are business
   expenses. The same types booked against an account are
   charges to that client for training used.
"""

from decimal import Decimal
from typing import Iterable

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from drive_crm.logging_config import get_logger
from drive_crm.models.account import Account
from drive_crm.models.enums import EntryType, EXPENSE_ENTRY_TYPES
from drive_crm.models.ledger_entry import LedgerEntry
from drive_crm.schemas.ledger import LedgerEntryCreate

log = get_logger("services.ledger")

CENT = Decimal("0.01")


def _to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT)


class LedgerService:
    """
    The service takes a database session as a constructor
    argument, so the caller controls the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_entry(self, request: LedgerEntryCreate) -> LedgerEntry:
        """
        Append one entry.

        If the entry belongs to an account, the account must exist
        and its stored balance and status are refreshed before this
        returns. The caller commits.
        """
        account = None
        if request.account_id is not None:
            account = self.db.get(Account, request.account_id)
            if not account:
                raise ValueError(f"Account {request.account_id} not found")

        entry = LedgerEntry(
            account_id=request.account_id,
            amount=request.amount,
            entry_type=request.entry_type,
            description=request.description,
        )
        self.db.add(entry)
        self.db.flush()

        if account is not None:
            account.apply_balance(self.compute_balance(account.id))
            self.db.flush()

        log.info(
            "Recorded %s entry %s for account %s",
            entry.entry_type.value, entry.amount, entry.account_id,
        )
        return entry

    def compute_balance(self, account_id: int) -> Decimal:
        """
        Sum every entry for the account.

        Always read from the entries, never from the stored
        projection, so a query issued after record_entry on the
        same session sees that entry.
        """
        total = self.db.execute(
            select(func.coalesce(func.sum(LedgerEntry.amount), 0)).where(
                LedgerEntry.account_id == account_id
            )
        ).scalar()
        return _to_money(total)

    def get_account_balance(self, account_id: int) -> Decimal:
        """compute_balance for an account that must exist."""
        if not self.db.get(Account, account_id):
            raise ValueError(f"Account {account_id} not found")
        return self.compute_balance(account_id)

    def reconcile_account(self, account_id: int) -> Account:
        """Rewrite an account's stored balance from its entries."""
        account = self.db.get(Account, account_id)
        if not account:
            raise ValueError(f"Account {account_id} not found")

        balance = self.compute_balance(account_id)
        if account.total_balance != balance:
            log.warning(
                "Account %s balance drifted: stored=%s computed=%s",
                account_id, account.total_balance, balance,
            )
        account.apply_balance(balance)
        self.db.flush()
        return account

    def list_entries(
        self,
        entry_types: Iterable[EntryType] | None = None,
        account_id: int | None = None,
        unassigned: bool = False,
    ) -> list[LedgerEntry]:
        """
        Entries matching the filters, newest first.

        ``unassigned`` keeps only entries not booked to any account.
        """
        query = select(LedgerEntry)
        if unassigned:
            query = query.where(LedgerEntry.account_id.is_(None))
        if entry_types is not None:
            query = query.where(LedgerEntry.entry_type.in_(list(entry_types)))
        if account_id is not None:
            query = query.where(LedgerEntry.account_id == account_id)
        query = query.order_by(
            LedgerEntry.created_at.desc(), LedgerEntry.id.desc()
        )
        return list(self.db.execute(query).scalars().all())

    def list_expenses(self) -> list[LedgerEntry]:
        """Business expenses; client training charges are excluded."""
        return self.list_entries(EXPENSE_ENTRY_TYPES, unassigned=True)

    def summarize(self) -> dict:
        """
        Business-wide totals for the admin dashboard.

        Expenses, charges and discounts are reported as they are
        stored, i.e. negative. Charges are what clients owe for
        training used; they move account balances, not cash, so
        they stay out of ``net``.
        """
        unassigned = LedgerEntry.account_id.is_(None)
        rows = self.db.execute(
            select(
                LedgerEntry.entry_type,
                unassigned,
                func.coalesce(func.sum(LedgerEntry.amount), 0),
                func.count(LedgerEntry.id),
            ).group_by(LedgerEntry.entry_type, unassigned)
        ).all()

        income = expenses = charges = discounts = Decimal("0.00")
        for entry_type, is_unassigned, total, _ in rows:
            total = _to_money(total)
            if entry_type == EntryType.PAYMENT:
                income += total
            elif entry_type == EntryType.DISCOUNT:
                discounts += total
            elif entry_type in EXPENSE_ENTRY_TYPES and is_unassigned:
                expenses += total
            elif entry_type in EXPENSE_ENTRY_TYPES:
                charges += total

        return {
            "income": income,
            "expenses": expenses,
            "charges": charges,
            "discounts": discounts,
            "net": income + expenses + discounts,
            "entry_count": sum(count for _, _, _, count in rows),
        }
