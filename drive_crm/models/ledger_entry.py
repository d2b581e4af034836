"""
Ledger entry model.

Entries are signed: payments are positive, expenses, salaries
and other deductions are negative. Entries are append-only;
nothing in the application updates or deletes one.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from drive_crm.models.base import Base
from drive_crm.models.enums import EntryType, enum_values


class LedgerEntry(Base):
    """
    An immutable, signed monetary record.

    account_id is optional: business overhead and salary payouts
    are not tied to a client account.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(
            EntryType,
            name="entry_type_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    account: Mapped[Optional["Account"]] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return f"<LedgerEntry {self.entry_type.value} {self.amount}>"
