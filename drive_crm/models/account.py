"""
Client account model.

total_balance is a stored projection of the account's ledger
entries. LedgerService refreshes it in the same flush as every
entry it records, so after a commit it always equals the sum of
the account's entry amounts.
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
from drive_crm.models.enums import AccountStatus, enum_values


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    profile_id: Mapped[str | None] = mapped_column(
        ForeignKey("profiles.id"), nullable=True, index=True
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    total_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    account_status: Mapped[AccountStatus] = mapped_column(
        SAEnum(
            AccountStatus,
            name="account_status_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    profile: Mapped[Optional["Profile"]] = relationship(back_populates="accounts")
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="account"
    )
    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="account"
    )

    def apply_balance(self, balance: Decimal) -> None:
        """
        Store a freshly computed balance and derive the status.

        Debtor iff the balance is negative. Inactive accounts keep
        their status; only an explicit update reactivates them.
        """
        self.total_balance = balance
        if self.account_status == AccountStatus.INACTIVE:
            return
        if balance < 0:
            self.account_status = AccountStatus.DEBTOR
        else:
            self.account_status = AccountStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<Account {self.id} {self.full_name} "
            f"{self.total_balance} ({self.account_status.value})>"
        )
