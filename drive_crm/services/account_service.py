"""
Account service — client accounts.

Balances are never written here; they move only through
LedgerService. This service manages the client record itself.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from drive_crm.models.account import Account
from drive_crm.models.enums import AccountStatus
from drive_crm.models.profile import Profile
from drive_crm.schemas.account import AccountCreate, AccountUpdate
from drive_crm.services.ledger_service import LedgerService


class AccountService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger_service = LedgerService(db)

    def create_account(self, request: AccountCreate) -> Account:
        if request.profile_id is not None:
            if not self.db.get(Profile, request.profile_id):
                raise ValueError(f"Profile {request.profile_id} not found")

        account = Account(
            profile_id=request.profile_id,
            full_name=request.full_name,
            phone=request.phone,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account:
            raise ValueError(f"Account {account_id} not found")
        return account

    def list_accounts(self, status: AccountStatus | None = None) -> list[Account]:
        query = select(Account).order_by(Account.full_name)
        if status is not None:
            query = query.where(Account.account_status == status)
        return list(self.db.execute(query).scalars().all())

    def list_debtors(self) -> list[Account]:
        return self.list_accounts(AccountStatus.DEBTOR)

    def get_accounts_for_profile(self, profile_id: str) -> list[Account]:
        accounts = self.db.execute(
            select(Account)
            .where(Account.profile_id == profile_id)
            .order_by(Account.created_at)
        ).scalars().all()
        return list(accounts)

    def update_account(self, account_id: int, request: AccountUpdate) -> Account:
        """
        Update contact details or status.

        Debtor status is derived from the balance, so it cannot be
        set directly. Reactivating an inactive account re-derives
        active/debtor from the ledger.
        """
        account = self.get_account(account_id)
        changes = request.model_dump(exclude_unset=True)

        new_status = changes.pop("account_status", None)
        for name, value in changes.items():
            if value is None and name == "full_name":
                raise ValueError("full_name cannot be cleared")
            setattr(account, name, value)

        if new_status == AccountStatus.DEBTOR:
            raise ValueError("debtor status is derived from the balance")
        if new_status == AccountStatus.INACTIVE:
            account.account_status = AccountStatus.INACTIVE
        elif new_status == AccountStatus.ACTIVE:
            account.account_status = AccountStatus.ACTIVE
            account.apply_balance(
                self.ledger_service.compute_balance(account.id)
            )

        self.db.flush()
        return account

    def set_inactive(self, account_id: int) -> Account:
        return self.update_account(
            account_id, AccountUpdate(account_status=AccountStatus.INACTIVE)
        )
