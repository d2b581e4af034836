"""
Pydantic schemas for client accounts.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from drive_crm.models.enums import AccountStatus


class AccountCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    profile_id: str | None = Field(default=None, max_length=64)


class AccountUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    account_status: AccountStatus | None = None


class AccountResponse(BaseModel):
    id: int
    profile_id: str | None
    full_name: str
    phone: str | None
    total_balance: Decimal
    account_status: AccountStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    """Balance recomputed from ledger entries."""
    account_id: int
    full_name: str
    account_status: AccountStatus
    balance: Decimal
