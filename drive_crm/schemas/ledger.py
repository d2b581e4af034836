"""
Pydantic schemas for ledger operations.

LedgerEntryCreate is the raw write interface: the amount is
stored exactly as given. The form-style schemas below take a
positive magnitude and the API layer applies the sign.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from drive_crm.models.enums import EntryType, EXPENSE_ENTRY_TYPES


class LedgerEntryCreate(BaseModel):
    amount: Decimal = Field(decimal_places=2)
    entry_type: EntryType
    description: str = Field(min_length=1, max_length=255)
    account_id: int | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_nonzero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("amount must be non-zero")
        return v


class ExpenseCreate(BaseModel):
    """An expense as entered by staff: a positive magnitude."""
    amount: Decimal = Field(gt=0, decimal_places=2)
    entry_type: EntryType = EntryType.OVERHEAD
    description: str = Field(min_length=1, max_length=255)

    @field_validator("entry_type")
    @classmethod
    def must_be_expense_type(cls, v: EntryType) -> EntryType:
        if v not in EXPENSE_ENTRY_TYPES:
            raise ValueError(
                "entry_type must be one of: "
                + ", ".join(t.value for t in EXPENSE_ENTRY_TYPES)
            )
        return v


class PaymentCreate(BaseModel):
    """A client payment towards an account."""
    account_id: int
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str = Field(default="Payment", min_length=1, max_length=255)


class LedgerEntryResponse(BaseModel):
    id: int
    account_id: int | None
    amount: Decimal
    entry_type: EntryType
    description: str
    created_at: datetime

    model_config = {"from_attributes": True}


class FinanceSummary(BaseModel):
    income: Decimal
    expenses: Decimal
    charges: Decimal
    discounts: Decimal
    net: Decimal
    entry_count: int
