"""
Business expense endpoints.

Expenses are entered as a positive magnitude and stored negated.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from drive_crm.auth.context import AuthContext, get_auth_context
from drive_crm.models.base import get_db
from drive_crm.schemas.ledger import (
    ExpenseCreate,
    LedgerEntryCreate,
    LedgerEntryResponse,
)
from drive_crm.services.csv_export import csv_download, to_csv_rows
from drive_crm.services.ledger_service import LedgerService

router = APIRouter(prefix="/expenses", tags=["Expenses"])

EXPORT_COLUMNS = ["created_at", "entry_type", "description", "amount"]


@router.get("", response_model=list[LedgerEntryResponse])
def list_expenses(db: Session = Depends(get_db)):
    """Overhead and salary entries, newest first."""
    return LedgerService(db).list_expenses()


@router.post("", response_model=LedgerEntryResponse, status_code=201)
def add_expense(
    request: ExpenseCreate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    context.require_identity()
    service = LedgerService(db)
    try:
        entry = service.record_entry(LedgerEntryCreate(
            amount=-abs(request.amount),
            entry_type=request.entry_type,
            description=request.description,
        ))
        db.commit()
        return entry
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/export")
def export_expenses(db: Session = Depends(get_db)):
    rows = [
        LedgerEntryResponse.model_validate(e).model_dump()
        for e in LedgerService(db).list_expenses()
    ]
    return csv_download(
        to_csv_rows(rows, EXPORT_COLUMNS),
        f"expenses-{date.today().isoformat()}.csv",
    )
