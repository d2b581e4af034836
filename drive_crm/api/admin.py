"""
Admin zone endpoints.

Course catalogue, staff roles, finances and ledger maintenance.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from drive_crm.models.base import get_db
from drive_crm.models.enums import AccountStatus, EnrollmentStatus, EntryType, Role
from drive_crm.schemas.account import AccountResponse
from drive_crm.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from drive_crm.schemas.dashboard import AdminDashboardResponse
from drive_crm.schemas.ledger import (
    FinanceSummary,
    LedgerEntryCreate,
    LedgerEntryResponse,
)
from drive_crm.schemas.profile import ProfileAdminUpdate, ProfileDetailResponse
from drive_crm.services.account_service import AccountService
from drive_crm.services.course_service import CourseService
from drive_crm.services.csv_export import csv_download, to_csv_rows
from drive_crm.services.enrollment_service import EnrollmentService
from drive_crm.services.ledger_service import LedgerService
from drive_crm.services.profile_service import ProfileService

router = APIRouter(prefix="/admin", tags=["Admin"])

LEDGER_EXPORT_COLUMNS = [
    "id", "created_at", "entry_type", "account_id", "description", "amount",
]


@router.get("", response_model=AdminDashboardResponse)
def admin_dashboard(db: Session = Depends(get_db)):
    accounts = AccountService(db).list_accounts()
    return AdminDashboardResponse(
        finances=FinanceSummary(**LedgerService(db).summarize()),
        active_enrollments=len(
            EnrollmentService(db).list_enrollments(status=EnrollmentStatus.ACTIVE)
        ),
        total_accounts=len(accounts),
        debtor_accounts=sum(
            1 for a in accounts if a.account_status == AccountStatus.DEBTOR
        ),
    )


# --- Courses ---

@router.get("/courses", response_model=list[CourseResponse])
def list_courses(active: bool | None = True, db: Session = Depends(get_db)):
    return CourseService(db).list_courses(active)


@router.post("/courses", response_model=CourseResponse, status_code=201)
def create_course(request: CourseCreate, db: Session = Depends(get_db)):
    service = CourseService(db)
    try:
        course = service.create_course(request)
        db.commit()
        return course
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/courses/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: int,
    request: CourseUpdate,
    db: Session = Depends(get_db),
):
    service = CourseService(db)
    try:
        course = service.update_course(course_id, request)
        db.commit()
        return course
    except ValueError as e:
        db.rollback()
        status_code = 404 if "not found" in str(e) else 400
        raise HTTPException(status_code=status_code, detail=str(e))


# --- Staff and roles ---

@router.get("/instructors", response_model=list[ProfileDetailResponse])
def list_instructors(db: Session = Depends(get_db)):
    """Everyone on the payroll: instructors and office staff."""
    service = ProfileService(db)
    return service.list_by_role(Role.INSTRUCTOR) + service.list_by_role(Role.STAFF)


@router.get("/profiles", response_model=list[ProfileDetailResponse])
def list_profiles(role: Role | None = None, db: Session = Depends(get_db)):
    return ProfileService(db).list_by_role(role)


@router.patch("/profiles/{user_id}", response_model=ProfileDetailResponse)
def update_profile(
    user_id: str,
    request: ProfileAdminUpdate,
    db: Session = Depends(get_db),
):
    service = ProfileService(db)
    try:
        profile = service.admin_update(user_id, request)
        db.commit()
        return profile
    except ValueError as e:
        db.rollback()
        status_code = 404 if "not found" in str(e) else 400
        raise HTTPException(status_code=status_code, detail=str(e))


# --- Finances ---

@router.get("/finances", response_model=FinanceSummary)
def finance_summary(db: Session = Depends(get_db)):
    return FinanceSummary(**LedgerService(db).summarize())


@router.get("/finances/entries", response_model=list[LedgerEntryResponse])
def list_ledger_entries(
    entry_type: list[EntryType] | None = Query(default=None),
    account_id: int | None = None,
    db: Session = Depends(get_db),
):
    return LedgerService(db).list_entries(entry_type, account_id)


@router.get("/finances/export")
def export_ledger(db: Session = Depends(get_db)):
    rows = [
        LedgerEntryResponse.model_validate(e).model_dump()
        for e in LedgerService(db).list_entries()
    ]
    return csv_download(
        to_csv_rows(rows, LEDGER_EXPORT_COLUMNS),
        f"ledger-{date.today().isoformat()}.csv",
    )


@router.post("/ledger", response_model=LedgerEntryResponse, status_code=201)
def record_ledger_entry(request: LedgerEntryCreate, db: Session = Depends(get_db)):
    """
    Record a raw ledger entry (discounts, salary payouts,
    adjustments). The amount is stored exactly as sent.
    """
    service = LedgerService(db)
    try:
        entry = service.record_entry(request)
        db.commit()
        return entry
    except ValueError as e:
        db.rollback()
        status_code = 404 if "not found" in str(e) else 400
        raise HTTPException(status_code=status_code, detail=str(e))


@router.post(
    "/accounts/{account_id}/reconcile",
    response_model=AccountResponse,
)
def reconcile_account(account_id: int, db: Session = Depends(get_db)):
    """Rewrite the stored balance from the ledger entries."""
    service = LedgerService(db)
    try:
        account = service.reconcile_account(account_id)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
