"""
Staff zone endpoints (admins and instructors).

The access guard has already rejected every other role before
these handlers run.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from drive_crm.auth.context import AuthContext, get_auth_context
from drive_crm.models.base import get_db
from drive_crm.models.enums import AccountStatus, EnrollmentStatus, EntryType, Role
from drive_crm.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from drive_crm.schemas.dashboard import AccountDetailResponse, StaffDashboardResponse
from drive_crm.schemas.enrollment import (
    AttendanceResponse,
    EnrollmentCreate,
    EnrollmentResponse,
)
from drive_crm.schemas.ledger import (
    LedgerEntryCreate,
    LedgerEntryResponse,
    PaymentCreate,
)
from drive_crm.schemas.lesson import LessonCreate, LessonResponse
from drive_crm.services.account_service import AccountService
from drive_crm.services.csv_export import csv_download, to_csv_rows
from drive_crm.services.enrollment_service import EnrollmentService
from drive_crm.services.ledger_service import LedgerService
from drive_crm.services.lesson_service import LessonService, day_window, week_window

router = APIRouter(prefix="/staff", tags=["Staff"])

CLIENT_EXPORT_COLUMNS = [
    "id", "full_name", "phone", "total_balance", "account_status", "created_at",
]


def _not_found_or_bad_request(e: ValueError) -> HTTPException:
    status_code = 404 if "not found" in str(e) else 400
    return HTTPException(status_code=status_code, detail=str(e))


def _schedule_owner(context: AuthContext, requested: str | None) -> str | None:
    """Instructors only see and book their own lessons."""
    if context.role == Role.INSTRUCTOR:
        return context.require_identity().id
    return requested


@router.get("", response_model=StaffDashboardResponse)
def staff_dashboard(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    start, end = day_window(date.today())
    lessons = LessonService(db).list_lessons(
        start, end, instructor_id=_schedule_owner(context, None)
    )
    return StaffDashboardResponse(
        active_enrollments=len(
            EnrollmentService(db).list_enrollments(status=EnrollmentStatus.ACTIVE)
        ),
        debtor_accounts=len(AccountService(db).list_debtors()),
        lessons_today=[LessonResponse.model_validate(l) for l in lessons],
    )


# --- Clients ---

@router.get("/clients", response_model=list[AccountResponse])
def list_clients(
    status: AccountStatus | None = None,
    db: Session = Depends(get_db),
):
    return AccountService(db).list_accounts(status)


@router.post("/clients", response_model=AccountResponse, status_code=201)
def create_client(request: AccountCreate, db: Session = Depends(get_db)):
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/clients/export")
def export_clients(
    status: AccountStatus | None = None,
    db: Session = Depends(get_db),
):
    rows = [
        AccountResponse.model_validate(a).model_dump()
        for a in AccountService(db).list_accounts(status)
    ]
    return csv_download(
        to_csv_rows(rows, CLIENT_EXPORT_COLUMNS),
        f"clients-{date.today().isoformat()}.csv",
    )


@router.get("/clients/{account_id}", response_model=AccountDetailResponse)
def get_client(account_id: int, db: Session = Depends(get_db)):
    """Client card: account, live balance, enrollments and ledger."""
    try:
        account = AccountService(db).get_account(account_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    ledger = LedgerService(db)
    return AccountDetailResponse(
        account=AccountResponse.model_validate(account),
        balance=ledger.compute_balance(account.id),
        enrollments=[
            EnrollmentResponse.model_validate(e)
            for e in EnrollmentService(db).list_enrollments(account_id=account.id)
        ],
        entries=[
            LedgerEntryResponse.model_validate(e)
            for e in ledger.list_entries(account_id=account.id)
        ],
    )


@router.patch("/clients/{account_id}", response_model=AccountResponse)
def update_client(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        account = service.update_account(account_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)


# --- Enrollments ---

@router.get("/enrollments", response_model=list[EnrollmentResponse])
def list_enrollments(
    account_id: int | None = None,
    status: EnrollmentStatus | None = None,
    db: Session = Depends(get_db),
):
    return EnrollmentService(db).list_enrollments(account_id, status)


@router.post("/enrollments", response_model=EnrollmentResponse, status_code=201)
def create_enrollment(request: EnrollmentCreate, db: Session = Depends(get_db)):
    service = EnrollmentService(db)
    try:
        enrollment = service.enroll(request)
        db.commit()
        return enrollment
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)


@router.post(
    "/enrollments/{enrollment_id}/cancel",
    response_model=EnrollmentResponse,
)
def cancel_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    service = EnrollmentService(db)
    try:
        enrollment = service.cancel_enrollment(enrollment_id)
        db.commit()
        return enrollment
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)


@router.get(
    "/enrollments/{enrollment_id}/attendance",
    response_model=list[AttendanceResponse],
)
def list_attendance(enrollment_id: int, db: Session = Depends(get_db)):
    service = EnrollmentService(db)
    try:
        service.get_enrollment(enrollment_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return service.list_attendance(enrollment_id)


# --- Payments ---

@router.get("/payments", response_model=list[LedgerEntryResponse])
def list_payments(
    account_id: int | None = None,
    db: Session = Depends(get_db),
):
    return LedgerService(db).list_entries([EntryType.PAYMENT], account_id)


@router.post("/payments", response_model=LedgerEntryResponse, status_code=201)
def record_payment(request: PaymentCreate, db: Session = Depends(get_db)):
    """Record a client payment; payments are positive entries."""
    service = LedgerService(db)
    try:
        entry = service.record_entry(LedgerEntryCreate(
            amount=abs(request.amount),
            entry_type=EntryType.PAYMENT,
            description=request.description,
            account_id=request.account_id,
        ))
        db.commit()
        return entry
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)


# --- Schedule ---

@router.get("/schedule", response_model=list[LessonResponse])
def get_schedule(
    day: date | None = None,
    view: str = "day",
    instructor_id: str | None = None,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Lessons for one day or the Monday-based week containing it."""
    if view not in ("day", "week"):
        raise HTTPException(status_code=400, detail="view must be 'day' or 'week'")
    day = day or date.today()
    start, end = week_window(day) if view == "week" else day_window(day)
    return LessonService(db).list_lessons(
        start, end, instructor_id=_schedule_owner(context, instructor_id)
    )


@router.post("/schedule", response_model=LessonResponse, status_code=201)
def schedule_lesson(
    request: LessonCreate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    identity = context.require_identity()
    instructor_id = _schedule_owner(context, request.instructor_id) or identity.id
    service = LessonService(db)
    try:
        lesson = service.schedule_lesson(request, instructor_id)
        db.commit()
        return lesson
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)


@router.post("/schedule/{lesson_id}/complete", response_model=LessonResponse)
def complete_lesson(lesson_id: int, db: Session = Depends(get_db)):
    """Mark a lesson done and log its hours as attendance."""
    service = LessonService(db)
    try:
        lesson = service.complete_lesson(lesson_id)
        db.commit()
        return lesson
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)


@router.post("/schedule/{lesson_id}/cancel", response_model=LessonResponse)
def cancel_lesson(lesson_id: int, db: Session = Depends(get_db)):
    service = LessonService(db)
    try:
        lesson = service.cancel_lesson(lesson_id)
        db.commit()
        return lesson
    except ValueError as e:
        db.rollback()
        raise _not_found_or_bad_request(e)
