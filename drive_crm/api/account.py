"""
Customer-facing account endpoints.

A rider sees the accounts linked to their profile, with the
balance recomputed from the ledger.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from drive_crm.auth.context import AuthContext, get_auth_context
from drive_crm.models.base import get_db
from drive_crm.schemas.account import AccountResponse
from drive_crm.schemas.dashboard import AccountDetailResponse, TrainingResponse
from drive_crm.schemas.enrollment import AttendanceResponse, EnrollmentResponse
from drive_crm.schemas.ledger import LedgerEntryResponse
from drive_crm.services.account_service import AccountService
from drive_crm.services.enrollment_service import EnrollmentService
from drive_crm.services.ledger_service import LedgerService

router = APIRouter(prefix="/account", tags=["Account"])


@router.get("", response_model=list[AccountDetailResponse])
def my_accounts(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    identity = context.require_identity()
    ledger = LedgerService(db)
    enrollments = EnrollmentService(db)

    details = []
    for account in AccountService(db).get_accounts_for_profile(identity.id):
        details.append(AccountDetailResponse(
            account=AccountResponse.model_validate(account),
            balance=ledger.compute_balance(account.id),
            enrollments=[
                EnrollmentResponse.model_validate(e)
                for e in enrollments.list_enrollments(account_id=account.id)
            ],
            entries=[
                LedgerEntryResponse.model_validate(e)
                for e in ledger.list_entries(account_id=account.id)
            ],
        ))
    return details


@router.get("/training", response_model=list[TrainingResponse])
def my_training(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """The caller's enrollments with their attendance history."""
    identity = context.require_identity()
    service = EnrollmentService(db)
    return [
        TrainingResponse(
            enrollment=EnrollmentResponse.model_validate(enrollment),
            course_name=enrollment.course.name,
            attendance=[
                AttendanceResponse.model_validate(a)
                for a in service.list_attendance(enrollment.id)
            ],
        )
        for enrollment in service.list_for_profile(identity.id)
    ]
