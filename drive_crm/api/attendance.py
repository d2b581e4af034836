"""
Attendance logger endpoints (/log).

Lists active enrollments and records sessions against them.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from drive_crm.auth.context import AuthContext, get_auth_context
from drive_crm.models.base import get_db
from drive_crm.models.enums import EnrollmentStatus, Role
from drive_crm.schemas.dashboard import ActiveEnrollmentResponse
from drive_crm.schemas.enrollment import (
    AttendanceCreate,
    AttendanceResponse,
    AttendanceResult,
    EnrollmentResponse,
)
from drive_crm.services.enrollment_service import EnrollmentService

router = APIRouter(prefix="/log", tags=["Attendance"])


def active_enrollment_rows(service: EnrollmentService) -> list[ActiveEnrollmentResponse]:
    return [
        ActiveEnrollmentResponse(
            **EnrollmentResponse.model_validate(e).model_dump(),
            account_name=e.account.full_name,
        )
        for e in service.list_enrollments(status=EnrollmentStatus.ACTIVE)
    ]


@router.get("", response_model=list[ActiveEnrollmentResponse])
def list_active_enrollments(db: Session = Depends(get_db)):
    return active_enrollment_rows(EnrollmentService(db))


@router.post("", response_model=AttendanceResult, status_code=201)
def log_session(
    request: AttendanceCreate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Log a session and draw its hours from the enrollment.

    The instructor is the caller unless an admin names another.
    """
    identity = context.require_identity()
    instructor_id = identity.id
    if request.instructor_id and context.role == Role.ADMIN:
        instructor_id = request.instructor_id

    service = EnrollmentService(db)
    try:
        attendance = service.log_attendance(
            request.enrollment_id,
            instructor_id,
            request.hours_spent,
            session_date=request.session_date,
        )
        db.commit()
    except ValueError as e:
        db.rollback()
        status_code = 404 if "not found" in str(e) else 400
        raise HTTPException(status_code=status_code, detail=str(e))

    return AttendanceResult(
        attendance=AttendanceResponse.model_validate(attendance),
        enrollment=EnrollmentResponse.model_validate(attendance.enrollment),
    )
