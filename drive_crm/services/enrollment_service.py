"""
Enrollment service — purchased hour blocks and attendance.

log_attendance is the one place remaining_hours changes. The
attendance row, the decrement and the ledger charge for the
session share one unit of work; the caller's commit makes all
of them durable or none.

A session is charged pro rata from the contract price, as the
difference between the price of the hours used after and before
it. Charges therefore add up to exactly the contract price once
every hour is used.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from drive_crm.logging_config import get_logger
from drive_crm.models.account import Account
from drive_crm.models.attendance_log import AttendanceLog
from drive_crm.models.enrollment import Enrollment
from drive_crm.models.enums import AccountStatus, EnrollmentStatus, EntryType, Role
from drive_crm.models.profile import Profile
from drive_crm.schemas.enrollment import EnrollmentCreate
from drive_crm.schemas.ledger import LedgerEntryCreate
from drive_crm.services.course_service import CourseService
from drive_crm.services.ledger_service import CENT, LedgerService

log = get_logger("services.enrollment")


class EnrollmentService:

    def __init__(self, db: Session):
        self.db = db
        self.course_service = CourseService(db)
        self.ledger_service = LedgerService(db)

    def enroll(self, request: EnrollmentCreate) -> Enrollment:
        """
        Enroll an account in a course.

        Hours are copied from the course; the contract price is the
        course's current price unless one was negotiated. A non-zero
        amount_paid_today is recorded as a payment on the account.
        """
        account = self.db.get(Account, request.account_id)
        if not account:
            raise ValueError(f"Account {request.account_id} not found")
        if account.account_status == AccountStatus.INACTIVE:
            raise ValueError(f"Account {request.account_id} is not active")

        course = self.course_service.get_course(request.service_id)
        if not course.is_active:
            raise ValueError(f"Course {course.id} is not active")

        contract_price = (
            request.contract_price
            if request.contract_price is not None
            else course.effective_price
        )

        enrollment = Enrollment(
            account_id=account.id,
            service_id=course.id,
            contract_price=contract_price,
            total_hours=course.total_hours,
            remaining_hours=course.total_hours,
        )
        self.db.add(enrollment)
        self.db.flush()

        if request.amount_paid_today > 0:
            self.ledger_service.record_entry(LedgerEntryCreate(
                amount=request.amount_paid_today,
                entry_type=EntryType.PAYMENT,
                description=f"Initial payment for {course.total_hours}h package",
                account_id=account.id,
            ))
        return enrollment

    def get_enrollment(self, enrollment_id: int) -> Enrollment:
        enrollment = self.db.get(Enrollment, enrollment_id)
        if not enrollment:
            raise ValueError(f"Enrollment {enrollment_id} not found")
        return enrollment

    def list_enrollments(
        self,
        account_id: int | None = None,
        status: EnrollmentStatus | None = None,
    ) -> list[Enrollment]:
        query = select(Enrollment).order_by(Enrollment.created_at.desc())
        if account_id is not None:
            query = query.where(Enrollment.account_id == account_id)
        if status is not None:
            query = query.where(Enrollment.status == status)
        return list(self.db.execute(query).scalars().all())

    def list_for_profile(self, profile_id: str) -> list[Enrollment]:
        enrollments = self.db.execute(
            select(Enrollment)
            .join(Account, Enrollment.account_id == Account.id)
            .where(Account.profile_id == profile_id)
            .order_by(Enrollment.created_at.desc())
        ).scalars().all()
        return list(enrollments)

    def require_instructor(self, instructor_id: str) -> Profile:
        profile = self.db.get(Profile, instructor_id)
        if not profile:
            raise ValueError(f"Instructor {instructor_id} not found")
        if profile.role not in Role.instructing():
            raise ValueError(
                f"Profile {instructor_id} is not an instructor "
                f"(role: {profile.role.value})"
            )
        return profile

    def log_attendance(
        self,
        enrollment_id: int,
        instructor_id: str,
        hours_spent: Decimal,
        session_date: datetime | None = None,
    ) -> AttendanceLog:
        """
        Record a session and draw its hours from the enrollment.

        Rejected, not clamped, when the enrollment has fewer hours
        left than were spent.
        """
        hours_spent = Decimal(str(hours_spent))
        if hours_spent <= 0:
            raise ValueError("hours_spent must be positive")

        enrollment = self.get_enrollment(enrollment_id)
        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise ValueError(
                f"Enrollment {enrollment_id} is not active "
                f"(status: {enrollment.status.value})"
            )
        self.require_instructor(instructor_id)

        if hours_spent > enrollment.remaining_hours:
            raise ValueError(
                f"Insufficient hours: remaining={enrollment.remaining_hours}, "
                f"requested={hours_spent}"
            )

        charge = self.session_charge(enrollment, hours_spent)

        attendance = AttendanceLog(
            enrollment_id=enrollment.id,
            instructor_id=instructor_id,
            hours_spent=hours_spent,
            session_date=session_date or datetime.utcnow(),
        )
        enrollment.remaining_hours = enrollment.remaining_hours - hours_spent
        self.db.add(attendance)
        self.db.flush()

        if charge > 0:
            self.ledger_service.record_entry(LedgerEntryCreate(
                amount=-charge,
                entry_type=EntryType.SALARY_EXPENSE,
                description=f"Training session: {hours_spent}h",
                account_id=enrollment.account_id,
            ))

        log.info(
            "Logged %sh on enrollment %s, %sh remaining",
            hours_spent, enrollment.id, enrollment.remaining_hours,
        )
        return attendance

    def session_charge(self, enrollment: Enrollment, hours_spent: Decimal) -> Decimal:
        """Price of the next ``hours_spent`` hours of an enrollment."""
        used = enrollment.total_hours - enrollment.remaining_hours
        return (
            self._price_of_hours(enrollment, used + hours_spent)
            - self._price_of_hours(enrollment, used)
        )

    @staticmethod
    def _price_of_hours(enrollment: Enrollment, hours: Decimal) -> Decimal:
        if not enrollment.total_hours:
            return Decimal("0.00")
        price = enrollment.contract_price * hours / enrollment.total_hours
        return price.quantize(CENT)

    def list_attendance(self, enrollment_id: int) -> list[AttendanceLog]:
        logs = self.db.execute(
            select(AttendanceLog)
            .where(AttendanceLog.enrollment_id == enrollment_id)
            .order_by(AttendanceLog.session_date.desc())
        ).scalars().all()
        return list(logs)

    def cancel_enrollment(self, enrollment_id: int) -> Enrollment:
        enrollment = self.get_enrollment(enrollment_id)
        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise ValueError(
                f"Cannot cancel enrollment in status {enrollment.status.value}"
            )
        enrollment.status = EnrollmentStatus.CANCELLED
        self.db.flush()
        return enrollment
