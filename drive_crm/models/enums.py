"""
Shared enumerations for database models and access control.

Enum values are the lowercase strings the auth backend and the
clients exchange; columns store the values, not the member names.
"""

import enum


class Role(str, enum.Enum):
    """
    Closed set of user roles.

    UNKNOWN is the least-privileged variant. Any role string the
    auth backend sends that is not one of the four known roles
    parses to UNKNOWN and gets no special access.
    """
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STAFF = "staff"
    RIDER = "rider"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "Role":
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            role = cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN
        return role

    @classmethod
    def assignable(cls) -> tuple["Role", ...]:
        """Roles that may be stored on a profile."""
        return (cls.ADMIN, cls.INSTRUCTOR, cls.STAFF, cls.RIDER)

    @classmethod
    def instructing(cls) -> tuple["Role", ...]:
        """Roles that may teach a lesson and sign off attendance."""
        return (cls.ADMIN, cls.INSTRUCTOR)


class RouteCategory(str, enum.Enum):
    PUBLIC = "public"
    ADMIN = "admin"
    STAFF = "staff"
    OTHER = "other"


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    DEBTOR = "debtor"
    INACTIVE = "inactive"


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LessonStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EntryType(str, enum.Enum):
    """Category of a ledger entry. The sign of the amount is set by the caller."""
    PAYMENT = "payment"
    SALARY_EXPENSE = "salary_expense"
    OVERHEAD = "overhead"
    DISCOUNT = "discount"


EXPENSE_ENTRY_TYPES = (EntryType.OVERHEAD, EntryType.SALARY_EXPENSE)


def enum_values(enum_cls) -> list[str]:
    """values_callable for SQLAlchemy Enum columns."""
    return [member.value for member in enum_cls]
