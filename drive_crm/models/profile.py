"""
Profile model.

One profile per authenticated user. The primary key is the
auth backend's user id, so a profile's lifecycle follows the
external auth record and the application never deletes one.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from drive_crm.models.base import Base
from drive_crm.models.enums import Role, enum_values


DEFAULT_FULL_NAME = "New User"


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str] = mapped_column(
        String(200), nullable=False, default=DEFAULT_FULL_NAME
    )
    role: Mapped[Role] = mapped_column(
        SAEnum(
            Role,
            name="role_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        default=Role.RIDER,
    )
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    accounts: Mapped[list["Account"]] = relationship(back_populates="profile")

    def __repr__(self) -> str:
        return f"<Profile {self.id} {self.full_name} ({self.role.value})>"
