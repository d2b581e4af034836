"""
Pydantic schemas for profiles.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from drive_crm.models.enums import Role


class ProfileSelfUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    avatar_url: str | None = Field(default=None, max_length=500)


class ProfileAdminUpdate(BaseModel):
    """Fields an administrator may change on any profile."""
    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    role: Role | None = None

    @field_validator("role")
    @classmethod
    def role_must_be_assignable(cls, v: Role | None) -> Role | None:
        if v is not None and v not in Role.assignable():
            raise ValueError(f"role '{v.value}' cannot be assigned")
        return v


class ProfileResponse(BaseModel):
    id: str
    full_name: str
    role: Role
    phone: str | None = None
    avatar_url: str | None = None

    model_config = {"from_attributes": True}


class ProfileDetailResponse(ProfileResponse):
    created_at: datetime
    updated_at: datetime
