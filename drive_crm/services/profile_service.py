"""
Profile service — lazily created user profiles.

A profile is created the first time an authenticated user is
seen. Users edit their own contact details; administrators may
also change the role.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from drive_crm.logging_config import get_logger
from drive_crm.models.enums import Role
from drive_crm.models.profile import Profile, DEFAULT_FULL_NAME
from drive_crm.schemas.profile import ProfileSelfUpdate, ProfileAdminUpdate

log = get_logger("services.profile")


class ProfileService:

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Profile:
        profile = self.db.get(Profile, user_id)
        if not profile:
            raise ValueError(f"Profile {user_id} not found")
        return profile

    def get_or_create(
        self,
        user_id: str,
        full_name: str | None = None,
        role: Role | None = None,
    ) -> Profile:
        """
        Return the user's profile, creating it on first sight.

        New profiles take the role the auth backend reports when it
        is one of the assignable roles, and ``rider`` otherwise.
        """
        profile = self.db.get(Profile, user_id)
        if profile:
            return profile

        if role not in Role.assignable():
            role = Role.RIDER

        profile = Profile(
            id=user_id,
            full_name=full_name or DEFAULT_FULL_NAME,
            role=role,
        )
        self.db.add(profile)
        self.db.flush()
        log.info("Created profile for user %s with role %s", user_id, role.value)
        return profile

    def update_self(self, user_id: str, request: ProfileSelfUpdate) -> Profile:
        profile = self.get(user_id)
        for name, value in request.model_dump(exclude_unset=True).items():
            setattr(profile, name, value)
        self.db.flush()
        return profile

    def admin_update(self, user_id: str, request: ProfileAdminUpdate) -> Profile:
        profile = self.get(user_id)
        changes = request.model_dump(exclude_unset=True)
        if "role" in changes and changes["role"] is None:
            raise ValueError("role cannot be cleared")
        for name, value in changes.items():
            setattr(profile, name, value)
        self.db.flush()
        if "role" in changes:
            log.info("Role of profile %s set to %s", user_id, profile.role.value)
        return profile

    def list_by_role(self, role: Role | None = None) -> list[Profile]:
        query = select(Profile).order_by(Profile.full_name)
        if role is not None:
            query = query.where(Profile.role == role)
        return list(self.db.execute(query).scalars().all())
