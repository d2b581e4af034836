"""
Per-request auth context.

Replaces ambient "current user" state with an explicit object.
get_auth_context() builds one for each request from the session
the access guard resolved, calls init(), hands it to the
endpoint and always calls teardown() afterwards.

Auth events are published on the app-wide SessionResolver
channel. The context only holds per-request state.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drive_crm.auth.session import CookieMutation, Identity, SessionResult
from drive_crm.logging_config import get_logger
from drive_crm.models.base import get_db
from drive_crm.models.enums import Role
from drive_crm.models.profile import DEFAULT_FULL_NAME
from drive_crm.services.profile_service import ProfileService

log = get_logger("auth.context")


@dataclass(frozen=True)
class ProfileView:
    """Detached snapshot of a profile, safe to use after a rollback."""
    id: str
    full_name: str
    role: Role
    phone: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_model(cls, profile) -> "ProfileView":
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            role=profile.role,
            phone=profile.phone,
            avatar_url=profile.avatar_url,
        )

    @classmethod
    def default_for(cls, identity: Identity) -> "ProfileView":
        role = identity.role if identity.role in Role.assignable() else Role.RIDER
        return cls(id=identity.id, full_name=DEFAULT_FULL_NAME, role=role)


class AuthContext:

    def __init__(self, profile_service: ProfileService, resolver):
        self.profile_service = profile_service
        self.resolver = resolver
        self.session: SessionResult = SessionResult.anonymous()
        self.profile: ProfileView | None = None
        self._last_fetched_id: str | None = None

    @property
    def identity(self) -> Identity | None:
        return self.session.identity

    @property
    def role(self) -> Role:
        return self.session.role

    def init(self, session: SessionResult) -> "AuthContext":
        """Adopt a resolved session and load the matching profile."""
        self.session = session
        if session.identity is not None:
            self._ensure_profile(session.identity)
        return self

    async def sign_out(self) -> tuple[CookieMutation, ...]:
        """Revoke the session; the resolver publishes SIGNED_OUT."""
        cookies = await self.resolver.sign_out(self.session)
        self._clear()
        return cookies

    def teardown(self) -> None:
        self._clear()

    def require_identity(self) -> Identity:
        if self.identity is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return self.identity

    def _clear(self) -> None:
        self.session = SessionResult.anonymous()
        self.profile = None
        self._last_fetched_id = None

    def _ensure_profile(self, identity: Identity) -> None:
        # Skip the fetch when this identity was already loaded
        if self._last_fetched_id == identity.id and self.profile is not None:
            return
        self._last_fetched_id = identity.id

        try:
            profile = self.profile_service.get_or_create(
                identity.id, role=identity.role
            )
            self.profile_service.db.commit()
            self.profile = ProfileView.from_model(profile)
        except SQLAlchemyError:
            log.exception("Profile fetch failed for user %s", identity.id)
            self.profile_service.db.rollback()
            self.profile = ProfileView.default_for(identity)


def get_auth_context(request: Request, db: Session = Depends(get_db)):
    """FastAPI dependency yielding an initialized AuthContext."""
    session = getattr(request.state, "session", None) or SessionResult.anonymous()
    context = AuthContext(ProfileService(db), request.app.state.session_resolver)
    context.init(session)
    try:
        yield context
    finally:
        context.teardown()
