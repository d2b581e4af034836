"""
Self-service profile endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from drive_crm.auth.context import AuthContext, get_auth_context
from drive_crm.models.base import get_db
from drive_crm.schemas.profile import ProfileResponse, ProfileSelfUpdate
from drive_crm.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(context: AuthContext = Depends(get_auth_context)):
    """
    The caller's profile.

    Falls back to a default profile when the profile store could
    not be read, so the page still renders.
    """
    context.require_identity()
    return context.profile


@router.patch("", response_model=ProfileResponse)
def update_profile(
    request: ProfileSelfUpdate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    identity = context.require_identity()
    service = ProfileService(db)
    try:
        profile = service.update_self(identity.id, request)
        db.commit()
        return profile
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
