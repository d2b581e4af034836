"""
Sign-in, registration and sign-out endpoints.

/, /register and /auth/* are public; a signed-in user never
reaches them because the access guard redirects first. /logout
sits outside the public zone so only a signed-in user reaches it.
"""

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from drive_crm.auth.context import AuthContext, get_auth_context
from drive_crm.auth.decision import HOME_PATH, landing_path_for
from drive_crm.auth.session import AuthProviderError, SessionResult
from drive_crm.config import get_settings
from drive_crm.logging_config import get_logger
from drive_crm.models.base import get_db
from drive_crm.schemas.auth import SignInRequest, SignUpRequest, SessionResponse
from drive_crm.services.profile_service import ProfileService

router = APIRouter(tags=["Auth"])

log = get_logger("api.auth")


def _session_response(session: SessionResult, status_code: int = 200) -> JSONResponse:
    body = SessionResponse(
        user_id=session.identity.id,
        role=session.role.value,
        redirect_to=landing_path_for(session.role),
    )
    response = JSONResponse(body.model_dump(), status_code=status_code)
    return session.apply_cookies(response)


@router.get("/")
def landing():
    settings = get_settings()
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "sign_in": "/auth/login",
        "register": "/register",
    }


@router.post("/auth/login")
async def sign_in(request: Request, body: SignInRequest):
    resolver = request.app.state.session_resolver
    try:
        session = await resolver.sign_in(body.email, body.password)
    except AuthProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except httpx.HTTPError as e:
        log.error("Auth backend unavailable during sign-in: %s", e)
        raise HTTPException(status_code=503, detail="Auth backend unavailable")
    return _session_response(session)


@router.post("/register", status_code=201)
async def register(
    request: Request,
    body: SignUpRequest,
    db: Session = Depends(get_db),
):
    """
    Register a new rider.

    If the backend signs the user in straight away the profile is
    created with the given name; otherwise the client must confirm
    the address first.
    """
    resolver = request.app.state.session_resolver
    try:
        session = await resolver.sign_up(body.email, body.password, body.full_name)
    except AuthProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except httpx.HTTPError as e:
        log.error("Auth backend unavailable during sign-up: %s", e)
        raise HTTPException(status_code=503, detail="Auth backend unavailable")

    if not session.is_authenticated:
        return JSONResponse(
            {"status": "confirmation_required", "redirect_to": HOME_PATH},
            status_code=202,
        )

    ProfileService(db).get_or_create(
        session.identity.id, full_name=body.full_name, role=session.role
    )
    db.commit()
    return _session_response(session, status_code=201)


@router.post("/logout")
async def sign_out(context: AuthContext = Depends(get_auth_context)):
    context.require_identity()
    cookies = await context.sign_out()
    response = JSONResponse({"redirect_to": HOME_PATH})
    return SessionResult.anonymous(cookies).apply_cookies(response)
