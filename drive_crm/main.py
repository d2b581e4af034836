"""
Driving School CRM — FastAPI application.

Entry point: builds the app, installs the access guard in front
of every route and registers the routers.
"""

from fastapi import FastAPI

from drive_crm.api.account import router as account_router
from drive_crm.api.admin import router as admin_router
from drive_crm.api.attendance import router as attendance_router
from drive_crm.api.auth import router as auth_router
from drive_crm.api.expenses import router as expenses_router
from drive_crm.api.health import router as health_router
from drive_crm.api.profile import router as profile_router
from drive_crm.api.staff import router as staff_router
from drive_crm.auth.events import AuthEvent
from drive_crm.auth.middleware import AccessGuardMiddleware
from drive_crm.auth.session import build_session_resolver
from drive_crm.config import get_settings
from drive_crm.logging_config import setup_logging, get_logger

settings = get_settings()
setup_logging(settings.LOG_LEVEL)

log = get_logger("main")


def log_auth_event(event: AuthEvent, identity) -> None:
    log.info(
        "Auth event %s for %s",
        event.value, identity.id if identity is not None else "anonymous",
    )


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Scheduling, attendance and ledger service for a driving school",
)

app.state.session_resolver = build_session_resolver(settings)
app.state.session_resolver.events.subscribe(log_auth_event)

app.add_middleware(AccessGuardMiddleware)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(account_router)
app.include_router(expenses_router)
app.include_router(attendance_router)
app.include_router(staff_router)
app.include_router(admin_router)


def run() -> None:
    """Serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "drive_crm.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
