"""
Access guard middleware.

Runs before every route: resolve the session from cookies,
classify the path, ask the decision engine. A redirect decision
short-circuits the request. Cookie changes from a token refresh
are written onto whichever response goes out.
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from drive_crm.auth.decision import RedirectTo, decide
from drive_crm.auth.routes import classify_route, is_unguarded_path
from drive_crm.logging_config import get_logger

log = get_logger("auth.guard")


class AccessGuardMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or is_unguarded_path(path):
            return await call_next(request)

        resolver = request.app.state.session_resolver
        session = await resolver.resolve(request.cookies)
        category = classify_route(path)
        decision = decide(session.identity, session.role, category)

        if isinstance(decision, RedirectTo):
            log.debug(
                "Redirecting %s %s (%s, role=%s) to %s",
                request.method, path, category.value,
                session.role.value, decision.path,
            )
            response = RedirectResponse(url=decision.path, status_code=307)
        else:
            request.state.session = session
            response = await call_next(request)

        return session.apply_cookies(response)
