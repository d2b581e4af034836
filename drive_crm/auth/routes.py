"""
Route classification.

Every guarded path falls into exactly one category. The
classifier is a pure function of the path; it is evaluated
again for every request.
"""

from drive_crm.models.enums import RouteCategory

PUBLIC_PATHS: frozenset[str] = frozenset({"/", "/register"})
PUBLIC_PREFIX = "/auth"
ADMIN_PREFIX = "/admin"
STAFF_PREFIX = "/staff"

# Paths the guard never sees: health checks, API docs, static assets.
UNGUARDED_PATHS: frozenset[str] = frozenset({
    "/health",
    "/favicon.ico",
    "/openapi.json",
    "/docs",
    "/docs/oauth2-redirect",
    "/redoc",
})
UNGUARDED_PREFIXES: tuple[str, ...] = ("/static/",)


def classify_route(path: str) -> RouteCategory:
    """Map a request path to its access category."""
    if path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIX):
        return RouteCategory.PUBLIC
    if path.startswith(ADMIN_PREFIX):
        return RouteCategory.ADMIN
    if path.startswith(STAFF_PREFIX):
        return RouteCategory.STAFF
    return RouteCategory.OTHER


def is_unguarded_path(path: str) -> bool:
    """
    Paths served without a session check.

    Matching is exact or by directory prefix only; a file
    extension never exempts a path.
    """
    return path in UNGUARDED_PATHS or path.startswith(UNGUARDED_PREFIXES)
