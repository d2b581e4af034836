"""
Access decision engine.

decide() is the whole access policy: a pure function from the
resolved session and the route category to either Allow or a
redirect. Applying the redirect is the caller's job.

Rules, first match wins:

1. Anonymous on a non-public route  -> "/"
2. Signed in on a public route      -> the role's landing page
3. Admin route, role is not admin   -> "/account"
4. Staff route, role not admin or instructor -> "/account"
5. Anything else                    -> Allow

Admins pass the staff check; nothing lets staff into the admin
zone. The ``staff`` role itself does not open the staff zone.
"""

from dataclasses import dataclass

from drive_crm.models.enums import Role, RouteCategory


HOME_PATH = "/"
ADMIN_HOME = "/admin"
STAFF_HOME = "/staff"
ACCOUNT_HOME = "/account"

STAFF_ZONE_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.INSTRUCTOR})


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str


Decision = Allow | RedirectTo

ALLOW = Allow()


def landing_path_for(role: Role) -> str:
    """Where a signed-in user is sent from the public pages."""
    if role == Role.ADMIN:
        return ADMIN_HOME
    if role == Role.INSTRUCTOR:
        return STAFF_HOME
    return ACCOUNT_HOME


def decide(identity, role: Role, category: RouteCategory) -> Decision:
    role = Role.parse(role)

    if identity is None and category != RouteCategory.PUBLIC:
        return RedirectTo(HOME_PATH)

    if identity is not None and category == RouteCategory.PUBLIC:
        return RedirectTo(landing_path_for(role))

    if category == RouteCategory.ADMIN and role != Role.ADMIN:
        return RedirectTo(ACCOUNT_HOME)

    if category == RouteCategory.STAFF and role not in STAFF_ZONE_ROLES:
        return RedirectTo(ACCOUNT_HOME)

    return ALLOW
