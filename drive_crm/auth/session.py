"""
Session resolution against the hosted auth backend.

The resolver turns a request's cookie jar into an Identity and
a Role. Validating the access token may rotate the session: when
the access token is rejected and a refresh token is present the
resolver exchanges it for a new pair. The cookies the client must
store are returned as CookieMutation values on the SessionResult;
the caller applies them to whatever response it sends.

Resolution never raises: any backend failure makes the
request anonymous.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx
from starlette.responses import Response

from drive_crm.auth.events import AuthEvent, AuthEventChannel
from drive_crm.logging_config import get_logger
from drive_crm.models.enums import Role

log = get_logger("auth.session")

ACCESS_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


class AuthProviderError(Exception):
    """The auth backend rejected a sign-in, sign-up or sign-out call."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class Identity:
    id: str
    email: str | None
    role: Role

    @classmethod
    def from_user(cls, user: Mapping[str, Any]) -> "Identity":
        user_id = user.get("id")
        if not user_id:
            raise ValueError("auth user payload has no id")
        metadata = user.get("user_metadata") or {}
        return cls(
            id=str(user_id),
            email=user.get("email"),
            role=Role.parse(metadata.get("role")),
        )


@dataclass(frozen=True)
class CookieMutation:
    """A cookie the outgoing response must set or delete."""
    name: str
    value: str = ""
    max_age: int | None = None
    delete: bool = False
    secure: bool = False

    def apply(self, response: Response) -> None:
        if self.delete:
            response.delete_cookie(
                self.name, path="/", secure=self.secure, httponly=True,
                samesite="lax",
            )
        else:
            response.set_cookie(
                self.name,
                self.value,
                max_age=self.max_age,
                path="/",
                httponly=True,
                samesite="lax",
                secure=self.secure,
            )


@dataclass(frozen=True)
class SessionResult:
    identity: Identity | None = None
    role: Role = Role.UNKNOWN
    cookies: tuple[CookieMutation, ...] = field(default_factory=tuple)
    access_token: str | None = None

    @classmethod
    def anonymous(cls, cookies: tuple[CookieMutation, ...] = ()) -> "SessionResult":
        return cls(identity=None, role=Role.UNKNOWN, cookies=tuple(cookies))

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def apply_cookies(self, response: Response) -> Response:
        """
        Write the session's cookie mutations onto a response.

        Cookies the endpoint already set (sign-in, sign-out) win
        over the ones produced while resolving the request.
        """
        already_set = {
            header.split("=", 1)[0].strip()
            for header in response.headers.getlist("set-cookie")
        }
        for mutation in self.cookies:
            if mutation.name not in already_set:
                mutation.apply(response)
        return response


class SupabaseAuthProvider:
    """
    Thin client for the hosted auth backend's REST API.

    Each call opens a short-lived httpx.AsyncClient. ``transport``
    lets tests plug in an httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/auth/v1",
            timeout=self.timeout,
            transport=self.transport,
            headers={"apikey": self.anon_key},
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return (
            body.get("error_description")
            or body.get("msg")
            or body.get("message")
            or body.get("error")
            or f"HTTP {response.status_code}"
        )

    async def get_user(self, access_token: str) -> dict | None:
        """Return the user for a valid access token, None if rejected."""
        async with self._client() as client:
            r = await client.get(
                "/user", headers={"Authorization": f"Bearer {access_token}"}
            )
        if r.status_code in (401, 403):
            return None
        r.raise_for_status()
        return r.json()

    async def refresh_session(self, refresh_token: str) -> dict | None:
        """Exchange a refresh token for a new session, None if rejected."""
        async with self._client() as client:
            r = await client.post(
                "/token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": refresh_token},
            )
        if r.status_code in (400, 401, 403):
            return None
        r.raise_for_status()
        return r.json()

    async def sign_in_with_password(self, email: str, password: str) -> dict:
        async with self._client() as client:
            r = await client.post(
                "/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        if r.status_code in (400, 401, 403):
            raise AuthProviderError(self._error_message(r), status_code=401)
        r.raise_for_status()
        return r.json()

    async def sign_up(self, email: str, password: str, metadata: dict) -> dict:
        async with self._client() as client:
            r = await client.post(
                "/signup",
                json={"email": email, "password": password, "data": metadata},
            )
        if 400 <= r.status_code < 500:
            raise AuthProviderError(self._error_message(r), status_code=400)
        r.raise_for_status()
        return r.json()

    async def sign_out(self, access_token: str) -> None:
        async with self._client() as client:
            r = await client.post(
                "/logout", headers={"Authorization": f"Bearer {access_token}"}
            )
        if r.status_code in (401, 403, 404):
            return
        r.raise_for_status()


class SessionResolver:
    """
    Resolves request cookies to a session and owns the auth
    event channel.
    """

    def __init__(self, provider, cookie_secure: bool = False):
        self.provider = provider
        self.cookie_secure = cookie_secure
        self.events = AuthEventChannel()

    # --- Cookie helpers ---

    def session_cookies(self, tokens: Mapping[str, Any]) -> tuple[CookieMutation, ...]:
        expires_in = tokens.get("expires_in")
        return (
            CookieMutation(
                ACCESS_COOKIE,
                tokens["access_token"],
                max_age=int(expires_in) if expires_in else None,
                secure=self.cookie_secure,
            ),
            CookieMutation(
                REFRESH_COOKIE,
                tokens["refresh_token"],
                max_age=REFRESH_COOKIE_MAX_AGE,
                secure=self.cookie_secure,
            ),
        )

    def clear_cookies(self) -> tuple[CookieMutation, ...]:
        return (
            CookieMutation(ACCESS_COOKIE, delete=True, secure=self.cookie_secure),
            CookieMutation(REFRESH_COOKIE, delete=True, secure=self.cookie_secure),
        )

    def _session_from_tokens(self, tokens: Mapping[str, Any]) -> SessionResult:
        identity = Identity.from_user(tokens["user"])
        return SessionResult(
            identity=identity,
            role=identity.role,
            cookies=self.session_cookies(tokens),
            access_token=tokens["access_token"],
        )

    # --- Resolution ---

    async def resolve(self, cookies: Mapping[str, str]) -> SessionResult:
        access_token = cookies.get(ACCESS_COOKIE)
        refresh_token = cookies.get(REFRESH_COOKIE)

        if not access_token and not refresh_token:
            return SessionResult.anonymous()

        try:
            if access_token:
                user = await self.provider.get_user(access_token)
                if user is not None:
                    identity = Identity.from_user(user)
                    return SessionResult(
                        identity=identity,
                        role=identity.role,
                        access_token=access_token,
                    )

            if not refresh_token:
                return SessionResult.anonymous(self.clear_cookies())

            tokens = await self.provider.refresh_session(refresh_token)
            if not tokens or not tokens.get("user"):
                log.info("Refresh token rejected; clearing session cookies")
                self.events.publish(AuthEvent.SIGNED_OUT, None)
                return SessionResult.anonymous(self.clear_cookies())

            session = self._session_from_tokens(tokens)
        except Exception as e:
            log.warning("Session resolution failed, treating as anonymous: %s", e)
            return SessionResult.anonymous()

        log.debug("Refreshed session for user %s", session.identity.id)
        self.events.publish(AuthEvent.TOKEN_REFRESHED, session.identity)
        return session

    # --- Sign-in / sign-up / sign-out ---

    async def sign_in(self, email: str, password: str) -> SessionResult:
        tokens = await self.provider.sign_in_with_password(email, password)
        session = self._session_from_tokens(tokens)
        log.info("User %s signed in", session.identity.id)
        self.events.publish(AuthEvent.SIGNED_IN, session.identity)
        return session

    async def sign_up(self, email: str, password: str, full_name: str) -> SessionResult:
        """
        Register a new rider.

        When the backend confirms the address immediately it
        returns a session and the user is signed in; otherwise
        the result is anonymous until the address is confirmed.
        """
        payload = await self.provider.sign_up(
            email, password, {"full_name": full_name, "role": Role.RIDER.value}
        )
        if payload.get("access_token") and payload.get("user"):
            session = self._session_from_tokens(payload)
            self.events.publish(AuthEvent.SIGNED_IN, session.identity)
            return session
        return SessionResult.anonymous()

    async def sign_out(self, session: SessionResult) -> tuple[CookieMutation, ...]:
        """Revoke the session at the backend and clear the cookies."""
        if session.access_token:
            try:
                await self.provider.sign_out(session.access_token)
            except httpx.HTTPError as e:
                log.warning("Backend sign-out failed, clearing cookies anyway: %s", e)
        self.events.publish(AuthEvent.SIGNED_OUT, session.identity)
        return self.clear_cookies()


def build_session_resolver(settings) -> SessionResolver:
    provider = SupabaseAuthProvider(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        timeout=settings.AUTH_TIMEOUT_SECONDS,
    )
    return SessionResolver(provider, cookie_secure=settings.COOKIE_SECURE)
